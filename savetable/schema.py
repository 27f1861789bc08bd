"""表头 (Schema) 定义与解析模块.

表头递归描述了字段名、基本类型和基数. 解析分两个阶段进行:
先读完同一层的全部兄弟字段, 再按顺序为每个 Struct 字段解析其子表头.
"""

from pydantic import BaseModel, ConfigDict, field_serializer, model_validator

from .exceptions import DecodeError
from .log import logger
from .stream import DataReader
from .types import Cardinality, PrimitiveKind, decode_tag

# 安全限制
MAX_SCHEMA_DEPTH = 100


class SchemaNode(BaseModel):
    """表头中的一个字段.

    构造后不可变, 在同一张表的所有记录解码之间只读共享.

    Attributes:
        key: 字段名.
        cardinality: 单值或列表.
        kind: 基本类型.
        children: 子字段, 当且仅当 `kind` 为 STRUCT 时存在.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    cardinality: Cardinality
    kind: PrimitiveKind
    children: tuple["SchemaNode", ...] | None = None

    @model_validator(mode="after")
    def _check_children(self) -> "SchemaNode":
        is_struct = self.kind is PrimitiveKind.STRUCT
        if is_struct and self.children is None:
            raise ValueError(f"Struct field {self.key!r} requires children")
        if not is_struct and self.children is not None:
            raise ValueError(
                f"Field {self.key!r} of kind {self.kind.name} cannot have children"
            )
        return self

    @field_serializer("kind")
    def _serialize_kind(self, kind: PrimitiveKind) -> str:
        return kind.name

    @field_serializer("cardinality")
    def _serialize_cardinality(self, cardinality: Cardinality) -> str:
        return cardinality.value

    @property
    def is_list(self) -> bool:
        """是否为带计数前缀的列表字段."""
        return self.cardinality is Cardinality.LIST


Schema = tuple[SchemaNode, ...]


def read_table_header(reader: DataReader) -> Schema:
    """从流中解析完整的表头.

    Args:
        reader: 定位在表头起始处的读取器.

    Returns:
        顶层字段序列 (嵌套层已全部解析).

    Raises:
        UnexpectedEndOfStream: 在读取标签或字段名时流结束.
        InvalidPrimitiveKind: 标签字节的类型半字节未知.
    """
    start = reader.offset
    logger.debug("[read_table_header] 开始解析表头, 偏移 %d", start)
    schema = _read_level(reader, depth=0)
    logger.debug(
        "[read_table_header] 解析完成: %d 个顶层字段, 共 %d 字节",
        len(schema),
        reader.offset - start,
    )
    return schema


def _read_level(reader: DataReader, depth: int) -> Schema:
    if depth > MAX_SCHEMA_DEPTH:
        raise DecodeError(
            f"Schema nesting exceeds max depth {MAX_SCHEMA_DEPTH}",
            offset=reader.offset,
        )

    # 阶段 1: 读取本层全部兄弟字段, 直到结束标签
    pending: list[tuple[str, Cardinality, PrimitiveKind]] = []
    while True:
        tag_offset = reader.offset
        try:
            decoded = decode_tag(reader.read_u8())
        except DecodeError as e:
            if e.offset is None:
                e.offset = tag_offset
            raise
        if decoded is None:
            break
        cardinality, kind = decoded
        pending.append((reader.read_str(), cardinality, kind))

    # 阶段 2: 子表头按 Struct 兄弟字段的顺序依次紧随其后
    nodes: list[SchemaNode] = []
    for key, cardinality, kind in pending:
        children = None
        if kind is PrimitiveKind.STRUCT:
            try:
                children = _read_level(reader, depth + 1)
            except DecodeError as e:
                e.loc.insert(0, key)
                raise
        nodes.append(
            SchemaNode(key=key, cardinality=cardinality, kind=kind, children=children)
        )
    return tuple(nodes)


def dump_schema(schema: Schema) -> list[dict]:
    """将表头转换为可 JSON 序列化的嵌套字典列表."""
    return [node.model_dump(exclude_none=True) for node in schema]
