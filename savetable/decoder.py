"""存档表格解码器实现.

该模块提供按表头逐字段解码的记录解码器 (`decode_field`, `decode_record`)
以及建立在其上的 `TableDecoder` (稠密表与稀疏表两种迭代方式).

表格帧格式:

    gamma(size + 1) [gamma(index)] <record>  ...  gamma(0)

其中 `index` 只存在于稀疏表, `size` 仅供参考, 从不用于定界.
"""

from .config import Config
from .context import TableEvent, TableKind
from .exceptions import (
    DecodeError,
    InternalInvariantViolation,
    UnimplementedPrimitiveKind,
)
from .log import logger
from .schema import Schema, SchemaNode
from .stream import DataReader
from .tree import ListValue, ParsedField, RecordTree, ScalarValue, Table, TypedValue
from .types import PrimitiveKind

# 安全限制
MAX_LIST_LENGTH = 10_000_000  # 1000万元素


def read_primitive(reader: DataReader, kind: PrimitiveKind) -> TypedValue:
    """读取一个定宽基本类型值.

    Raises:
        UnimplementedPrimitiveKind: STRING_ID / STRING 没有可用的解码方式.
        InternalInvariantViolation: FILE_END 不能作为字段值.
    """
    if kind.is_fixed_width:
        return TypedValue(kind, reader.read_int(kind.width, kind.signed))
    if kind in (PrimitiveKind.STRING_ID, PrimitiveKind.STRING):
        raise UnimplementedPrimitiveKind(kind)
    if kind is PrimitiveKind.FILE_END:
        raise InternalInvariantViolation("FILE_END cannot be read as a field value")
    # STRUCT 由 decode_field 通过子表头处理
    raise InternalInvariantViolation(f"{kind!r} is not a primitive")


def decode_record(schema: Schema, reader: DataReader) -> RecordTree:
    """按表头顺序解码一条完整记录 (或一个嵌套结构体)."""
    return RecordTree([decode_field(node, reader) for node in schema])


def decode_field(node: SchemaNode, reader: DataReader) -> ParsedField:
    """解码单个字段的值.

    读取器恰好前进该字段 (含所有嵌套内容) 占用的字节数.

    Args:
        node: 字段的表头节点.
        reader: 定位在字段值起始处的读取器.

    Returns:
        带字段名的解码结果.
    """
    try:
        if node.is_list:
            count = reader.read_gamma()
            if count > MAX_LIST_LENGTH:
                raise DecodeError(
                    f"List length {count} exceeds max limit {MAX_LIST_LENGTH}",
                    offset=reader.offset,
                )
            items = []
            for i in range(count):
                try:
                    items.append(_decode_value(node, reader))
                except DecodeError as e:
                    e.loc.insert(0, i)
                    raise
            data: ScalarValue | ListValue = ListValue(tuple(items))
        else:
            data = ScalarValue(_decode_value(node, reader))
    except DecodeError as e:
        e.loc.insert(0, node.key)
        if e.offset is None:
            e.offset = reader.offset
        raise
    return ParsedField(node.key, data)


def _decode_value(node: SchemaNode, reader: DataReader) -> TypedValue:
    if node.children is not None:
        return TypedValue(PrimitiveKind.STRUCT, decode_record(node.children, reader))
    return read_primitive(reader, node.kind)


class TableDecoder:
    """基于表头的表格解码器.

    表头在构造时给定, 可用于依次解码多张表 (相同或不同的流),
    但不可在同一个流上并发使用.
    """

    __slots__ = ("_config", "_reader", "_schema")

    _reader: DataReader
    _schema: Schema
    _config: Config

    def __init__(
        self, reader: DataReader, schema: Schema, config: Config | None = None
    ):
        self._reader = reader
        self._schema = schema
        self._config = config if config is not None else Config()

    def read_table(self) -> Table:
        """解码一张稠密表, 记录按位置隐式编号.

        Raises:
            DecodeError: 结束哨兵之前的任何失败都会中止整张表的读取.
        """
        records = Table()
        self._read_records("dense", records, None)
        return records

    def read_sparse_table(self) -> Table:
        """解码一张稀疏表, 每条记录前带一个显式索引.

        表格顺序为读取顺序, 不一定按索引升序.
        """
        indices: list[int] = []
        records = Table(indices=indices)
        self._read_records("sparse", records, indices)
        return records

    def _read_records(
        self, kind: TableKind, records: Table, indices: list[int] | None
    ) -> None:
        reader = self._reader
        start = reader.offset
        logger.debug("[TableDecoder] 开始解码%s表, 偏移 %d", _TABLE_NAMES[kind], start)

        while True:
            size_plus_one = reader.read_gamma()
            if size_plus_one == 0:
                break
            # 声明大小仅供诊断, 真实边界完全由表头决定
            size = size_plus_one - 1

            if indices is None:
                index = len(records)
            else:
                index = reader.read_gamma()
                indices.append(index)

            self._notify(kind, index, size)

            try:
                records.append(decode_record(self._schema, reader))
            except DecodeError as e:
                e.loc.insert(0, index)
                logger.debug("[TableDecoder] 记录 %d 解码失败: %s", index, e)
                raise

        logger.debug(
            "[TableDecoder] 成功解码 %d 条记录, 共 %d 字节",
            len(records),
            reader.offset - start,
        )

    def _notify(self, kind: TableKind, index: int, size: int) -> None:
        offset = self._reader.offset
        if self._config.trace:
            logger.debug(
                "[TableDecoder] 记录 %d: 声明大小 %d 字节, 偏移 %d", index, size, offset
            )
        if self._config.on_event is not None:
            self._config.on_event(
                TableEvent(kind=kind, index=index, size=size, offset=offset)
            )


_TABLE_NAMES: dict[TableKind, str] = {"dense": "稠密", "sparse": "稀疏"}
