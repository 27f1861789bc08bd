"""类型化值树模块.

解码结果由以下类型组成:

    Table       -> list[RecordTree]
    RecordTree  -> tuple[ParsedField, ...]  (顺序与表头一致)
    ParsedField -> (key, ScalarValue | ListValue)
    TypedValue  -> (kind, int | RecordTree | None)

`emit` 以访问者模式把值树交给任意结构化输出后端,
`PlainVisitor` / `to_plain` 将其转换为 dict/list/int.
"""

import abc
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from .exceptions import InternalInvariantViolation, UnimplementedPrimitiveKind
from .types import PrimitiveKind


@dataclass(frozen=True, slots=True)
class TypedValue:
    """带类型标记的单个值.

    Attributes:
        kind: 基本类型.
        value: 整数类型为 `int`, STRUCT 为 `RecordTree`,
            STRING_ID / STRING 暂无载荷 (`None`).
    """

    kind: PrimitiveKind
    value: Union[int, "RecordTree", None] = None


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """单值字段."""

    value: TypedValue


@dataclass(frozen=True, slots=True)
class ListValue:
    """列表字段, 长度由元素前的计数决定."""

    items: tuple[TypedValue, ...]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[TypedValue]:
        return iter(self.items)


FieldValue = ScalarValue | ListValue


@dataclass(frozen=True, slots=True)
class ParsedField:
    """一个已解码的字段: 字段名与值."""

    key: str
    data: FieldValue


class RecordTree:
    """一条已解码的记录 (或嵌套结构体).

    字段顺序与表头一致, 构造后不可变.
    支持按字段名读取: `record["a"]`, `"a" in record`, `record.keys()`.
    """

    __slots__ = ("_fields",)

    _fields: tuple[ParsedField, ...]

    def __init__(self, fields: tuple[ParsedField, ...] | list[ParsedField] = ()):
        self._fields = tuple(fields)

    @property
    def fields(self) -> tuple[ParsedField, ...]:
        """按表头顺序排列的字段."""
        return self._fields

    def keys(self) -> list[str]:
        return [f.key for f in self._fields]

    def __getitem__(self, key: str) -> FieldValue:
        for f in self._fields:
            if f.key == key:
                return f.data
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return any(f.key == key for f in self._fields)

    def __iter__(self) -> Iterator[ParsedField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordTree):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        inner = ", ".join(f"{f.key}={f.data!r}" for f in self._fields)
        return f"RecordTree({inner})"


class Table(list[RecordTree]):
    """一张表的记录序列, 顺序为读取顺序.

    稠密表按位置隐式编号 (`indices is None`);
    稀疏表在 `indices` 中保留每条记录读取到的显式索引.
    """

    def __init__(self, records: Any = (), indices: list[int] | None = None) -> None:
        super().__init__(records)
        self.indices = indices

    @property
    def is_sparse(self) -> bool:
        """是否为稀疏表."""
        return self.indices is not None

    def items(self) -> Iterator[tuple[int, RecordTree]]:
        """迭代 (索引, 记录). 稠密表的索引即位置."""
        if self.indices is None:
            return iter(enumerate(self))
        return zip(self.indices, self)


class TreeVisitor(abc.ABC):
    """结构化输出后端的访问者接口.

    `emit` 自底向上调用这些方法, 子节点的返回值作为参数传入.
    """

    @abc.abstractmethod
    def visit_record(self, record: RecordTree, fields: list[tuple[str, Any]]) -> Any:
        """输出一个对象, `fields` 为按表头顺序的 (字段名, 已输出值)."""

    @abc.abstractmethod
    def visit_list(self, items: list[Any]) -> Any:
        """输出一个数组."""

    @abc.abstractmethod
    def visit_int(self, kind: PrimitiveKind, value: int) -> Any:
        """输出一个整数叶子节点."""


def emit(obj: RecordTree | FieldValue | TypedValue, visitor: TreeVisitor) -> Any:
    """将值树交给访问者输出.

    Raises:
        UnimplementedPrimitiveKind: 遇到 STRING_ID / STRING 值.
        InternalInvariantViolation: 遇到 FILE_END 值.
    """
    if isinstance(obj, RecordTree):
        return visitor.visit_record(
            obj, [(f.key, emit(f.data, visitor)) for f in obj.fields]
        )
    if isinstance(obj, ScalarValue):
        return emit(obj.value, visitor)
    if isinstance(obj, ListValue):
        return visitor.visit_list([emit(item, visitor) for item in obj.items])
    if isinstance(obj, TypedValue):
        return _emit_typed(obj, visitor)
    raise TypeError(f"Cannot emit {type(obj).__name__}")


def _emit_typed(typed: TypedValue, visitor: TreeVisitor) -> Any:
    kind = typed.kind
    if kind is PrimitiveKind.STRUCT:
        if not isinstance(typed.value, RecordTree):
            raise InternalInvariantViolation("STRUCT value without record")
        return emit(typed.value, visitor)
    if kind in (
        PrimitiveKind.INT8,
        PrimitiveKind.UINT8,
        PrimitiveKind.INT16,
        PrimitiveKind.UINT16,
        PrimitiveKind.INT32,
        PrimitiveKind.UINT32,
        PrimitiveKind.INT64,
        PrimitiveKind.UINT64,
    ):
        return visitor.visit_int(kind, typed.value)  # type: ignore[arg-type]
    if kind in (PrimitiveKind.STRING_ID, PrimitiveKind.STRING):
        raise UnimplementedPrimitiveKind(kind)
    if kind is PrimitiveKind.FILE_END:
        raise InternalInvariantViolation("FILE_END must never appear as a value")
    raise InternalInvariantViolation(f"Unhandled primitive kind: {kind!r}")


class PlainVisitor(TreeVisitor):
    """输出普通 Python 对象 (dict / list / int)."""

    def visit_record(self, record: RecordTree, fields: list[tuple[str, Any]]) -> Any:
        return dict(fields)

    def visit_list(self, items: list[Any]) -> Any:
        return items

    def visit_int(self, kind: PrimitiveKind, value: int) -> Any:
        return value


def to_plain(
    obj: Table | RecordTree | FieldValue | TypedValue,
    *,
    sparse_as_map: bool = False,
) -> Any:
    """递归将值树转换为普通 Python 对象.

    - RecordTree -> dict (键顺序与表头一致)
    - ListValue / Table -> list
    - 整数 -> int
    - 稀疏表且 `sparse_as_map=True` -> {index: dict}

    Raises:
        ValueError: `sparse_as_map=True` 但稀疏表中存在重复索引.
    """
    visitor = PlainVisitor()
    if isinstance(obj, Table):
        if sparse_as_map and obj.is_sparse:
            as_map: dict[int, Any] = {}
            for index, record in obj.items():
                if index in as_map:
                    raise ValueError(
                        f"Duplicate sparse index {index} cannot be keyed as a map"
                    )
                as_map[index] = emit(record, visitor)
            return as_map
        return [emit(record, visitor) for record in obj]
    return emit(obj, visitor)
