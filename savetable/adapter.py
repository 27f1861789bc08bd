"""记录类型适配器.

提供类似于 Pydantic TypeAdapter 的接口,
用于把解码出的通用值树验证为用户定义的模型.
"""

from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from .tree import RecordTree, Table, to_plain

T = TypeVar("T")


class RecordAdapter(Generic[T]):
    """记录类型适配器.

    值树先转换为普通 dict, 再交给 `pydantic.TypeAdapter` 验证.

    Examples:
        >>> class Unit(BaseModel):
        ...     hp: int
        ...     pos: list[int]
        >>> adapter = RecordAdapter(Unit)
        >>> units = adapter.validate_table(table)
    """

    def __init__(self, type_: type[T] | Any):
        """初始化记录类型适配器.

        Args:
            type_: 目标类型 (如 BaseModel 子类, TypedDict, dict[str, int] 等).
        """
        self._type = type_
        self._pydantic_adapter = TypeAdapter(type_)

    def validate_record(
        self, record: RecordTree, *, context: dict[str, Any] | None = None
    ) -> T:
        """验证单条记录.

        Raises:
            pydantic.ValidationError: 记录不符合目标类型.
            UnimplementedPrimitiveKind: 记录中包含字符串类值.
        """
        return self._pydantic_adapter.validate_python(
            to_plain(record), context=context
        )

    def validate_table(
        self, table: Table, *, context: dict[str, Any] | None = None
    ) -> list[T]:
        """按读取顺序验证整张表."""
        return [self.validate_record(record, context=context) for record in table]
