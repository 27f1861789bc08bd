"""存档表格数据类型模块.

本模块定义了表头中出现的所有基本类型 (`PrimitiveKind`)、
基数 (`Cardinality`) 以及标签字节的解码函数 `decode_tag`.
"""

from enum import Enum, IntEnum

from . import const
from .exceptions import InvalidPrimitiveKind
from .stream import has_bit


class PrimitiveKind(IntEnum):
    """标签字节低 4 位对应的基本类型.

    `FILE_END` 只作为表头结束哨兵使用, 不应作为运行时值出现.
    """

    FILE_END = const.FILE_END
    INT8 = const.INT8
    UINT8 = const.UINT8
    INT16 = const.INT16
    UINT16 = const.UINT16
    INT32 = const.INT32
    UINT32 = const.UINT32
    INT64 = const.INT64
    UINT64 = const.UINT64
    STRING_ID = const.STRING_ID
    STRING = const.STRING
    STRUCT = const.STRUCT

    @property
    def is_fixed_width(self) -> bool:
        """是否为定宽整数类型."""
        return self in _INT_LAYOUT

    @property
    def width(self) -> int:
        """整数类型的字节宽度.

        Raises:
            ValueError: 如果该类型不是定宽整数.
        """
        try:
            return _INT_LAYOUT[self][0]
        except KeyError:
            raise ValueError(f"{self.name} has no fixed width") from None

    @property
    def signed(self) -> bool:
        """整数类型是否有符号."""
        try:
            return _INT_LAYOUT[self][1]
        except KeyError:
            raise ValueError(f"{self.name} has no signedness") from None

    def __str__(self) -> str:
        return self.name


# (字节宽度, 是否有符号)
_INT_LAYOUT: dict[PrimitiveKind, tuple[int, bool]] = {
    PrimitiveKind.INT8: (1, True),
    PrimitiveKind.UINT8: (1, False),
    PrimitiveKind.INT16: (2, True),
    PrimitiveKind.UINT16: (2, False),
    PrimitiveKind.INT32: (4, True),
    PrimitiveKind.UINT32: (4, False),
    PrimitiveKind.INT64: (8, True),
    PrimitiveKind.UINT64: (8, False),
}


class Cardinality(Enum):
    """字段基数: 单值或带计数前缀的列表."""

    SCALAR = "scalar"
    LIST = "list"


def decode_tag(byte: int) -> tuple[Cardinality, PrimitiveKind] | None:
    """解码一个表头标签字节.

    bit 0-3 为类型半字节, bit 4 为列表标志, bit 5-7 保留且不做校验.

    Args:
        byte: 标签字节 (0-255).

    Returns:
        `None` 表示本层结束; 否则为 (基数, 类型).

    Raises:
        InvalidPrimitiveKind: 类型半字节为 12-15.
        ValueError: 参数不是一个字节.
    """
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"Tag must be a single byte, got {byte}")
    if byte == const.TERMINATOR:
        return None

    nibble = byte & const.KIND_MASK
    try:
        kind = PrimitiveKind(nibble)
    except ValueError:
        raise InvalidPrimitiveKind(nibble) from None

    if has_bit(byte, const.LIST_FLAG_BIT):
        return Cardinality.LIST, kind
    return Cardinality.SCALAR, kind
