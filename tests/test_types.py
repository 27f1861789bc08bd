"""测试标签字节解码与基本类型."""

import pytest

from savetable import Cardinality, InvalidPrimitiveKind, PrimitiveKind, decode_tag
from savetable.exceptions import DecodeError


def test_decode_terminator() -> None:
    """字节 0 表示本层结束."""
    assert decode_tag(0) is None


@pytest.mark.parametrize("byte", [b for b in range(1, 256) if b & 0x0F < 12])
def test_decode_all_valid_bytes(byte: int) -> None:
    """任意非零字节: 基数取 bit 4, 类型取低 4 位."""
    cardinality, kind = decode_tag(byte)

    expected = Cardinality.LIST if (byte >> 4) & 1 else Cardinality.SCALAR
    assert cardinality is expected
    assert kind is PrimitiveKind(byte & 0x0F)


@pytest.mark.parametrize("high", range(16))
@pytest.mark.parametrize("nibble", [12, 13, 14, 15])
def test_decode_invalid_nibble(high: int, nibble: int) -> None:
    """类型半字节 12-15 必须抛出 InvalidPrimitiveKind, 与高位无关."""
    with pytest.raises(InvalidPrimitiveKind) as exc_info:
        decode_tag((high << 4) | nibble)

    assert exc_info.value.nibble == nibble
    assert isinstance(exc_info.value, DecodeError)
    assert isinstance(exc_info.value, ValueError)


def test_reserved_bits_ignored() -> None:
    """bit 5-7 不参与解码, 也不做校验."""
    assert decode_tag(0x05) == (Cardinality.SCALAR, PrimitiveKind.INT32)
    assert decode_tag(0xE5) == (Cardinality.SCALAR, PrimitiveKind.INT32)
    assert decode_tag(0xF5) == (Cardinality.LIST, PrimitiveKind.INT32)


def test_list_flag_with_zero_nibble() -> None:
    """0x10 不是结束符, 而是 FILE_END 类型的列表字段."""
    assert decode_tag(0x10) == (Cardinality.LIST, PrimitiveKind.FILE_END)


def test_struct_tags() -> None:
    """0x0B / 0x1B 分别为单值和列表结构体."""
    assert decode_tag(0x0B) == (Cardinality.SCALAR, PrimitiveKind.STRUCT)
    assert decode_tag(0x1B) == (Cardinality.LIST, PrimitiveKind.STRUCT)


@pytest.mark.parametrize("byte", [-1, 256, 1000])
def test_decode_rejects_non_byte(byte: int) -> None:
    """超出 0-255 的参数应抛出 ValueError."""
    with pytest.raises(ValueError):
        decode_tag(byte)


@pytest.mark.parametrize(
    ("kind", "width", "signed"),
    [
        (PrimitiveKind.INT8, 1, True),
        (PrimitiveKind.UINT8, 1, False),
        (PrimitiveKind.INT16, 2, True),
        (PrimitiveKind.UINT16, 2, False),
        (PrimitiveKind.INT32, 4, True),
        (PrimitiveKind.UINT32, 4, False),
        (PrimitiveKind.INT64, 8, True),
        (PrimitiveKind.UINT64, 8, False),
    ],
)
def test_integer_layout(kind: PrimitiveKind, width: int, signed: bool) -> None:
    """整数类型的宽度和符号性."""
    assert kind.is_fixed_width
    assert kind.width == width
    assert kind.signed is signed


@pytest.mark.parametrize(
    "kind",
    [
        PrimitiveKind.FILE_END,
        PrimitiveKind.STRING_ID,
        PrimitiveKind.STRING,
        PrimitiveKind.STRUCT,
    ],
)
def test_non_integer_has_no_width(kind: PrimitiveKind) -> None:
    """非整数类型没有固定宽度."""
    assert not kind.is_fixed_width
    with pytest.raises(ValueError):
        _ = kind.width


def test_kind_str() -> None:
    """str() 输出类型名称."""
    assert str(PrimitiveKind.STRING_ID) == "STRING_ID"
