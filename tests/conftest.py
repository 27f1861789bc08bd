"""提供 savetable 测试的公共 Fixtures 和字节构造工具.

库本身不包含写入器, 这里的构造函数只用于生成测试输入.
"""

import struct
from typing import NamedTuple

import pytest

from savetable import PrimitiveKind

# ==========================================
# 字节构造工具
# ==========================================

_INT_FORMATS = {
    PrimitiveKind.INT8: ">b",
    PrimitiveKind.UINT8: ">B",
    PrimitiveKind.INT16: ">h",
    PrimitiveKind.UINT16: ">H",
    PrimitiveKind.INT32: ">i",
    PrimitiveKind.UINT32: ">I",
    PrimitiveKind.INT64: ">q",
    PrimitiveKind.UINT64: ">Q",
}


def gamma(value: int) -> bytes:
    """按前导 1 计数的前缀码编码非负整数."""
    for extra in range(9):
        payload_bits = max(0, 7 - extra) + 8 * extra
        if value < (1 << payload_bits):
            raw = value.to_bytes(extra + 1, "big")
            prefix = (0xFF << (8 - extra)) & 0xFF
            return bytes([prefix | raw[0]]) + raw[1:]
    raise ValueError(f"value too large: {value}")


def text(value: str) -> bytes:
    """带 gamma 长度前缀的 UTF-8 字符串."""
    data = value.encode("utf-8")
    return gamma(len(data)) + data


def tag(kind: PrimitiveKind, is_list: bool = False) -> bytes:
    """表头标签字节."""
    return bytes([int(kind) | (0x10 if is_list else 0)])


def num(kind: PrimitiveKind, value: int) -> bytes:
    """大端定宽整数."""
    return struct.pack(_INT_FORMATS[kind], value)


class F(NamedTuple):
    """测试用表头字段描述."""

    key: str
    kind: PrimitiveKind
    is_list: bool = False
    children: tuple["F", ...] | None = None


def header(fields: list[F] | tuple[F, ...]) -> bytes:
    """按两阶段布局编码表头: 先写本层全部字段和结束符, 再依次写各 Struct 的子表头."""
    out = bytearray()
    for f in fields:
        out += tag(f.kind, f.is_list) + text(f.key)
    out.append(0)
    for f in fields:
        if f.kind is PrimitiveKind.STRUCT:
            out += header(f.children or ())
    return bytes(out)


def dense(*records: bytes, size: int = 0) -> bytes:
    """稠密表: 每条记录前写 gamma(size + 1), 以 gamma(0) 结束."""
    out = bytearray()
    for record in records:
        out += gamma(size + 1) + record
    out += gamma(0)
    return bytes(out)


def sparse(*entries: tuple[int, bytes], size: int = 0) -> bytes:
    """稀疏表: 每条记录前写 gamma(size + 1) 和 gamma(index)."""
    out = bytearray()
    for index, record in entries:
        out += gamma(size + 1) + gamma(index) + record
    out += gamma(0)
    return bytes(out)


# ==========================================
# 基础测试表头
# ==========================================

P = PrimitiveKind

SAMPLE_FIELDS = (
    F("a", P.INT32),
    F("b", P.UINT8, is_list=True),
    F("c", P.STRUCT, children=(F("d", P.INT16),)),
)


def sample_record(a: int = 7, b: tuple[int, ...] = (1, 2, 3), d: int = -5) -> bytes:
    """SAMPLE_FIELDS 对应的一条记录."""
    return (
        num(P.INT32, a)
        + gamma(len(b))
        + b"".join(num(P.UINT8, x) for x in b)
        + num(P.INT16, d)
    )


@pytest.fixture
def sample_header() -> bytes:
    """提供 a: INT32, b: List<UINT8>, c: {d: INT16} 的表头字节."""
    return header(SAMPLE_FIELDS)


@pytest.fixture
def sample_file(sample_header: bytes) -> bytes:
    """提供表头加一张包含两条记录的稠密表.

    Returns:
        bytes: 第一条记录 a=7, 第二条记录 a=8, b=[], c.d=300.
    """
    return sample_header + dense(sample_record(), sample_record(8, (), 300))
