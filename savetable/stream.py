"""存档表格底层读取模块.

该模块提供 `DataReader`, 它包装内存数据或二进制流,
并实现解码内核依赖的基本读取操作:
定宽大端整数、gamma 变长整数和带长度前缀的字符串.
"""

import io
import struct
from typing import IO

from .exceptions import DecodeError, UnexpectedEndOfStream

# 预编译的结构体打包器 (大端), 键为 (字节宽度, 是否有符号)
_STRUCTS: dict[tuple[int, bool], struct.Struct] = {
    (1, True): struct.Struct(">b"),
    (1, False): struct.Struct(">B"),
    (2, True): struct.Struct(">h"),
    (2, False): struct.Struct(">H"),
    (4, True): struct.Struct(">i"),
    (4, False): struct.Struct(">I"),
    (8, True): struct.Struct(">q"),
    (8, False): struct.Struct(">Q"),
}

# 安全限制
MAX_STRING_LENGTH = 16 * 1024 * 1024  # 16MB


def has_bit(value: int, bit: int) -> bool:
    """检查 `value` 的第 `bit` 位是否置位."""
    return (value >> bit) & 1 == 1


class DataReader:
    """存档数据的顺序读取器.

    包装 `bytes` 或任意可读的二进制流, 只向前读取,
    并自行记录已消耗的字节数 (用于诊断, 不需要 seek).
    """

    __slots__ = ("_fp", "_pos")

    _fp: IO[bytes]
    _pos: int

    def __init__(self, source: bytes | bytearray | memoryview | IO[bytes]):
        """初始化DataReader.

        Args:
            source: 二进制数据或已打开的二进制流.
        """
        if isinstance(source, bytes | bytearray | memoryview):
            source = io.BytesIO(bytes(source))
        self._fp = source
        self._pos = 0

    @property
    def offset(self) -> int:
        """已读取的字节数 (相对于读取器创建时的位置)."""
        return self._pos

    def read_bytes(self, length: int) -> bytes:
        """读取字节序列.

        Args:
            length: 要读取的字节数.

        Returns:
            包含数据的bytes.

        Raises:
            UnexpectedEndOfStream: 如果没有足够的数据可用.
        """
        if length < 0:
            raise DecodeError(
                f"Cannot read negative bytes: {length}", offset=self._pos
            )

        chunks = []
        remaining = length
        while remaining:
            chunk = self._fp.read(remaining)
            if not chunk:
                raise UnexpectedEndOfStream(
                    f"Not enough data to read {length} bytes", offset=self._pos
                )
            chunks.append(chunk)
            remaining -= len(chunk)

        self._pos += length
        return b"".join(chunks)

    def read_u8(self) -> int:
        """读取无符号8位整数."""
        return self.read_bytes(1)[0]

    def read_int(self, width: int, signed: bool) -> int:
        """读取大端定宽整数.

        Args:
            width: 字节宽度 (1, 2, 4 或 8).
            signed: 是否按有符号整数解释.
        """
        try:
            packer = _STRUCTS[(width, signed)]
        except KeyError:
            raise ValueError(f"Unsupported integer width: {width}") from None
        return packer.unpack(self.read_bytes(width))[0]

    def read_gamma(self) -> int:
        """读取自定界的 gamma 变长无符号整数.

        首字节中前导 1 的个数 n 即后续字节数, 首字节剩余的低位
        是数值的最高位, 其后 n 个字节按大端顺序拼接:

            0xxxxxxx                      0 - 127
            10xxxxxx xxxxxxxx             最多 14 位
            ...
            11111111 + 8 字节              完整 64 位
        """
        first = self.read_u8()
        extra = 8 - (~first & 0xFF).bit_length()
        value = first & (0xFF >> (extra + 1))
        if extra:
            tail = self.read_bytes(extra)
            value = (value << (8 * extra)) | int.from_bytes(tail, "big")
        return value

    def read_str(self) -> str:
        """读取带 gamma 长度前缀的 UTF-8 字符串."""
        start = self._pos
        length = self.read_gamma()
        if length > MAX_STRING_LENGTH:
            raise DecodeError(
                f"String length {length} exceeds max limit {MAX_STRING_LENGTH}",
                offset=start,
            )
        data = self.read_bytes(length)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 string: {e}", offset=start) from e
