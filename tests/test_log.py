"""测试 savetable 日志模块."""

import logging

from savetable.log import get_hexdump, logger


def test_logger_config() -> None:
    """验证 Logger 默认配置不包含 Handler 且名称正确."""
    assert logger.name == "savetable"
    assert not logger.handlers
    assert logger.level == logging.NOTSET


def test_get_hexdump_basic() -> None:
    """get_hexdump() 应正确格式化十六进制数据."""
    dump = get_hexdump(b"\x01\x02\x03", pos=1, window=1)

    assert "01 02" in dump.lower()
    assert "偏移 1" in dump


def test_get_hexdump_boundaries() -> None:
    """get_hexdump() 应正确处理数据起始和结束边界."""
    data = b"\xaa\xbb\xcc"

    assert "aa" in get_hexdump(data, pos=0, window=1).lower()
    assert "bb cc" in get_hexdump(data, pos=2, window=1).lower()


def test_get_hexdump_empty() -> None:
    """get_hexdump() 应能处理空字节输入而不报错."""
    dump = get_hexdump(b"", pos=0)
    assert "偏移 0" in dump


def test_get_hexdump_memoryview() -> None:
    """get_hexdump() 应接受 memoryview 输入."""
    dump = get_hexdump(memoryview(b"\x0a\x0b"), pos=0)
    assert "0a 0b" in dump
