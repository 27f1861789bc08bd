"""savetable API模块.

提供读取存档表格的高级接口 `load_header`, `load_table`, `load`, `loads`,
以及输出 JSON 的 `dumps_json`.
"""

import json
from typing import IO, Any

from .config import Config
from .context import EventHook
from .decoder import TableDecoder
from .exceptions import SaveTableError
from .log import get_hexdump, logger
from .options import Option
from .schema import Schema, read_table_header
from .stream import DataReader
from .tree import Table, to_plain

Source = bytes | bytearray | memoryview | IO[bytes] | DataReader


def _as_reader(source: Source) -> DataReader:
    if isinstance(source, DataReader):
        return source
    return DataReader(source)


def load_header(source: Source) -> Schema:
    """读取表头.

    Args:
        source: 二进制数据、已打开的二进制流或 `DataReader`.
            传入 `DataReader` 时可以在同一个流上继续读取表格.

    Returns:
        Schema: 顶层字段序列.

    Raises:
        UnexpectedEndOfStream: 表头被截断.
        InvalidPrimitiveKind: 标签字节不合法.
    """
    return read_table_header(_as_reader(source))


def load_table(
    source: Source,
    schema: Schema,
    *,
    sparse: bool = False,
    option: Option = Option.NONE,
    on_event: EventHook | None = None,
) -> Table:
    """按给定表头读取一张表.

    Args:
        source: 定位在表格起始处的数据源.
        schema: 由 `load_header` 得到的表头, 可在多张表之间复用.
        sparse: 是否为稀疏表 (每条记录带显式索引).
        option: 解码选项 (如 `Option.TRACE`).
        on_event: 观察者回调, 每条记录调用一次, 不影响解码.

    Returns:
        Table: 记录序列. 任何失败都会中止整张表, 不返回部分结果.

    Examples:
        >>> with open("save.bin", "rb") as fp:
        ...     reader = DataReader(fp)
        ...     schema = load_header(reader)
        ...     table = load_table(reader, schema)
    """
    config = Config.from_params(option=option, on_event=on_event)
    decoder = TableDecoder(_as_reader(source), schema, config)
    if sparse:
        return decoder.read_sparse_table()
    return decoder.read_table()


def load(
    fp: IO[bytes],
    *,
    sparse: bool = False,
    option: Option = Option.NONE,
    on_event: EventHook | None = None,
) -> tuple[Schema, Table]:
    """从文件读取表头以及紧随其后的一张表.

    Args:
        fp: 打开的二进制文件对象.
        sparse: 表格是否为稀疏表.
        option: 解码选项.
        on_event: 观察者回调.

    Returns:
        (表头, 表格).
    """
    reader = DataReader(fp)
    schema = read_table_header(reader)
    table = load_table(reader, schema, sparse=sparse, option=option, on_event=on_event)
    return schema, table


def loads(
    data: bytes | bytearray | memoryview,
    *,
    sparse: bool = False,
    option: Option = Option.NONE,
    on_event: EventHook | None = None,
) -> tuple[Schema, Table]:
    """从内存数据读取表头以及紧随其后的一张表.

    失败时在日志中记录出错位置附近的十六进制转储.
    """
    reader = DataReader(data)
    try:
        schema = read_table_header(reader)
        table = load_table(
            reader, schema, sparse=sparse, option=option, on_event=on_event
        )
    except SaveTableError as e:
        pos = getattr(e, "offset", None)
        if pos is None:
            pos = reader.offset
        logger.error("[loads] 解码错误: %s\n%s", e, get_hexdump(data, pos))
        raise
    return schema, table


def dumps_json(
    obj: Any,
    *,
    option: Option = Option.NONE,
    indent: int | None = 2,
) -> str:
    """将表格或记录输出为 JSON 字符串.

    Args:
        obj: `Table`, `RecordTree` 或字段值.
        option: `Option.SPARSE_AS_MAP` 时稀疏表以索引为键.
        indent: JSON 缩进.

    Raises:
        UnimplementedPrimitiveKind: 值树中包含 STRING_ID / STRING 值.
    """
    config = Config.from_params(option=option)
    plain = to_plain(obj, sparse_as_map=config.sparse_as_map)
    return json.dumps(plain, indent=indent, ensure_ascii=False)
