"""存档表格解码库.

解析自描述的二进制存档表格: 递归表头 (Schema) 加上一张或多张记录表,
输出可交给任意序列化后端 (如 JSON) 的类型化值树.
"""

from .adapter import RecordAdapter
from .api import dumps_json, load, load_header, load_table, loads
from .config import Config
from .context import TableEvent
from .decoder import TableDecoder, decode_field, decode_record
from .exceptions import (
    DecodeError,
    InternalInvariantViolation,
    InvalidPrimitiveKind,
    SaveTableError,
    UnexpectedEndOfStream,
    UnimplementedPrimitiveKind,
)
from .options import Option
from .schema import Schema, SchemaNode, read_table_header
from .stream import DataReader
from .tree import (
    ListValue,
    ParsedField,
    PlainVisitor,
    RecordTree,
    ScalarValue,
    Table,
    TreeVisitor,
    TypedValue,
    emit,
    to_plain,
)
from .types import Cardinality, PrimitiveKind, decode_tag

__version__ = "0.1.0"

__all__ = [
    "Cardinality",
    "Config",
    "DataReader",
    "DecodeError",
    "InternalInvariantViolation",
    "InvalidPrimitiveKind",
    "ListValue",
    "Option",
    "ParsedField",
    "PlainVisitor",
    "PrimitiveKind",
    "RecordAdapter",
    "RecordTree",
    "SaveTableError",
    "ScalarValue",
    "Schema",
    "SchemaNode",
    "Table",
    "TableDecoder",
    "TableEvent",
    "TreeVisitor",
    "TypedValue",
    "UnexpectedEndOfStream",
    "UnimplementedPrimitiveKind",
    "__version__",
    "decode_field",
    "decode_record",
    "decode_tag",
    "dumps_json",
    "emit",
    "load",
    "load_header",
    "load_table",
    "loads",
    "read_table_header",
    "to_plain",
]
