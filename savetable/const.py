"""存档表格协议常量.

该模块定义了表头标签字节中使用的类型ID和其他常量.
"""

# 类型半字节 (标签字节的 bit 0-3)
FILE_END = 0
INT8 = 1
UINT8 = 2
INT16 = 3
UINT16 = 4
INT32 = 5
UINT32 = 6
INT64 = 7
UINT64 = 8
STRING_ID = 9
STRING = 10
STRUCT = 11

KIND_MASK = 0x0F
LIST_FLAG_BIT = 4
TERMINATOR = 0x00

# 表格结束哨兵: gamma(size + 1) == 0
TABLE_END = 0
