"""表格解码的配置选项.

该模块定义了用于控制 `load_table` 和 `to_plain` 行为的选项标志.
"""

from enum import IntFlag


class Option(IntFlag):
    """savetable 配置选项标志.

    可以使用位运算组合多个选项:
        option = Option.TRACE | Option.SPARSE_AS_MAP
    """

    # 默认行为
    NONE = 0x0000

    # 为每条记录输出一行 DEBUG 日志 (序号, 声明大小, 偏移)
    TRACE = 0x0001

    # 输出普通对象时, 稀疏表以 {index: record} 形式给出
    SPARSE_AS_MAP = 0x0002
