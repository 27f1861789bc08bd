"""表格解码上下文.

该模块定义了在表格迭代过程中传递给观察者回调的事件信息.
回调只用于观察, 不影响解码决策.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

TableKind = Literal["dense", "sparse"]


@dataclass(frozen=True)
class TableEvent:
    """每读取一条记录前发出的事件.

    Attributes:
        kind: 表格类型 ("dense" 或 "sparse").
        index: 记录序号. 稠密表为位置序号, 稀疏表为显式读取的索引.
        size: 记录前缀中声明的大小 (仅供参考, 不用于定界).
        offset: 记录数据开始处的字节偏移.
    """

    kind: TableKind
    index: int
    size: int
    offset: int


EventHook = Callable[[TableEvent], None]
