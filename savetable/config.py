"""savetable 配置对象."""

from dataclasses import dataclass

from .context import EventHook
from .options import Option


@dataclass(frozen=True)
class Config:
    """表格解码配置 (不可变).

    在 API 入口层创建, 然后传递给 `TableDecoder`.

    Attributes:
        flags: 选项标志 (IntFlag).
        on_event: 可选的观察者回调, 每条记录调用一次.
    """

    flags: Option = Option.NONE
    on_event: EventHook | None = None

    @classmethod
    def from_params(
        cls,
        option: Option = Option.NONE,
        on_event: EventHook | None = None,
    ) -> "Config":
        """从参数构建配置对象.

        Args:
            option: Option 枚举.
            on_event: 观察者回调.

        Returns:
            Config: 配置对象.
        """
        return cls(flags=Option(option), on_event=on_event)

    @property
    def trace(self) -> bool:
        """是否为每条记录输出 DEBUG 日志."""
        return bool(self.flags & Option.TRACE)

    @property
    def sparse_as_map(self) -> bool:
        """稀疏表是否以索引为键输出."""
        return bool(self.flags & Option.SPARSE_AS_MAP)
