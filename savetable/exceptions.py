"""存档表格特定的异常类.

该模块为 savetable 库定义了异常层次结构.
"""

from typing import Any


class SaveTableError(Exception):
    """所有 savetable 异常的基类."""

    pass


class DecodeError(SaveTableError):
    """解码失败时抛出.

    Case:
        - 标签字节不合法.
        - 字符串不是有效的 UTF-8.
        - 输入数据被截断 (见 `UnexpectedEndOfStream`).
    """

    def __init__(
        self,
        msg: str,
        loc: list[str | int] | None = None,
        offset: int | None = None,
    ) -> None:
        """初始化解码错误.

        Args:
            msg: 错误描述信息.
            loc: 错误发生的位置路径 (记录序号, 字段名或列表索引).
            offset: 出错时读取器所在的字节偏移.
        """
        super().__init__(msg)
        self.loc = loc or []
        self.offset = offset

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.loc:
            loc_str = ".".join(str(x) for x in self.loc)
            return f"{base_msg} (at {loc_str})"
        return base_msg


class UnexpectedEndOfStream(DecodeError, EOFError):
    """在任何读取点遇到流结束时抛出."""

    pass


class InvalidPrimitiveKind(DecodeError, ValueError):
    """标签字节的类型半字节超出已知范围 (12-15) 时抛出.

    通常意味着输入损坏或格式版本不受支持.
    """

    def __init__(
        self,
        nibble: int,
        loc: list[str | int] | None = None,
        offset: int | None = None,
    ) -> None:
        super().__init__(f"Invalid primitive kind nibble: {nibble}", loc, offset)
        self.nibble = nibble


class UnimplementedPrimitiveKind(SaveTableError, NotImplementedError):
    """遇到尚未实现解码的类型 (StringId / String) 时抛出.

    与数据损坏不同, 这是一个可以区分的错误: 将来接入字符串池后即可支持.
    """

    def __init__(self, kind: Any) -> None:
        super().__init__(f"Decoding of {kind!s} values is not implemented")
        self.kind = kind


class InternalInvariantViolation(SaveTableError, AssertionError):
    """FileEnd 作为运行时值出现时抛出 (按约定不可达)."""

    pass
