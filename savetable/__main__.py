"""savetable命令行工具."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.text import Text
from rich.tree import Tree

from .api import load_table
from .log import logger
from .options import Option
from .schema import Schema, SchemaNode, dump_schema, read_table_header
from .stream import DataReader
from .tree import RecordTree, Table, TreeVisitor, emit, to_plain
from .types import PrimitiveKind

# 流式读取配置
FILE_SIZE_THRESHOLD = 10 * 1024 * 1024  # 10MB
CHUNK_SIZE = 8 * 1024 * 1024  # 8MB

# 样式定义
STYLE_KEY = "bold blue"
STYLE_TYPE = "cyan"
STYLE_STRUCT = "bold yellow"
STYLE_VALUE = "magenta"


def _read_binary_file(file_path: Path, verbose: bool) -> bytes:
    """读取二进制文件,大文件使用分块以控制内存.

    Args:
        file_path: 文件路径.
        verbose: 是否显示详细信息.

    Returns:
        文件内容的bytes.
    """
    file_size = file_path.stat().st_size

    if file_size > FILE_SIZE_THRESHOLD:
        if verbose:
            click.echo(f"[DEBUG] 文件大小 {file_size} 字节,使用分块读取", err=True)

        chunks = []
        with open(file_path, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                chunks.append(chunk)
        return b"".join(chunks)
    return file_path.read_bytes()


def _read_hex_file(file_path: Path) -> bytes:
    """读取并解析十六进制文本文件.

    Raises:
        ValueError: 如果文件内容不是有效的十六进制字符串.
    """
    cleaned = "".join(file_path.read_text(encoding="utf-8").split())
    if not cleaned or not all(c in "0123456789abcdefABCDEF" for c in cleaned):
        raise ValueError("不是有效的十六进制字符串")
    return bytes.fromhex(cleaned)


class RichTreeVisitor(TreeVisitor):
    """把值树输出为 Rich 树."""

    def visit_record(self, record: RecordTree, fields: list[tuple[str, Any]]) -> Any:
        node = Tree(Text("Struct", style=STYLE_STRUCT))
        for key, value in fields:
            node.children.append(self._labelled(Text(key, style=STYLE_KEY), value))
        return node

    def visit_list(self, items: list[Any]) -> Any:
        return items

    def visit_int(self, kind: PrimitiveKind, value: int) -> Any:
        label = Text()
        label.append(f"{kind.name}: ", style=STYLE_TYPE)
        label.append(str(value), style=STYLE_VALUE)
        return label

    def _labelled(self, label: Text, value: Any) -> Tree:
        if isinstance(value, Tree):
            label.append(" Struct", style=STYLE_STRUCT)
            value.label = label
            return value
        if isinstance(value, list):
            label.append(f" List ({len(value)})", style=STYLE_TYPE)
            branch = Tree(label)
            for i, item in enumerate(value):
                index_label = Text(f"[{i}]", style="dim")
                branch.children.append(self._labelled(index_label, item))
            return branch
        label.append(" ")
        label.append_text(value)
        return Tree(label)


def _build_table_tree(table: Table) -> Tree:
    root = Tree(
        Text(f"Table ({len(table)} records)", style="bold white"),
    )
    visitor = RichTreeVisitor()
    for index, record in table.items():
        node = emit(record, visitor)
        node.label = Text.assemble((f"[{index}] ", "dim"), ("Struct", STYLE_STRUCT))
        root.children.append(node)
    return root


def _build_schema_tree(schema: Schema, tree: Tree) -> Tree:
    for node in schema:
        label = Text()
        label.append(node.key, style=STYLE_KEY)
        label.append(f" {_describe_kind(node)}", style=STYLE_TYPE)
        branch = tree.add(label)
        if node.children is not None:
            _build_schema_tree(node.children, branch)
    return tree


def _describe_kind(node: SchemaNode) -> str:
    if node.is_list:
        return f"List<{node.kind.name}>"
    return node.kind.name


def _decode(
    data: bytes, sparse: bool, verbose: bool, schema_only: bool
) -> tuple[Schema, Table | None]:
    reader = DataReader(data)
    schema = read_table_header(reader)
    if verbose:
        click.echo(
            f"[DEBUG] 表头: {len(schema)} 个顶层字段, {reader.offset} 字节", err=True
        )
    if schema_only:
        return schema, None
    option = Option.TRACE if verbose else Option.NONE
    table = load_table(reader, schema, sparse=sparse, option=option)
    return schema, table


def _decode_and_print(
    data: bytes,
    output_format: str,
    output_file: str | None,
    verbose: bool,
    sparse: bool,
    schema_only: bool,
) -> None:
    """解码并输出结果."""
    if verbose:
        click.echo(f"[DEBUG] 数据大小: {len(data)} 字节", err=True)

    try:
        schema, table = _decode(data, sparse, verbose, schema_only)
        if table is None:
            if output_format == "tree":
                rendered: Any = _build_schema_tree(schema, Tree("Schema"))
            else:
                rendered = dump_schema(schema)
        elif output_format == "tree":
            rendered = _build_table_tree(table)
        else:
            rendered = to_plain(table)
    except Exception as e:
        if verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        raise click.ClickException(f"解码失败: {e}") from e

    output_text: str | None = None
    if output_format == "json":
        output_text = json.dumps(rendered, indent=2, ensure_ascii=False)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            if output_text is not None:
                f.write(output_text)
            else:
                Console(file=f, width=120).print(rendered)
        click.echo(f"结果已保存到: {output_file}", err=True)
        return

    console = Console()
    if output_text is not None:
        console.print(Syntax(output_text, "json", theme="monokai", word_wrap=True))
    else:
        console.print(rendered)


@click.command(help="存档表格解码命令行工具")
@click.argument("encoded", required=False)
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="从文件读取数据 (十六进制文本或二进制)",
)
@click.option(
    "--sparse",
    is_flag=True,
    help="表格为稀疏表 (每条记录带显式索引)",
)
@click.option(
    "--schema",
    "schema_only",
    is_flag=True,
    help="只输出解析出的表头",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["pretty", "json", "tree"]),
    default="pretty",
    show_default=True,
    help="输出格式",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, writable=True),
    help="将输出保存到文件 (如不指定则输出到控制台)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="显示详细的解码过程信息",
)
def cli(
    encoded: str | None,
    file_path: Path | None,
    sparse: bool,
    schema_only: bool,
    output_format: str,
    output_file: str | None,
    verbose: bool,
) -> None:
    """存档表格解码命令行工具.

    Examples:
      # 直接解码十六进制数据
      savetable "05016100010000000700"

      # 从文件读取 (十六进制文本或二进制)
      savetable -f save.bin

      # 以 JSON 格式输出稀疏表
      savetable -f save.bin --sparse --format json

      # 查看表头结构
      savetable -f save.bin --schema --format tree
    """
    if encoded and file_path:
        raise click.UsageError("不能同时指定 ENCODED 数据和 --file 参数")
    if not encoded and not file_path:
        raise click.UsageError("必须指定 ENCODED 数据或 --file 参数")

    if verbose:
        _enable_debug_logging()

    if file_path:
        try:
            data = _read_hex_file(file_path)
            if verbose:
                click.echo("[DEBUG] 从文件读取十六进制数据 (文本模式)", err=True)
        except (UnicodeDecodeError, ValueError):
            data = _read_binary_file(file_path, verbose)
            if verbose:
                click.echo("[DEBUG] 从文件读取二进制数据 (二进制模式)", err=True)
    else:
        assert encoded is not None
        try:
            data = bytes.fromhex(encoded)
        except ValueError as e:
            raise click.BadParameter(f"无效的十六进制格式 - {e}") from e

    _decode_and_print(data, output_format, output_file, verbose, sparse, schema_only)


def _enable_debug_logging() -> None:
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.DEBUG)


def main() -> None:
    """入口函数."""
    cli()


if __name__ == "__main__":
    main()
