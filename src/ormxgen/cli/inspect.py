from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ormxgen.cli.generate import build_config, err_console, resolve_input_path
from ormxgen.core.errors import GenerationError
from ormxgen.core.generate import inspect_file, iter_source_files
from ormxgen.log import configure_logging

console = Console()


def inspect(
    path: Annotated[str, typer.Argument(help="Go file or directory containing annotated models.")],
    tag_key: Annotated[str | None, typer.Option(help="Struct tag key holding the column name.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Show the metadata extracted from annotated models without writing anything."""
    configure_logging(verbose)
    root = resolve_input_path(path)
    config = build_config(tag_key=tag_key)

    table = Table(show_lines=False)
    for header in ["file", "model", "table", "primary key", "columns"]:
        table.add_column(header)

    failed = False
    rows = 0
    for file_path in iter_source_files(root, config.source_suffix):
        try:
            models = inspect_file(file_path, config)
        except GenerationError as exc:
            err_console.print(f"[red]Failed[/red] {escape(str(exc))}")
            failed = True
            continue
        for meta in models:
            table.add_row(str(file_path), meta.model_name, meta.table, meta.primary_key, ", ".join(meta.column_keys))
            rows += 1

    console.print(table)
    console.print(f"({rows} models)")
    if failed:
        raise typer.Exit(1)
