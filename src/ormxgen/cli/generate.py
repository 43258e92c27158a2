from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ormxgen.config import GeneratorConfig, OutputMode, load_config
from ormxgen.core.generate import generate_models
from ormxgen.core.ports.writer import SourceWriter
from ormxgen.log import configure_logging
from ormxgen.models import FileResult, ResultStatus, SkipReason
from ormxgen.writers import FileSystemSourceWriter, InMemorySourceWriter

console = Console()
err_console = Console(stderr=True)


def resolve_input_path(path: str) -> Path:
    """Validate the path argument, exiting with status 1 when it is unusable."""
    if not path.strip():
        err_console.print("[red]Error: model path must not be empty.[/red]")
        raise typer.Exit(1)
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        err_console.print(f"[red]Error: path '{escape(str(resolved))}' does not exist.[/red]")
        raise typer.Exit(1)
    return resolved


def build_config(**overrides: object) -> GeneratorConfig:
    try:
        return load_config(**overrides)
    except ValidationError as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None


def _render_result(result: FileResult) -> None:
    path = escape(result.path)
    if result.status == ResultStatus.GENERATED:
        console.print(f"[green]Generated[/green] {escape(result.model_name or '')} -> {escape(result.output_path or '')}")
    elif result.status == ResultStatus.FAILED:
        console.print(f"[red]Failed[/red] {path}: {escape(result.error or '')}")
    elif result.reason != SkipReason.NO_MARKER:
        detail = f" ({escape(result.detail)})" if result.detail else ""
        console.print(f"[yellow]Skipped[/yellow] {path}: {result.reason}{detail}")


def _render_summary(results: list[FileResult]) -> None:
    counts = {status: sum(1 for r in results if r.status == status) for status in ResultStatus}
    console.print(
        f"{counts[ResultStatus.GENERATED]} generated, "
        f"{counts[ResultStatus.SKIPPED]} skipped, "
        f"{counts[ResultStatus.FAILED]} failed"
    )


def generate(
    path: Annotated[str, typer.Argument(help="Go file or directory containing annotated models.")],
    mode: Annotated[
        OutputMode | None, typer.Option(help="Insert into the source file (splice) or write a separate file (sidecar).")
    ] = None,
    import_path: Annotated[str | None, typer.Option(help="Import path of the ormx support package.")] = None,
    tag_key: Annotated[str | None, typer.Option(help="Struct tag key holding the column name.")] = None,
    transient_field: Annotated[str | None, typer.Option(help="Boolean field that forces IsNew() to true.")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report what would be written without writing.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Generate ormx methods for annotated Go structs."""
    configure_logging(verbose)
    root = resolve_input_path(path)
    config = build_config(mode=mode, import_path=import_path, tag_key=tag_key, transient_field=transient_field)
    console.print(f"Generating models for: {escape(str(root))}")

    memory_writer = InMemorySourceWriter() if dry_run else None
    writer: SourceWriter = memory_writer or FileSystemSourceWriter()

    results = generate_models(root, config, writer)
    for result in results:
        _render_result(result)
    if memory_writer is not None:
        for written in memory_writer.files:
            console.print(f"[cyan]Dry run[/cyan], not written: {escape(str(written))}")
    _render_summary(results)

    if any(r.status == ResultStatus.FAILED for r in results):
        raise typer.Exit(1)
