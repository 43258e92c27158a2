import typer

from ormxgen.cli.generate import generate
from ormxgen.cli.inspect import inspect

app = typer.Typer(
    name="ormxgen",
    help="ormxgen: generate ormx persistence methods for annotated Go structs.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("generate")(generate)
app.command("inspect")(inspect)


def main() -> None:
    app()
