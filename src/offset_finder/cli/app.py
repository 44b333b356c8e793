from typing import Annotated

import typer

from offset_finder.cli.common import SchemaOption, configure_logging
from offset_finder.cli.inspect import classes, layout, lookup
from offset_finder.cli.repl import repl

app = typer.Typer(
    name="offset-finder",
    help="Offset Finder CLI: look up which class fields sit at a byte offset.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("repl")(repl)
app.command("lookup")(lookup)
app.command("classes")(classes)
app.command("layout")(layout)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
    schema: SchemaOption = None,
) -> None:
    """Without a command, start the interactive prompt."""
    configure_logging(verbose)
    ctx.obj = schema
    if ctx.invoked_subcommand is None:
        repl(ctx)


def main() -> None:
    app()
