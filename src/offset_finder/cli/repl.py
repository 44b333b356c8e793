import typer
from rich.text import Text

from offset_finder.cli.common import SchemaOption, console, open_engine
from offset_finder.cli.render import render_error, render_outcome
from offset_finder.core.errors import QueryError
from offset_finder.core.query import Outcome
from offset_finder.core.session import Session

_PROMPT = "[bold]offset[/bold] [dim](0x.. for hex)[/dim]> "


def repl(ctx: typer.Context, schema: SchemaOption = None) -> None:
    """Resolve offsets interactively until 'exit' or Ctrl-C."""
    engine = open_engine(schema or ctx.obj)
    console.print(
        Text(f"{len(engine.schema)} classes, {len(engine.index)} flattened fields. Type 'exit' to quit.", style="dim")
    )

    def _show(outcome: Outcome) -> None:
        render_outcome(console, outcome, engine.schema)

    def _report(error: QueryError) -> None:
        render_error(console, error)

    session = Session(engine.index, lambda: console.input(_PROMPT), _show, _report)
    session.run()
    console.print()
