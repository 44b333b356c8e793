import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from offset_finder.cli.render import render_error
from offset_finder.config import SCHEMA_ENV_VAR, get_schema_path
from offset_finder.core.engine import Engine, build_engine
from offset_finder.core.errors import OffsetFinderError
from offset_finder.sources import JsonSchemaSource

console = Console()
err_console = Console(stderr=True)

SchemaOption = Annotated[
    str | None,
    typer.Option("--schema", "-s", help=f"Schema JSON file or directory (default: ${SCHEMA_ENV_VAR})."),
]


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def open_engine(schema: str | None) -> Engine:
    """Build the engine or exit with status 1; nothing is served from a broken schema."""
    path = schema or get_schema_path()
    if path is None:
        err_console.print(f"[red]No schema given: pass --schema or set {SCHEMA_ENV_VAR}.[/red]")
        raise typer.Exit(1)
    try:
        engine = build_engine(JsonSchemaSource(path))
    except OffsetFinderError as exc:
        render_error(err_console, exc)
        raise typer.Exit(1) from exc
    return engine
