from typing import Annotated

import typer
from rich.table import Table

from offset_finder.cli.common import SchemaOption, console, open_engine
from offset_finder.cli.render import render_error, render_outcome
from offset_finder.core.errors import QueryError
from offset_finder.core.session import parse_offset


def lookup(
    ctx: typer.Context,
    offset: Annotated[str, typer.Argument(help="Offset to resolve: decimal, 0x-prefixed or h-suffixed hex.")],
    root: Annotated[str | None, typer.Option("--root", "-r", help="Only consider layouts rooted at this class.")] = None,
    schema: SchemaOption = None,
) -> None:
    """Resolve a single offset and exit."""
    engine = open_engine(schema or ctx.obj)
    try:
        outcome = engine.resolve(parse_offset(offset), root)
    except QueryError as exc:
        render_error(console, exc)
        raise typer.Exit(2) from exc
    render_outcome(console, outcome, engine.schema)


def classes(
    ctx: typer.Context,
    scope: Annotated[str | None, typer.Option(help="Only list classes from this scope.")] = None,
    schema: SchemaOption = None,
) -> None:
    """List the classes in the schema."""
    engine = open_engine(schema or ctx.obj)
    table = Table(show_lines=False)
    for header in ("class", "parent", "size", "fields", "scope"):
        table.add_column(header)
    count = 0
    for cls in engine.schema.values():
        if scope is not None and cls.scope != scope:
            continue
        table.add_row(cls.name, cls.parent_name or "", f"0x{cls.total_size:x}", str(len(cls.fields)), cls.scope or "")
        count += 1
    console.print(table)
    console.print(f"({count} classes)")
    if engine.schema.violations:
        console.print(f"[yellow]({len(engine.schema.violations)} fields run past their class size)[/yellow]")


def layout(
    ctx: typer.Context,
    class_name: Annotated[str, typer.Argument(help="Root class to flatten.")],
    schema: SchemaOption = None,
) -> None:
    """Show the flattened layout of a class, inherited and nested fields included."""
    engine = open_engine(schema or ctx.obj)
    try:
        entries = engine.layouts.get(class_name)
    except QueryError as exc:
        render_error(console, exc)
        raise typer.Exit(2) from exc
    table = Table(show_lines=False)
    for header in ("offset", "size", "class", "field", "type"):
        table.add_column(header)
    for entry in entries:
        indent = "  " * (len(entry.field_path) - 1)
        table.add_row(
            f"0x{entry.absolute_offset:x}",
            f"0x{entry.size:x}",
            entry.class_name,
            indent + entry.field_path[-1],
            entry.type_name,
        )
    console.print(table)
    console.print(f"({len(entries)} fields, size 0x{engine.schema[class_name].total_size:x})")
