from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from offset_finder.core.errors import OffsetFinderError
from offset_finder.core.layout import FlatEntry
from offset_finder.core.query import MatchKind, MultipleMatches, NoMatch, Outcome, SingleMatch, classify
from offset_finder.core.schema import Schema

KIND_STYLES = {
    MatchKind.EXACT: "green",
    MatchKind.CONTAINING: "cyan",
    MatchKind.NONE: "yellow",
    MatchKind.AMBIGUOUS: "magenta",
}


def _entry_kind(entry: FlatEntry, offset: int) -> MatchKind:
    return MatchKind.EXACT if entry.absolute_offset == offset else MatchKind.CONTAINING


def format_entry(entry: FlatEntry, offset: int) -> Text:
    style = KIND_STYLES[_entry_kind(entry, offset)]
    text = Text.assemble(
        (entry.type_name or "unknown type", "magenta" if entry.type_name else "red"),
        " ",
        (entry.class_name, "yellow"),
        ("::", "dim"),
        (entry.dotted_path, style),
        f" +0x{entry.absolute_offset:x}",
        (f" size 0x{entry.size:x}", "dim"),
    )
    if entry.absolute_offset != offset:
        text.append(f" (+0x{offset - entry.absolute_offset:x} into field)", style="dim")
    if entry.scope:
        text.append(f" ({entry.scope})", style="dim")
    return text


def _render_matches(console: Console, entries: Sequence[FlatEntry], offset: int) -> None:
    table = Table(show_lines=False)
    for header in ("#", "class", "field", "offset", "size", "type", "root"):
        table.add_column(header)
    for position, entry in enumerate(entries, start=1):
        table.add_row(
            str(position),
            entry.class_name,
            Text(entry.dotted_path, style=KIND_STYLES[_entry_kind(entry, offset)]),
            f"0x{entry.absolute_offset:x}",
            f"0x{entry.size:x}",
            entry.type_name,
            entry.root_class,
        )
    console.print(table)


def render_outcome(console: Console, outcome: Outcome, schema: Schema | None = None) -> None:
    kind = classify(outcome)
    style = KIND_STYLES[kind]
    if isinstance(outcome, NoMatch):
        console.print(Text(f"no field at offset 0x{outcome.offset:x}", style=style))
        hint = padding_hint(outcome, schema)
        if hint:
            console.print(Text(hint, style="dim"))
    elif isinstance(outcome, SingleMatch):
        console.print(format_entry(outcome.entry, outcome.offset))
    elif isinstance(outcome, MultipleMatches):
        console.print(Text(f"{len(outcome.entries)} fields at offset 0x{outcome.offset:x}", style=style))
        _render_matches(console, outcome.entries, outcome.offset)


def padding_hint(outcome: NoMatch, schema: Schema | None) -> str | None:
    """Name the root class when the offset falls in its padding rather than past its end."""
    if schema is None or outcome.root_class is None or outcome.root_class not in schema:
        return None
    total_size = schema[outcome.root_class].total_size
    if outcome.offset < total_size:
        return f"inside {outcome.root_class} (size 0x{total_size:x}) but not covered by any field"
    return None


def render_error(console: Console, error: OffsetFinderError) -> None:
    console.print(Text(str(error), style="red"))
