from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from offset_finder.core.errors import InvalidOffset
from offset_finder.core.index import OffsetIndex
from offset_finder.core.layout import FlatEntry


@dataclass(frozen=True)
class NoMatch:
    offset: int
    root_class: str | None = None


@dataclass(frozen=True)
class SingleMatch:
    offset: int
    entry: FlatEntry


@dataclass(frozen=True)
class MultipleMatches:
    offset: int
    entries: tuple[FlatEntry, ...]


Outcome = NoMatch | SingleMatch | MultipleMatches


class MatchKind(Enum):
    EXACT = "exact"
    CONTAINING = "containing"
    NONE = "none"
    AMBIGUOUS = "ambiguous"


def _identity(entry: FlatEntry) -> tuple[str, tuple[str, ...], int, int]:
    return (entry.class_name, entry.field_path, entry.absolute_offset, entry.size)


def rank_key(entry: FlatEntry, offset: int) -> tuple[bool, int, str, tuple[str, ...], str]:
    """Exact starts first, then the smallest (innermost) range, then by name."""
    return (entry.absolute_offset != offset, entry.size, entry.class_name, entry.field_path, entry.root_class)


def rank(entries: Iterable[FlatEntry], offset: int) -> tuple[FlatEntry, ...]:
    """Order hits for display and drop repeats of one field reached through several roots.

    The surviving copy of a repeated field is the one from the
    lexicographically smallest root class.
    """
    unique: dict[tuple[str, tuple[str, ...], int, int], FlatEntry] = {}
    for entry in sorted(entries, key=lambda e: rank_key(e, offset)):
        unique.setdefault(_identity(entry), entry)
    return tuple(unique.values())


def resolve(index: OffsetIndex, offset: int, root_class: str | None = None) -> Outcome:
    if offset < 0:
        raise InvalidOffset(str(offset))
    ranked = rank(index.query(offset, root_class), offset)
    if not ranked:
        return NoMatch(offset, root_class)
    if len(ranked) == 1:
        return SingleMatch(offset, ranked[0])
    return MultipleMatches(offset, ranked)


def classify(outcome: Outcome) -> MatchKind:
    if isinstance(outcome, NoMatch):
        return MatchKind.NONE
    if isinstance(outcome, MultipleMatches):
        return MatchKind.AMBIGUOUS
    if outcome.entry.absolute_offset == outcome.offset:
        return MatchKind.EXACT
    return MatchKind.CONTAINING
