import logging
from bisect import bisect_right
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from offset_finder.core.errors import UnknownClass
from offset_finder.core.layout import FlatEntry

logger = logging.getLogger(__name__)


class SegmentTable:
    """Interval stabbing over possibly overlapping byte ranges.

    Every range start and end is a boundary; between two consecutive
    boundaries the set of covering entries cannot change, so it is computed
    once at build time and a lookup is a single bisect.
    """

    def __init__(self, entries: Iterable[FlatEntry]) -> None:
        items = list(entries)
        starts_at: dict[int, list[int]] = defaultdict(list)
        ends_at: dict[int, list[int]] = defaultdict(list)
        for i, entry in enumerate(items):
            starts_at[entry.absolute_offset].append(i)
            ends_at[entry.end].append(i)

        self._boundaries = sorted(starts_at.keys() | ends_at.keys())
        self._segments: list[tuple[FlatEntry, ...]] = []
        interned: dict[tuple[int, ...], tuple[FlatEntry, ...]] = {}
        active: dict[int, FlatEntry] = {}
        for boundary in self._boundaries:
            for i in ends_at.get(boundary, ()):
                del active[i]
            for i in starts_at.get(boundary, ()):
                active[i] = items[i]
            key = tuple(active)
            segment = interned.get(key)
            if segment is None:
                segment = interned[key] = tuple(active.values())
            self._segments.append(segment)
        self.entry_count = len(items)

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    def stab(self, offset: int) -> tuple[FlatEntry, ...]:
        i = bisect_right(self._boundaries, offset) - 1
        if i < 0:
            return ()
        return self._segments[i]


class OffsetIndex:
    def __init__(self, flat_entries_by_root: Mapping[str, Sequence[FlatEntry]]) -> None:
        self._by_root = {root: SegmentTable(entries) for root, entries in flat_entries_by_root.items()}
        self._all = SegmentTable(entry for entries in flat_entries_by_root.values() for entry in entries)
        logger.debug(
            "Built offset index: %d roots, %d entries, %d segments",
            len(self._by_root),
            self._all.entry_count,
            self._all.segment_count,
        )

    @property
    def roots(self) -> list[str]:
        return list(self._by_root)

    def __len__(self) -> int:
        return self._all.entry_count

    def query(self, offset: int, root_class: str | None = None) -> frozenset[FlatEntry]:
        """Return every entry whose ``[absolute_offset, end)`` range contains ``offset``."""
        if root_class is None:
            return frozenset(self._all.stab(offset))
        table = self._by_root.get(root_class)
        if table is None:
            raise UnknownClass(root_class)
        return frozenset(table.stab(offset))


def build(flat_entries_by_root: Mapping[str, Sequence[FlatEntry]]) -> OffsetIndex:
    return OffsetIndex(flat_entries_by_root)


def query(index: OffsetIndex, offset: int, root_class: str | None = None) -> frozenset[FlatEntry]:
    return index.query(offset, root_class)
