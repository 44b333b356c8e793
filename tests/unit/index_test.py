"""Unit tests for the offset index."""

import pytest

from offset_finder.core import index as offset_index
from offset_finder.core.errors import UnknownClass
from offset_finder.core.index import SegmentTable
from offset_finder.core.layout import FlatEntry, LayoutCache
from offset_finder.core.schema import Schema


def _entry(name: str, offset: int, size: int, root: str = "R") -> FlatEntry:
    return FlatEntry(class_name=root, field_path=(name,), absolute_offset=offset, size=size, root_class=root)


class TestSegmentTable:
    def test_empty_table_finds_nothing(self) -> None:
        assert SegmentTable([]).stab(0) == ()

    def test_range_end_is_exclusive(self) -> None:
        table = SegmentTable([_entry("a", 4, 4)])
        assert table.stab(3) == ()
        assert [e.field_path for e in table.stab(4)] == [("a",)]
        assert [e.field_path for e in table.stab(7)] == [("a",)]
        assert table.stab(8) == ()

    def test_nested_ranges_both_hit(self) -> None:
        outer = _entry("outer", 0, 16)
        inner = _entry("inner", 4, 4)
        table = SegmentTable([outer, inner])

        assert set(table.stab(5)) == {outer, inner}
        assert set(table.stab(8)) == {outer}
        assert set(table.stab(0)) == {outer}

    def test_gaps_between_ranges_find_nothing(self) -> None:
        table = SegmentTable([_entry("a", 0, 4), _entry("b", 8, 4)])
        assert table.stab(5) == ()
        assert table.stab(100) == ()

    def test_adjacent_ranges_do_not_overlap(self) -> None:
        a = _entry("a", 0, 4)
        b = _entry("b", 4, 4)
        table = SegmentTable([a, b])
        assert table.stab(3) == (a,)
        assert table.stab(4) == (b,)

    def test_matches_brute_force(self) -> None:
        entries = [_entry(f"f{i}", (i * 7) % 40, 1 + (i * 5) % 13) for i in range(60)]
        table = SegmentTable(entries)
        for offset in range(-2, 60):
            expected = {e for e in entries if e.absolute_offset <= offset < e.end}
            assert set(table.stab(offset)) == expected, offset


class TestOffsetIndex:
    def test_query_spans_every_root(self, base_derived_schema: Schema) -> None:
        index = offset_index.build(LayoutCache(base_derived_schema).all_roots())

        hits = offset_index.query(index, 4)

        assert {(e.root_class, e.dotted_path) for e in hits} == {("Base", "y"), ("Derived", "y")}

    def test_query_restricted_to_root(self, base_derived_schema: Schema) -> None:
        index = offset_index.build(LayoutCache(base_derived_schema).all_roots())

        hits = index.query(4, root_class="Base")

        assert {(e.root_class, e.dotted_path) for e in hits} == {("Base", "y")}

    def test_query_unknown_root_fails(self, base_derived_schema: Schema) -> None:
        index = offset_index.build(LayoutCache(base_derived_schema).all_roots())

        with pytest.raises(UnknownClass):
            index.query(0, root_class="Nope")

    def test_counts_every_flattened_entry(self, entity_schema: Schema) -> None:
        layouts = LayoutCache(entity_schema).all_roots()
        index = offset_index.build(layouts)

        assert len(index) == sum(len(entries) for entries in layouts.values())
        assert index.roots == ["Vector", "Transform", "Entity", "Player"]

    def test_containment_holds_for_every_offset(self, entity_schema: Schema) -> None:
        layouts = LayoutCache(entity_schema).all_roots()
        index = offset_index.build(layouts)
        everything = [e for entries in layouts.values() for e in entries]

        for offset in range(0, 0x48):
            assert index.query(offset) == {e for e in everything if e.contains(offset)}
