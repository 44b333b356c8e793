from collections.abc import Iterable
from dataclasses import dataclass

from offset_finder.core.errors import CyclicNesting
from offset_finder.core.schema import ClassLayout, Schema


@dataclass(frozen=True)
class FlatEntry:
    class_name: str
    field_path: tuple[str, ...]
    absolute_offset: int
    size: int
    type_name: str = ""
    root_class: str = ""
    scope: str | None = None

    @property
    def end(self) -> int:
        return self.absolute_offset + self.size

    @property
    def dotted_path(self) -> str:
        return ".".join(self.field_path)

    def contains(self, offset: int) -> bool:
        return self.absolute_offset <= offset < self.end


def flatten(schema: Schema, root_class: str) -> tuple[FlatEntry, ...]:
    """Lay out every field of ``root_class`` at its offset from the start of a root instance.

    Ancestor fields come first and share the root's base offset, since a parent
    is a prefix of the child's layout. A field whose type is another class is
    emitted itself and then followed by that class's flattened fields, rebased
    onto the field's offset with the field name prepended to their path.
    """
    root = schema.get_class(root_class)
    entries: list[FlatEntry] = []
    _expand(schema, root, 0, (), None, root.name, [], entries)
    return tuple(entries)


def _expand(
    schema: Schema,
    cls: ClassLayout,
    base: int,
    prefix: tuple[str, ...],
    owner: ClassLayout | None,
    root_class: str,
    stack: list[str],
    out: list[FlatEntry],
) -> None:
    if cls.name in stack:
        raise CyclicNesting([*stack[stack.index(cls.name) :], cls.name])
    stack.append(cls.name)
    try:
        if cls.parent_name is not None:
            _expand(schema, schema[cls.parent_name], base, prefix, owner, root_class, stack, out)

        declaring = owner or cls
        for field in cls.fields:
            path = (*prefix, field.name)
            offset = base + field.relative_offset
            out.append(
                FlatEntry(
                    class_name=declaring.name,
                    field_path=path,
                    absolute_offset=offset,
                    size=field.size,
                    type_name=field.type_name,
                    root_class=root_class,
                    scope=declaring.scope,
                )
            )
            if schema.is_aggregate(field):
                _expand(schema, schema[field.type_name], offset, path, declaring, root_class, stack, out)
    finally:
        stack.pop()


class LayoutCache:
    """Flattens root classes on first use and keeps the result for the process lifetime."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self._entries: dict[str, tuple[FlatEntry, ...]] = {}

    def get(self, root_class: str) -> tuple[FlatEntry, ...]:
        entries = self._entries.get(root_class)
        if entries is None:
            entries = flatten(self.schema, root_class)
            self._entries[root_class] = entries
        return entries

    def all_roots(self, roots: Iterable[str] | None = None) -> dict[str, tuple[FlatEntry, ...]]:
        names = self.schema if roots is None else roots
        return {name: self.get(name) for name in names}
