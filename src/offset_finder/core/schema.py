import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from offset_finder.core.errors import CyclicInheritance, DuplicateClass, UnknownClass, UnknownParent
from offset_finder.models import RawSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Field:
    name: str
    type_name: str
    relative_offset: int
    size: int

    @property
    def end(self) -> int:
        return self.relative_offset + self.size


@dataclass(frozen=True)
class ClassLayout:
    name: str
    parent_name: str | None
    fields: tuple[Field, ...]
    total_size: int
    scope: str | None = None


@dataclass(frozen=True)
class FieldBoundsViolation:
    """A field that runs past the end of its declaring class."""

    class_name: str
    field_name: str
    end: int
    total_size: int

    def __str__(self) -> str:
        return (
            f"{self.class_name}::{self.field_name} ends at 0x{self.end:x}, "
            f"past the class size 0x{self.total_size:x}"
        )


class Schema(Mapping[str, ClassLayout]):
    """Immutable mapping of class name to layout, validated on construction."""

    def __init__(self, classes: Mapping[str, ClassLayout]) -> None:
        self._classes = dict(classes)
        self._check_parents()
        self._check_inheritance_cycles()
        self.violations: tuple[FieldBoundsViolation, ...] = tuple(self._collect_violations())
        for violation in self.violations:
            logger.warning("Field out of bounds: %s", violation)

    def __getitem__(self, name: str) -> ClassLayout:
        return self._classes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    def get_class(self, name: str) -> ClassLayout:
        try:
            return self._classes[name]
        except KeyError:
            raise UnknownClass(name) from None

    def is_aggregate(self, field: Field) -> bool:
        """A field whose type names a known class is laid out as a nested struct."""
        return field.type_name in self._classes

    def _check_parents(self) -> None:
        for cls in self._classes.values():
            if cls.parent_name is not None and cls.parent_name not in self._classes:
                raise UnknownParent(cls.name, cls.parent_name)

    def _check_inheritance_cycles(self) -> None:
        acyclic: set[str] = set()
        for name in self._classes:
            chain: list[str] = []
            visited: set[str] = set()
            current: str | None = name
            while current is not None and current not in acyclic:
                if current in visited:
                    raise CyclicInheritance([*chain[chain.index(current) :], current])
                visited.add(current)
                chain.append(current)
                current = self._classes[current].parent_name
            acyclic.update(chain)

    def _collect_violations(self) -> Iterator[FieldBoundsViolation]:
        for cls in self._classes.values():
            for field in cls.fields:
                if field.end > cls.total_size:
                    yield FieldBoundsViolation(cls.name, field.name, field.end, cls.total_size)


def load(raw: RawSchema) -> Schema:
    """Translate a validated raw document into a :class:`Schema`.

    Raises a :class:`~offset_finder.core.errors.SchemaError` subclass when a
    class is defined twice, inherits from an unknown class or sits on an
    inheritance cycle.
    """
    classes: dict[str, ClassLayout] = {}
    for raw_class in raw.classes:
        if raw_class.name in classes:
            raise DuplicateClass(raw_class.name)
        classes[raw_class.name] = ClassLayout(
            name=raw_class.name,
            parent_name=raw_class.parent,
            fields=tuple(
                Field(name=f.name, type_name=f.type_name, relative_offset=f.offset, size=f.size)
                for f in raw_class.fields
            ),
            total_size=raw_class.size,
            scope=raw_class.scope,
        )
    return Schema(classes)
