"""Shared fixtures and helpers for tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from offset_finder.core.schema import Schema, load
from offset_finder.models import RawSchema

_TESTS_ROOT = Path(__file__).parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        rel = Path(str(item.fspath)).relative_to(_TESTS_ROOT)
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Schema documents
# ---------------------------------------------------------------------------


def make_class(
    name: str,
    size: int,
    fields: list[tuple[str, str, int, int]],
    parent: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    """Build a raw class record from ``(name, type, offset, size)`` tuples."""
    record: dict[str, Any] = {
        "name": name,
        "parent": parent,
        "size": size,
        "fields": [{"name": n, "type": t, "offset": o, "size": s} for n, t, o, s in fields],
    }
    if scope is not None:
        record["scope"] = scope
    return record


def make_schema(*classes: dict[str, Any]) -> Schema:
    return load(RawSchema.model_validate({"classes": list(classes)}))


@pytest.fixture
def base_derived_doc() -> dict[str, Any]:
    """Base{x@0, y@4} and Derived(Base){z@8, size 8}."""
    return {
        "classes": [
            make_class("Base", 8, [("x", "int", 0, 4), ("y", "int", 4, 4)]),
            make_class("Derived", 16, [("z", "int", 8, 8)], parent="Base"),
        ]
    }


@pytest.fixture
def base_derived_schema(base_derived_doc: dict[str, Any]) -> Schema:
    return load(RawSchema.model_validate(base_derived_doc))


@pytest.fixture
def entity_schema() -> Schema:
    """An entity with a nested transform, which itself nests two vectors."""
    return make_schema(
        make_class("Vector", 12, [("x", "float", 0, 4), ("y", "float", 4, 4), ("z", "float", 8, 4)]),
        make_class("Transform", 24, [("m_position", "Vector", 0, 12), ("m_scale", "Vector", 12, 12)]),
        make_class("Entity", 0x30, [("vtable", "void*", 0, 8), ("m_id", "uint32", 8, 4), ("m_transform", "Transform", 0x10, 24)]),
        make_class("Player", 0x40, [("m_health", "int32", 0x30, 4)], parent="Entity"),
    )


@pytest.fixture
def schema_file(tmp_path: Path, base_derived_doc: dict[str, Any]) -> Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(base_derived_doc), encoding="utf-8")
    return path
