from dataclasses import dataclass

from offset_finder.core import index as offset_index
from offset_finder.core.index import OffsetIndex
from offset_finder.core.layout import LayoutCache
from offset_finder.core.ports.schema_source import SchemaSource
from offset_finder.core.query import Outcome, resolve
from offset_finder.core.schema import Schema, load


@dataclass(frozen=True)
class Engine:
    schema: Schema
    layouts: LayoutCache
    index: OffsetIndex

    def resolve(self, offset: int, root_class: str | None = None) -> Outcome:
        return resolve(self.index, offset, root_class)


def build_engine(source: SchemaSource) -> Engine:
    """Load, validate and index a schema.

    Every class is flattened as a root up front, so any ``SchemaError``
    surfaces here rather than during a lookup.
    """
    schema = load(source.load_raw())
    layouts = LayoutCache(schema)
    index = offset_index.build(layouts.all_roots())
    return Engine(schema=schema, layouts=layouts, index=index)
