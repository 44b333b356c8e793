from typing import Protocol

from offset_finder.models import RawSchema


class SchemaSource(Protocol):
    def describe(self) -> str: ...

    def load_raw(self) -> RawSchema: ...
