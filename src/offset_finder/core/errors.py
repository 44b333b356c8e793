from collections.abc import Sequence


class OffsetFinderError(Exception):
    """Base class for every error raised by the resolution engine."""


class SchemaError(OffsetFinderError):
    """The schema cannot be turned into a usable layout model."""


class SchemaUnavailable(SchemaError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read schema at {path}: {reason}")
        self.path = path


class MalformedSchema(SchemaError):
    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"malformed schema document {source}: {detail}")
        self.source = source


class DuplicateClass(SchemaError):
    def __init__(self, name: str) -> None:
        super().__init__(f"class {name!r} is defined more than once")
        self.name = name


class UnknownParent(SchemaError):
    def __init__(self, class_name: str, parent_name: str) -> None:
        super().__init__(f"class {class_name!r} inherits from unknown class {parent_name!r}")
        self.class_name = class_name
        self.parent_name = parent_name


class CyclicInheritance(SchemaError):
    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__("inheritance cycle: " + " -> ".join(chain))
        self.chain = tuple(chain)


class CyclicNesting(SchemaError):
    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__("class contains itself through field types: " + " -> ".join(chain))
        self.chain = tuple(chain)


class QueryError(OffsetFinderError):
    """A single lookup was rejected; the session can carry on."""


class UnknownClass(QueryError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown class {name!r}")
        self.name = name


class InvalidOffset(QueryError):
    def __init__(self, text: str) -> None:
        super().__init__(f"invalid offset: {text}")
        self.text = text
