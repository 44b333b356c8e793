import logging
from collections import defaultdict
from pathlib import Path

from pydantic import ValidationError

from offset_finder.core.errors import MalformedSchema, SchemaUnavailable
from offset_finder.models import RawClass, RawSchema

logger = logging.getLogger(__name__)

SCOPE_SEPARATOR = "::"


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    more = f" (+{exc.error_count() - 1} more)" if exc.error_count() > 1 else ""
    return f"{location}: {first['msg']}{more}"


def qualify_shared_names(scoped: list[tuple[str, RawClass]]) -> list[RawClass]:
    """Prefix class names defined in more than one scope with ``scope::``.

    Parent and field type references are rewritten within the scope that
    defines the shared name; other scopes keep the bare name, which then no
    longer resolves to a class.
    """
    defined: dict[str, set[str]] = defaultdict(set)
    for scope, cls in scoped:
        defined[scope].add(cls.name)
    scopes_by_name: dict[str, set[str]] = defaultdict(set)
    for scope, names in defined.items():
        for name in names:
            scopes_by_name[name].add(scope)
    shared = {name for name, scopes in scopes_by_name.items() if len(scopes) > 1}
    if shared:
        logger.info("Qualified %d class names defined in several scopes", len(shared))

    def _rename(name: str, scope: str) -> str:
        if name in shared and name in defined[scope]:
            return f"{scope}{SCOPE_SEPARATOR}{name}"
        return name

    classes: list[RawClass] = []
    for scope, cls in scoped:
        classes.append(
            cls.model_copy(
                update={
                    "name": _rename(cls.name, scope),
                    "parent": _rename(cls.parent, scope) if cls.parent is not None else None,
                    "scope": scope,
                    "fields": [f.model_copy(update={"type_name": _rename(f.type_name, scope)}) for f in cls.fields],
                }
            )
        )
    return classes


class JsonSchemaSource:
    """Load a schema from a JSON file, or from every ``*.json`` file in a directory.

    Implements the ``SchemaSource`` protocol. When loading a directory, classes
    without an explicit ``scope`` take the stem of the file they came from, and
    a class name found in several scopes becomes ``scope::Name`` in each.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def describe(self) -> str:
        return str(self._path)

    def load_raw(self) -> RawSchema:
        if self._path.is_dir():
            files = sorted(self._path.glob("*.json"))
            if not files:
                raise SchemaUnavailable(str(self._path), "directory contains no *.json files")
            scoped: list[tuple[str, RawClass]] = []
            for file in files:
                document = self._read_file(file)
                scoped.extend((c.scope or file.stem, c) for c in document.classes)
            return RawSchema(classes=qualify_shared_names(scoped))
        return self._read_file(self._path)

    def _read_file(self, file: Path) -> RawSchema:
        try:
            text = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaUnavailable(str(file), str(exc)) from exc
        try:
            document = RawSchema.model_validate_json(text)
        except ValidationError as exc:
            raise MalformedSchema(str(file), _summarize(exc)) from exc
        logger.info("Loaded %d classes from %s", len(document.classes), file)
        return document
