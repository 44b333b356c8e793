import logging
from collections.abc import Callable
from enum import Enum

from offset_finder.core.errors import InvalidOffset, QueryError
from offset_finder.core.index import OffsetIndex
from offset_finder.core.query import Outcome, resolve

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"


class SessionState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


def parse_offset(text: str) -> int:
    """Parse decimal, ``0x``-prefixed or ``h``-suffixed hexadecimal offsets."""
    raw = text.strip()
    sign = 1
    if raw.startswith("-"):
        sign, raw = -1, raw[1:]
    lowered = raw.lower()
    if "-" in lowered or "+" in lowered:
        raise InvalidOffset(text)
    try:
        if lowered.startswith("0x"):
            value = int(lowered[2:], 16)
        elif lowered.endswith("h"):
            value = int(lowered[:-1], 16)
        else:
            value = int(lowered, 10)
    except ValueError:
        raise InvalidOffset(text) from None
    return sign * value


def parse_query(text: str) -> tuple[str | None, int]:
    """Split ``[root_class:]offset`` into its parts."""
    root, sep, offset_text = text.strip().rpartition(":")
    if not sep:
        return None, parse_offset(offset_text)
    root = root.strip()
    if not root:
        raise InvalidOffset(text)
    return root, parse_offset(offset_text)


class Session:
    """Read-resolve-render loop over a built index.

    I/O is injected: ``read_line`` blocks for the next input line and may
    raise ``KeyboardInterrupt`` or ``EOFError``, both of which end the session.
    """

    def __init__(
        self,
        index: OffsetIndex,
        read_line: Callable[[], str],
        on_outcome: Callable[[Outcome], None],
        on_error: Callable[[QueryError], None],
    ) -> None:
        self.index = index
        self.state = SessionState.RUNNING
        self._read_line = read_line
        self._on_outcome = on_outcome
        self._on_error = on_error

    def terminate(self) -> None:
        if self.state is SessionState.RUNNING:
            logger.debug("Session terminated")
        self.state = SessionState.TERMINATED

    def handle(self, line: str) -> Outcome | None:
        if self.state is SessionState.TERMINATED:
            return None
        text = line.strip()
        if not text:
            return None
        if text == EXIT_COMMAND:
            self.terminate()
            return None
        try:
            root, offset = parse_query(text)
            outcome = resolve(self.index, offset, root)
        except QueryError as exc:
            self._on_error(exc)
            return None
        self._on_outcome(outcome)
        return outcome

    def run(self) -> SessionState:
        while self.state is SessionState.RUNNING:
            try:
                self.handle(self._read_line())
            except (KeyboardInterrupt, EOFError):
                self.terminate()
        return self.state
