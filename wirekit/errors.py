"""Error values that carry an optional source position."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Position:
    """A location in a source file. A line of zero means "no position"."""

    filename: str = ""
    line: int = 0
    column: int = 0

    def is_valid(self) -> bool:
        return self.line > 0

    def __str__(self) -> str:
        text = self.filename
        if self.is_valid():
            if text:
                text += ":"
            text += str(self.line)
            if self.column:
                text += f":{self.column}"
        return text or "-"


class WireError(Exception):
    """An error with an optional position that prefixes its message."""

    def __init__(self, error: BaseException | str, position: Optional[Position] = None):
        if isinstance(error, str):
            error = Exception(error)
        self.error: BaseException = error
        self.position: Position = position if position is not None else Position()
        super().__init__(str(self))

    @property
    def message(self) -> str:
        return str(self.error)

    def __str__(self) -> str:
        if not self.position.is_valid():
            return self.message
        return f"{self.position}: {self.message}"


class WireErrors(Exception):
    """A collection of errors reported together."""

    def __init__(self, errors: Iterable[BaseException]):
        self.errors: List[BaseException] = list(errors)
        super().__init__(str(self))

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self.errors)


def note_position(position: Position, error: Optional[BaseException]) -> Optional[BaseException]:
    """Attach ``position`` to ``error`` unless it already carries one."""
    if error is None:
        return None
    if isinstance(error, WireError):
        return error
    return WireError(error, position)


def map_errors(
    errors: Iterable[BaseException], func: Callable[[BaseException], BaseException]
) -> List[BaseException]:
    """Return a new list with ``func`` applied to every error."""
    return [func(e) for e in errors]


def note_position_all(position: Position, errors: Iterable[BaseException]) -> List[BaseException]:
    """Attach ``position`` to each error that has none yet."""
    return map_errors(errors, lambda e: note_position(position, e))