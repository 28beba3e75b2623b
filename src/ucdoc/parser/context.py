"""Tracks the dotted path of the field being parsed, for error messages."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class ParserContext:
    """A stack of path segments.

    Example:
        >>> ctx = ParserContext()
        >>> with ctx.scope("usecases", "UC01"):
        ...     ctx.path
        'usecases.UC01'
    """

    def __init__(self) -> None:
        self._segments: list[str] = []

    @property
    def path(self) -> str:
        return ".".join(self._segments)

    def child(self, *segments: object) -> str:
        """Path of a field below the current scope, without entering it."""
        return ".".join([*self._segments, *(str(s) for s in segments)])

    @contextmanager
    def scope(self, *segments: object) -> Iterator[ParserContext]:
        depth = len(self._segments)
        self._segments.extend(str(s) for s in segments)
        try:
            yield self
        finally:
            del self._segments[depth:]
