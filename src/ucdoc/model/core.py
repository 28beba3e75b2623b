"""Identifier registry shared by the model builders."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ucdoc.errors import UniquenessViolation

logger = logging.getLogger(__name__)


class IdRegistry:
    """A scoped uniqueness set.

    Every constructor that declares an id registers it here at
    construction time, so a collision is reported at the point where the
    second declaration is parsed, with both locations.

    Example:
        >>> ids = IdRegistry("usecases.UC01")
        >>> ids.register("R01", "usecases.UC01.preConditions.R01")
        'R01'
        >>> ids.register("R01", "usecases.UC01.basicFlows.R01")
        Traceback (most recent call last):
        ...
        ucdoc.errors.base.UniquenessViolation: ...
    """

    def __init__(self, scope: str = "") -> None:
        self.scope = scope
        self._paths: dict[str, str] = {}

    def register(self, identifier: str, path: str | None = None) -> str:
        """Register ``identifier``; raise :class:`UniquenessViolation` if taken."""
        if identifier in self._paths:
            raise UniquenessViolation(identifier, path=path, first_path=self._paths[identifier])
        self._paths[identifier] = path or identifier
        logger.debug("registered id %s in scope %s", identifier, self.scope or "<root>")
        return identifier

    def path_of(self, identifier: str) -> str | None:
        return self._paths.get(identifier)

    @property
    def ids(self) -> list[str]:
        return list(self._paths)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"IdRegistry({self.scope!r}, {len(self)} ids)"
