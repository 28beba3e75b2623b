"""Pre and post condition trees."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(eq=False)
class PrePostCondition:
    """A condition with a description and optional nested detail conditions."""

    id: str
    description: str
    details: list = field(default_factory=list)

    def walk(self) -> Iterator[PrePostCondition]:
        """Yield this condition and all nested details, depth first."""
        yield self
        for detail in self.details:
            yield from detail.walk()

    def find(self, identifier: str) -> PrePostCondition | None:
        for condition in self.walk():
            if condition.id == identifier:
                return condition
        return None


@dataclass(eq=False)
class PreCondition(PrePostCondition):
    details: list[PreCondition] = field(default_factory=list)


@dataclass(eq=False)
class PostCondition(PrePostCondition):
    """A postcondition that tracks whether some result verifies it.

    Coverage aggregates bottom up: a condition with details is covered
    once every detail is covered, whether or not it is marked itself; a
    leaf is covered once it is marked.
    """

    details: list[PostCondition] = field(default_factory=list)
    marked: bool = field(default=False, init=False, repr=False)

    def mark_verified(self) -> None:
        self.marked = True

    @property
    def covered(self) -> bool:
        if not self.details:
            return self.marked
        return all(detail.covered for detail in self.details)

    def uncovered_leaves(self) -> list[PostCondition]:
        if not self.details:
            return [] if self.marked else [self]
        leaves: list[PostCondition] = []
        for detail in self.details:
            leaves.extend(detail.uncovered_leaves())
        return leaves
