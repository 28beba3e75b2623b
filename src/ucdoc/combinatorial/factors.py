"""Factors, levels and sets of factor-level choices.

A :class:`Factor` is a named test dimension with an ordered list of
distinct levels. A :class:`FactorLevelChoice` pins one factor to one
level, and a :class:`FactorLevelChoiceSet` is the ordered set of choices
a variation result applies to.

Example:
    >>> browser = Factor("browser", "Browser", ["chrome", "firefox"])
    >>> full = FactorLevelChoiceSet.of_factors([browser])
    >>> full.disarrow(FactorLevelChoiceSet([FactorLevelChoice("browser", "firefox")]))
    >>> [c.level for c in full]
    ['chrome']
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Factor:
    """A test dimension.

    Levels are deduplicated by value, keeping the first occurrence, so
    the declared order is preserved.

    Attributes:
        id: Factor id, unique within the document.
        name: Human readable name.
        levels: Ordered, distinct level values.
    """

    id: str
    name: str
    levels: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        distinct: list[str] = []
        for level in self.levels:
            level = str(level)
            if level in distinct:
                logger.debug("factor %s: dropping duplicate level %r", self.id, level)
                continue
            distinct.append(level)
        object.__setattr__(self, "levels", tuple(distinct))

    def has_level(self, level: str) -> bool:
        return level in self.levels

    def level_index(self, level: str) -> int:
        return self.levels.index(level)

    def with_levels(self, levels: Iterable[str]) -> Factor:
        """Return a copy of this factor restricted to ``levels``, in declared order."""
        wanted = set(levels)
        return Factor(self.id, self.name, tuple(level for level in self.levels if level in wanted))

    @property
    def text(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class FactorLevelChoice:
    """One factor set to one level."""

    factor_id: str
    level: str

    def __str__(self) -> str:
        return f"{self.factor_id}={self.level}"


class FactorLevelChoiceSet:
    """An insertion-ordered set of :class:`FactorLevelChoice`.

    ``arrow`` keeps only choices found in an allow-list and ``disarrow``
    drops choices found in a deny-list. Both remove one offending item at
    a time and rescan from the start until nothing changes.
    """

    def __init__(self, choices: Iterable[FactorLevelChoice] = ()) -> None:
        self._choices: list[FactorLevelChoice] = []
        for choice in choices:
            self.add(choice)

    @classmethod
    def of_factors(cls, factors: Iterable[Factor]) -> FactorLevelChoiceSet:
        """Every (factor, level) choice of ``factors``."""
        result = cls()
        for factor in factors:
            result.add_factor(factor)
        return result

    def add(self, choice: FactorLevelChoice) -> None:
        if choice not in self._choices:
            self._choices.append(choice)

    def add_factor(self, factor: Factor) -> None:
        for level in factor.levels:
            self.add(FactorLevelChoice(factor.id, level))

    def remove(self, choice: FactorLevelChoice) -> None:
        if choice in self._choices:
            self._choices.remove(choice)

    def contains(self, choice: FactorLevelChoice) -> bool:
        return choice in self._choices

    def contains_all(self, choices: Iterable[FactorLevelChoice]) -> bool:
        return all(self.contains(choice) for choice in choices)

    def arrow(self, allowed: FactorLevelChoiceSet) -> None:
        """Remove every choice that is not in ``allowed``."""
        changed = True
        while changed:
            changed = False
            for choice in self._choices:
                if not allowed.contains(choice):
                    self._choices.remove(choice)
                    changed = True
                    break

    def disarrow(self, denied: FactorLevelChoiceSet) -> None:
        """Remove every choice that is in ``denied``."""
        changed = True
        while changed:
            changed = False
            for choice in self._choices:
                if denied.contains(choice):
                    self._choices.remove(choice)
                    changed = True
                    break

    def copy(self) -> FactorLevelChoiceSet:
        return FactorLevelChoiceSet(self._choices)

    def factor_ids(self) -> list[str]:
        ids: list[str] = []
        for choice in self._choices:
            if choice.factor_id not in ids:
                ids.append(choice.factor_id)
        return ids

    def levels_of(self, factor_id: str) -> list[str]:
        return [choice.level for choice in self._choices if choice.factor_id == factor_id]

    def regenerate_factors(self, factors: Iterable[Factor]) -> list[Factor]:
        """Rebuild ``factors`` keeping only the levels chosen in this set.

        Factors with no chosen level are left out. The result follows the
        order in which factors first appear in this set.
        """
        by_id = {factor.id: factor for factor in factors}
        return [by_id[fid].with_levels(self.levels_of(fid)) for fid in self.factor_ids() if fid in by_id]

    @property
    def items(self) -> list[FactorLevelChoice]:
        return list(self._choices)

    def __contains__(self, choice: object) -> bool:
        return choice in self._choices

    def __iter__(self) -> Iterator[FactorLevelChoice]:
        return iter(list(self._choices))

    def __len__(self) -> int:
        return len(self._choices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FactorLevelChoiceSet):
            return NotImplemented
        return self._choices == other._choices

    def __repr__(self) -> str:
        return f"FactorLevelChoiceSet([{', '.join(str(c) for c in self._choices)}])"
