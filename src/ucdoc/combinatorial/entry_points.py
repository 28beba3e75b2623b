"""Binding of factors to the entry points where their levels are injected."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ucdoc.combinatorial.factors import Factor, FactorLevelChoice
from ucdoc.errors import DuplicateFactorBindingError, InvalidArgumentError

if TYPE_CHECKING:
    from ucdoc.model.conditions import PreCondition
    from ucdoc.model.flow import Flow

logger = logging.getLogger(__name__)


class EntryPointKind(Enum):
    PRE_CONDITION = "preCondition"
    FLOW = "flow"


@dataclass(frozen=True)
class EntryPoint:
    """A precondition or a flow step, addressed by its use case id."""

    kind: EntryPointKind
    id: str
    description: str = ""

    @classmethod
    def of_pre_condition(cls, condition: PreCondition) -> EntryPoint:
        return cls(EntryPointKind.PRE_CONDITION, condition.id, condition.description)

    @classmethod
    def of_flow(cls, flow: Flow) -> EntryPoint:
        return cls(EntryPointKind.FLOW, flow.id, flow.description)


class FactorEntryPoint:
    """Which entry point each factor of a variation is bound to.

    A factor belongs to exactly one entry point; an entry point may own
    several factors. Factor and entry point order follow insertion.

    The omit ledger lets levels be left out of combination generation
    without unbinding the factor. Omitting the last remaining level of a
    factor unbinds it.

    Example:
        >>> fep = FactorEntryPoint()
        >>> fep.add(EntryPoint(EntryPointKind.FLOW, "B01"), [Factor("os", "OS", ("linux", "mac"))])
        >>> fep.entry_point_of("os").id
        'B01'
    """

    def __init__(self) -> None:
        self._entry_points: dict[str, EntryPoint] = {}
        self._factors_by_ep: dict[str, list[Factor]] = {}
        self._factors: dict[str, Factor] = {}
        self._ep_by_factor: dict[str, str] = {}
        self._omitted: dict[str, list[str]] = {}

    def add(self, entry_point: EntryPoint, factors: Iterable[Factor]) -> None:
        """Bind ``factors`` to ``entry_point``.

        Raises:
            DuplicateFactorBindingError: If a factor is already bound.
        """
        factors = list(factors)
        for factor in factors:
            if factor.id in self._factors:
                raise DuplicateFactorBindingError(factor.id, self._ep_by_factor[factor.id])
        self._entry_points.setdefault(entry_point.id, entry_point)
        bound = self._factors_by_ep.setdefault(entry_point.id, [])
        for factor in factors:
            self._factors[factor.id] = factor
            self._ep_by_factor[factor.id] = entry_point.id
            bound.append(factor)
        logger.debug("bound %s to entry point %s", [f.id for f in factors], entry_point.id)

    def remove_factor(self, factor_id: str) -> None:
        """Unbind a factor; an entry point left without factors is dropped."""
        ep_id = self._ep_by_factor.pop(factor_id, None)
        self._factors.pop(factor_id, None)
        self._omitted.pop(factor_id, None)
        if ep_id is None:
            return
        remaining = [f for f in self._factors_by_ep[ep_id] if f.id != factor_id]
        if remaining:
            self._factors_by_ep[ep_id] = remaining
        else:
            del self._factors_by_ep[ep_id]
            del self._entry_points[ep_id]

    def regenerate_from_factors(self, factors: Iterable[Factor]) -> FactorEntryPoint:
        """Build a new binding restricted to ``factors``.

        Each given factor keeps the entry point it is bound to here; the
        given ``Factor`` objects (possibly with fewer levels) replace the
        bound ones.

        Raises:
            InvalidArgumentError: If a factor is not bound here.
        """
        factors = list(factors)
        for factor in factors:
            if factor.id not in self._factors:
                raise InvalidArgumentError(
                    f'factor "{factor.id}" is not bound in this factor entry point',
                    hint="a binding can only be regenerated from a subset of its own factors",
                )
        regenerated = FactorEntryPoint()
        for ep_id, entry_point in self._entry_points.items():
            bound_ids = {f.id for f in self._factors_by_ep[ep_id]}
            selected = [f for f in factors if f.id in bound_ids]
            if selected:
                regenerated.add(entry_point, selected)
        return regenerated

    def omit_level(self, choice: FactorLevelChoice) -> None:
        """Exclude one level of a bound factor from generation."""
        factor = self._factors.get(choice.factor_id)
        if factor is None:
            raise InvalidArgumentError(f'factor "{choice.factor_id}" is not bound')
        omitted = self._omitted.setdefault(factor.id, [])
        if choice.level not in omitted:
            omitted.append(choice.level)
        if all(level in omitted for level in factor.levels):
            logger.debug("all levels of %s omitted, unbinding it", factor.id)
            self.remove_factor(factor.id)

    def effective_levels(self, factor_id: str) -> tuple[str, ...]:
        """Levels of a bound factor that are not omitted, in declared order."""
        factor = self.get_factor(factor_id)
        omitted = self._omitted.get(factor_id, [])
        return tuple(level for level in factor.levels if level not in omitted)

    def get_factor(self, factor_id: str) -> Factor:
        factor = self._factors.get(factor_id)
        if factor is None:
            raise InvalidArgumentError(f'factor "{factor_id}" is not bound')
        return factor

    def entry_point_of(self, factor_id: str) -> EntryPoint | None:
        ep_id = self._ep_by_factor.get(factor_id)
        return self._entry_points[ep_id] if ep_id is not None else None

    def factors_of(self, entry_point_id: str) -> list[Factor] | None:
        factors = self._factors_by_ep.get(entry_point_id)
        return list(factors) if factors is not None else None

    @property
    def entry_points(self) -> list[EntryPoint]:
        return list(self._entry_points.values())

    @property
    def factors(self) -> list[Factor]:
        return list(self._factors.values())

    def copy(self) -> FactorEntryPoint:
        duplicate = FactorEntryPoint()
        duplicate._entry_points = dict(self._entry_points)
        duplicate._factors_by_ep = {k: list(v) for k, v in self._factors_by_ep.items()}
        duplicate._factors = dict(self._factors)
        duplicate._ep_by_factor = dict(self._ep_by_factor)
        duplicate._omitted = {k: list(v) for k, v in self._omitted.items()}
        return duplicate

    def __len__(self) -> int:
        return len(self._factors)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{ep}: {[f.id for f in fs]}" for ep, fs in self._factors_by_ep.items())
        return f"FactorEntryPoint({pairs})"
