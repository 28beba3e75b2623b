"""Projection of a decision table onto the steps of one scenario."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ucdoc.combinatorial import EntryPoint
from ucdoc.decision.table import ConditionRow, DecisionTable
from ucdoc.model.conditions import PreCondition
from ucdoc.scenario.flows import UcScenario

logger = logging.getLogger(__name__)


class StepIdRegistry:
    """Stable step ids keyed by (entry point, factor, level).

    The first distinct (factor, level) seen for an entry point gets the
    entry point id itself; later ones get ``<id>-2``, ``<id>-3``... Asking
    again for a known tuple returns the id handed out before.
    """

    def __init__(self) -> None:
        self._ids: dict[tuple[str, str, str], str] = {}
        self._counts: dict[str, int] = {}

    def step_id(self, entry_point_id: str, factor_id: str | None = None, level: str | None = None) -> str:
        if factor_id is None or level is None:
            return entry_point_id
        key = (entry_point_id, factor_id, level)
        if key not in self._ids:
            count = self._counts.get(entry_point_id, 0) + 1
            self._counts[entry_point_id] = count
            self._ids[key] = entry_point_id if count == 1 else f"{entry_point_id}-{count}"
        return self._ids[key]

    def reset(self) -> None:
        self._ids.clear()
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._ids)


default_registry = StepIdRegistry()


@dataclass(frozen=True)
class ScenarioStep:
    """One row of a scenario table; ``row`` is None for a placeholder."""

    id: str
    entry_point: EntryPoint
    row: ConditionRow | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.row is None


@dataclass(eq=False)
class ScenarioDecisionTable:
    """Steps of one (scenario, variation) pair: preconditions first, then flows."""

    scenario: UcScenario
    table: DecisionTable
    pre_condition_steps: list[ScenarioStep] = field(default_factory=list)
    flow_steps: list[ScenarioStep] = field(default_factory=list)

    @property
    def steps(self) -> list[ScenarioStep]:
        return self.pre_condition_steps + self.flow_steps

    @property
    def rule_count(self) -> int:
        return self.table.rule_count


def _steps_for(
    entry_point: EntryPoint,
    table: DecisionTable,
    registry: StepIdRegistry,
    placeholder: bool = True,
) -> list[ScenarioStep]:
    rows = table.condition_rows_for(entry_point.id)
    if not rows:
        return [ScenarioStep(registry.step_id(entry_point.id), entry_point)] if placeholder else []
    return [
        ScenarioStep(registry.step_id(entry_point.id, row.factor.id, row.level), entry_point, row)
        for row in rows
    ]


def project(
    scenario: UcScenario,
    table: DecisionTable,
    pre_conditions: list[PreCondition],
    registry: StepIdRegistry | None = None,
) -> ScenarioDecisionTable:
    """Restrict ``table`` to the preconditions and the flows ``scenario`` runs.

    Every top level precondition and every flow of the scenario yields at
    least one step; those without condition rows yield a placeholder.
    Nested precondition details only yield steps when factors are bound
    to them.
    """
    registry = registry if registry is not None else default_registry
    projected = ScenarioDecisionTable(scenario, table)
    for top in pre_conditions:
        for condition in top.walk():
            projected.pre_condition_steps.extend(
                _steps_for(EntryPoint.of_pre_condition(condition), table, registry, placeholder=condition is top)
            )
    for flow in scenario.flows:
        projected.flow_steps.extend(_steps_for(EntryPoint.of_flow(flow), table, registry))
    logger.debug(
        "projected %d steps for scenario %s",
        len(projected.steps), scenario.id,
    )
    return projected
