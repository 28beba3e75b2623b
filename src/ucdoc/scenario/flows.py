"""Test scenarios derived from a use case's basic and branch flows.

One scenario runs the basic flow from start to end. Every alternate
and exception flow adds one scenario that leaves the basic flow at the
branch's source, runs the branch's own flows and then either resumes at
the return flow (alternate) or stops (exception).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ucdoc.errors import InvalidArgumentError
from ucdoc.model.flow import BranchFlow, BranchKind, Flow
from ucdoc.model.usecase import UseCase

logger = logging.getLogger(__name__)


class ScenarioType(Enum):
    BASIC = "basic"
    ALTERNATE = "alternate"
    EXCEPTION = "exception"

    @property
    def label(self) -> str:
        return {"basic": "normal", "alternate": "semi-normal", "exception": "abnormal"}[self.value]


class BranchType(Enum):
    """How a flow row is shown in the scenario/flow matrix."""

    NONE = "none"
    BRANCH = "branch"
    ALTERNATE = "alt"
    EXCEPTION = "ex"


@dataclass(eq=False)
class UcScenario:
    id: str
    description: str
    flows: list[Flow] = field(default_factory=list)
    branch: BranchFlow | None = None

    @property
    def scenario_type(self) -> ScenarioType:
        if self.branch is None:
            return ScenarioType.BASIC
        if self.branch.kind is BranchKind.ALTERNATE:
            return ScenarioType.ALTERNATE
        return ScenarioType.EXCEPTION

    def contains(self, flow: Flow) -> bool:
        return any(f is flow for f in self.flows)


def derive_flows(basic_flows: list[Flow], branch: BranchFlow | None = None) -> list[Flow]:
    """The flow sequence a scenario runs.

    Basic flows before the branch point are kept. The first basic flow
    that is a source of ``branch`` is replaced by the branch's nested
    flows. An alternate branch resumes at its return flow when that flow is
    the branch point itself or comes later in the basic sequence;
    otherwise the scenario ends there, as it does for an exception branch.
    """
    if branch is None:
        return list(basic_flows)

    sources = set(map(id, branch.source_flows))
    for index, flow in enumerate(basic_flows):
        if id(flow) in sources:
            break
    else:
        raise InvalidArgumentError(
            f"none of the source flows of {branch.id} is a basic flow",
            hint="alternate and exception flows must branch from basicFlows",
        )

    sequence = basic_flows[:index] + list(branch.next_flows)
    if branch.kind is BranchKind.EXCEPTION:
        return sequence

    rest = basic_flows[index:]
    for offset, flow in enumerate(rest):
        if flow is branch.return_flow:
            return sequence + rest[offset:]
    logger.debug("%s returns to %s before its branch point, scenario ends", branch.id, branch.return_flow.id)
    return sequence


class UcScenarioCollection:
    """Scenarios as columns and the ordered flows as rows of a matrix.

    The baseline scenario comes first. Rows are the basic flows, each
    followed by the nested flows of the branches leaving it.
    """

    def __init__(self, basic: UcScenario) -> None:
        if basic.scenario_type is not ScenarioType.BASIC:
            raise InvalidArgumentError(f"scenario {basic.id} is not the basic flow scenario")
        self.scenarios: list[UcScenario] = [basic]
        self.flows: list[Flow] = []
        for flow in basic.flows:
            self._append_flow(flow)
            for branch in flow.branches:
                for nested in branch.next_flows:
                    self._append_flow(nested)

    def _append_flow(self, flow: Flow) -> None:
        if not any(f is flow for f in self.flows):
            self.flows.append(flow)

    @property
    def basic(self) -> UcScenario:
        return self.scenarios[0]

    def add(self, scenario: UcScenario) -> None:
        self.scenarios.append(scenario)

    def is_using(self, flow: Flow, scenario: UcScenario) -> bool:
        return scenario.contains(flow)

    def scenarios_using(self, flow: Flow) -> list[UcScenario]:
        return [scenario for scenario in self.scenarios if scenario.contains(flow)]

    def scenario_for(self, branch: BranchFlow | None) -> UcScenario | None:
        for scenario in self.scenarios:
            if scenario.branch is branch:
                return scenario
        return None

    def branch_type(self, flow: Flow) -> BranchType:
        """Classify ``flow`` by the first scenario that runs it."""
        using = self.scenarios_using(flow)
        if not using:
            raise InvalidArgumentError(f"flow {flow.id} is not run by any scenario")
        kind = using[0].scenario_type
        if kind is ScenarioType.BASIC:
            return BranchType.BRANCH if flow.branches else BranchType.NONE
        elif kind is ScenarioType.ALTERNATE:
            return BranchType.ALTERNATE
        elif kind is ScenarioType.EXCEPTION:
            return BranchType.EXCEPTION
        raise InvalidArgumentError(f"unknown scenario type: {kind}")

    def __iter__(self):
        return iter(self.scenarios)

    def __len__(self) -> int:
        return len(self.scenarios)


def scenario_id(number: int, prefix: str = "TP") -> str:
    return f"{prefix}{number:02d}"


def derive_scenarios(usecase: UseCase, prefix: str = "TP") -> UcScenarioCollection:
    """Build the baseline scenario and one scenario per branch flow."""
    basic_flows = list(usecase.basic_flows)
    collection = UcScenarioCollection(
        UcScenario(
            scenario_id(1, prefix),
            "The basic flow completes and the postconditions hold",
            derive_flows(basic_flows),
        )
    )
    for branch in usecase.alternate_flows:
        collection.add(
            UcScenario(
                scenario_id(len(collection) + 1, prefix),
                f"Alternate flow ({branch.description})",
                derive_flows(basic_flows, branch),
                branch,
            )
        )
    for branch in usecase.exception_flows:
        collection.add(
            UcScenario(
                scenario_id(len(collection) + 1, prefix),
                f"Exception flow ({branch.description})",
                derive_flows(basic_flows, branch),
                branch,
            )
        )
    logger.debug("derived %d scenarios for %s", len(collection), usecase.id)
    return collection
