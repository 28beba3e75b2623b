"""Use case test document reporter (``<uc>.uctest.md``).

The document lists the derived scenarios, the players and conditions,
the scenario/flow matrix (a mark where a scenario runs a flow) and, per
scenario and variation, the steps projected from the sub decision table
of that scenario's branch with the expected results per rule.
"""

from __future__ import annotations

import logging

from ucdoc.combinatorial import CombinationGenerator
from ucdoc.decision import ResultMark, derive_sub_table
from ucdoc.model import App, UseCase
from ucdoc.reporters.base import BaseReporter, markdown_table
from ucdoc.scenario import (
    ScenarioType,
    StepIdRegistry,
    UcScenario,
    UcScenarioCollection,
    derive_scenarios,
    project,
)

logger = logging.getLogger(__name__)

ON_MARK = "○"


def _scenario_kind(scenario: UcScenario) -> str:
    if scenario.branch is None:
        return "basic flow"
    if scenario.scenario_type is ScenarioType.ALTERNATE:
        return f"alternate flow ({scenario.branch.id})"
    return f"exception flow ({scenario.branch.id})"


class UseCaseTestReporter(BaseReporter):
    """Writes the test document of every use case.

    Args:
        generator: Generator used to regenerate narrowed sub tables.
        scenario_id_prefix: Prefix of the derived scenario ids.
        step_ids: Registry shared by every document, e.g.
            ``default_registry`` to keep step ids for the whole process.
            By default each document numbers its steps afresh.
    """

    def __init__(
        self,
        generator: CombinationGenerator,
        scenario_id_prefix: str = "TP",
        output_dir=None,
        encoding: str = "utf-8",
        step_ids: StepIdRegistry | None = None,
    ) -> None:
        super().__init__(output_dir, encoding)
        self.generator = generator
        self.scenario_id_prefix = scenario_id_prefix
        self.step_ids = step_ids

    @property
    def file_extension(self) -> str:
        return ".uctest.md"

    def generate(self, app: App) -> dict[str, str]:
        return {usecase.id: self.render(usecase) for usecase in app.usecases}

    def render(self, usecase: UseCase) -> str:
        scenarios = derive_scenarios(usecase, self.scenario_id_prefix)
        sections = [
            f"# {usecase.id} {usecase.name}: use case test",
            self._summary(scenarios),
            self._players(usecase),
            self._conditions("Preconditions", usecase.pre_conditions),
            self._conditions("Postconditions", usecase.post_conditions),
            self._matrix(scenarios),
            self._scenario_tables(usecase, scenarios),
        ]
        return "\n\n".join(s for s in sections if s) + "\n"

    def _summary(self, scenarios: UcScenarioCollection) -> str:
        rows = [
            [scenario.id, scenario.scenario_type.label, _scenario_kind(scenario), scenario.description]
            for scenario in scenarios
        ]
        return "\n".join(["## Test scenarios", "", *markdown_table(["No", "Type", "Use case", "Description"], rows)])

    def _players(self, usecase: UseCase) -> str:
        rows = [[player.id, player.text] for player in usecase.players]
        return "\n".join(["## Players", "", *markdown_table(["Player ID", "Description"], rows)])

    def _conditions(self, title: str, conditions: list) -> str:
        rows = [[condition.id, condition.description] for condition in conditions]
        return "\n".join([f"## {title}", "", *markdown_table(["ID", "Description"], rows)])

    def _matrix(self, scenarios: UcScenarioCollection) -> str:
        header = ["Flow ID", "Branch", *(scenario.id for scenario in scenarios), "Player ID", "Description"]
        rows = []
        for flow in scenarios.flows:
            marks = [ON_MARK if scenario.contains(flow) else "" for scenario in scenarios]
            rows.append([flow.id, scenarios.branch_type(flow).value, *marks, flow.player.id, flow.description])
        return "\n".join(
            [
                "## Test steps",
                "",
                f"Follow the flows marked {ON_MARK} from top to bottom.",
                "",
                *markdown_table(header, rows),
            ]
        )

    def _scenario_tables(self, usecase: UseCase, scenarios: UcScenarioCollection) -> str:
        registry = self.step_ids if self.step_ids is not None else StepIdRegistry()
        blocks: list[str] = []
        for scenario in scenarios:
            for variation in usecase.variations:
                sub = derive_sub_table(variation, scenario.branch, self.generator)
                if sub is None:
                    logger.debug("%s/%s: no result for scenario %s", usecase.id, variation.id, scenario.id)
                    continue
                projected = project(scenario, sub.table, usecase.pre_conditions, registry)
                rules = [str(n) for n in sub.table.rule_numbers]
                rows: list[list[str]] = []
                for step in projected.steps:
                    if step.row is None:
                        rows.append([step.id, step.entry_point.id, "", "", *("" for _ in rules)])
                    else:
                        rows.append(
                            [
                                step.id,
                                step.entry_point.id,
                                step.row.factor.id,
                                step.row.level,
                                *(mark.value for mark in step.row.marks),
                            ]
                        )
                for result in sub.table.result_rows:
                    rows.append(
                        [
                            "",
                            result.result_id,
                            "Expected",
                            result.description,
                            *(ON_MARK if mark is ResultMark.CHECK else "" for mark in result.marks),
                        ]
                    )
                blocks.append(
                    "\n".join(
                        [
                            f"### {scenario.id} / {variation.id}",
                            "",
                            *markdown_table(["Step", "Entry point", "Factor", "Level", *rules], rows),
                        ]
                    )
                )
        if not blocks:
            return ""
        return "\n\n".join(["## Scenario decision tables", *blocks])
