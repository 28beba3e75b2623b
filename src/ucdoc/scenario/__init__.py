"""Scenario derivation and per-scenario decision table projection."""

from ucdoc.scenario.flows import (
    BranchType,
    ScenarioType,
    UcScenario,
    UcScenarioCollection,
    derive_flows,
    derive_scenarios,
    scenario_id,
)
from ucdoc.scenario.projection import (
    ScenarioDecisionTable,
    ScenarioStep,
    StepIdRegistry,
    default_registry,
    project,
)

__all__ = [
    "BranchType",
    "ScenarioType",
    "UcScenario",
    "UcScenarioCollection",
    "derive_flows",
    "derive_scenarios",
    "scenario_id",
    "ScenarioDecisionTable",
    "ScenarioStep",
    "StepIdRegistry",
    "default_registry",
    "project",
]
