"""Variations: factor bindings, their covering and the expected results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Union

from ucdoc.combinatorial import FactorEntryPoint, FactorLevelChoiceSet, Pict
from ucdoc.decision.table import DecisionTable, build_decision_table
from ucdoc.errors import ValidationError
from ucdoc.model.conditions import PostCondition
from ucdoc.model.flow import BranchFlow, BranchKind

logger = logging.getLogger(__name__)


class VerificationKind(Enum):
    POST_CONDITION = "postCondition"
    ALTERNATE_FLOW = "alternateFlow"
    EXCEPTION_FLOW = "exceptionFlow"


@dataclass(frozen=True, eq=False)
class VerificationPoint:
    """What must hold when a result applies: a postcondition or a branch."""

    kind: VerificationKind
    target: Union[PostCondition, BranchFlow]

    @classmethod
    def of_post_condition(cls, condition: PostCondition) -> VerificationPoint:
        return cls(VerificationKind.POST_CONDITION, condition)

    @classmethod
    def of_branch(cls, branch: BranchFlow) -> VerificationPoint:
        if branch.kind is BranchKind.ALTERNATE:
            return cls(VerificationKind.ALTERNATE_FLOW, branch)
        return cls(VerificationKind.EXCEPTION_FLOW, branch)

    @property
    def target_id(self) -> str:
        return self.target.id

    def targets(self, branch: BranchFlow | None) -> bool:
        """Whether this point verifies ``branch`` (``None`` meaning the postconditions)."""
        if branch is None:
            return self.kind is VerificationKind.POST_CONDITION
        return self.kind is not VerificationKind.POST_CONDITION and self.target is branch


class ResultOrder(Enum):
    """Which of arrow and disarrow is applied first."""

    ARROW_FIRST = "arrow"
    DISARROW_FIRST = "disarrow"


def resolve_choices(
    full: FactorLevelChoiceSet,
    arrow: FactorLevelChoiceSet | None = None,
    disarrow: FactorLevelChoiceSet | None = None,
    order: ResultOrder = ResultOrder.ARROW_FIRST,
) -> FactorLevelChoiceSet:
    """Apply the allow-list and deny-list to ``full`` in the given order.

    Without an allow-list nothing is restricted; without a deny-list
    nothing is removed.
    """
    choices = full.copy()
    allowed = arrow if arrow is not None else full.copy()
    denied = disarrow if disarrow is not None else FactorLevelChoiceSet()
    if order is ResultOrder.ARROW_FIRST:
        choices.arrow(allowed)
        choices.disarrow(denied)
    elif order is ResultOrder.DISARROW_FIRST:
        choices.disarrow(denied)
        choices.arrow(allowed)
    return choices


@dataclass(eq=False)
class VariationResult:
    """An expected outcome and the factor-level choices it applies to."""

    id: str
    description: str
    choices: FactorLevelChoiceSet
    verification_points: list[VerificationPoint] = field(default_factory=list)

    def verifies_only(self, branch: BranchFlow | None) -> bool:
        return all(point.targets(branch) for point in self.verification_points)


@dataclass(eq=False)
class Variation:
    """A test design unit: bound factors, their covering and the results.

    Attributes:
        id: Variation id, unique within the use case.
        description: Free text.
        binding: Factor entry points of this variation.
        constraint: Constraint text passed through to the generator.
        pict: Covering generated for ``binding``.
        results: Expected results, at least one.
    """

    id: str
    description: str
    binding: FactorEntryPoint
    constraint: str
    pict: Pict
    results: list[VariationResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.results:
            raise ValidationError(
                f"variation {self.id} needs at least one result",
                hint="declare results with a description and verificationPointIds",
            )

    @property
    def rule_count(self) -> int:
        return self.pict.rule_count

    @cached_property
    def decision_table(self) -> DecisionTable:
        return build_decision_table(self.pict, self.results)

    def results_verifying(self, branch: BranchFlow | None) -> list[VariationResult]:
        """Results whose verification points all target ``branch``.

        ``None`` selects results verifying postconditions only.
        """
        return [result for result in self.results if result.verifies_only(branch)]
