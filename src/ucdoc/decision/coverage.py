"""Coverage validation of decision tables and verification targets.

Two checks run per use case:

1. every rule of every variation's decision table has a checked result;
2. every postcondition and every alternate/exception flow is the
   verification point of some result.

In strict mode the first gap raises :class:`~ucdoc.errors.CoverageGap`.
In lenient mode gaps are logged and returned as :class:`CoverageWarning`
records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ucdoc.decision.table import RULE_HINT
from ucdoc.errors import CoverageGap
from ucdoc.model.usecase import UseCase

logger = logging.getLogger(__name__)

TARGET_HINT = (
    "add a result whose verificationPointIds name the uncovered "
    "postConditions, alternateFlows or exceptionFlows"
)


class GapKind(Enum):
    UNCOVERED_RULE = "uncovered_rule"
    UNCOVERED_TARGET = "uncovered_target"


@dataclass
class CoverageWarning:
    """A coverage gap reported in lenient mode."""

    usecase_id: str
    kind: GapKind
    message: str
    hint: str
    path: str
    variation_id: str | None = None
    rule_numbers: list[int] = field(default_factory=list)
    uncovered_ids: list[str] = field(default_factory=list)

    def to_error(self) -> CoverageGap:
        return CoverageGap(
            self.message,
            path=self.path,
            hint=self.hint,
            rule_numbers=self.rule_numbers,
            uncovered_ids=self.uncovered_ids,
        )


def find_rule_gaps(usecase: UseCase) -> list[CoverageWarning]:
    gaps = []
    for variation in usecase.variations:
        uncovered = variation.decision_table.uncovered_rules()
        if not uncovered:
            continue
        gaps.append(
            CoverageWarning(
                usecase_id=usecase.id,
                kind=GapKind.UNCOVERED_RULE,
                message="\n".join(f"rule {number} has no expected result" for number in uncovered),
                hint=RULE_HINT,
                path=f"usecases.{usecase.id}.valiations.{variation.id}",
                variation_id=variation.id,
                rule_numbers=uncovered,
            )
        )
    return gaps


def find_target_gaps(usecase: UseCase) -> list[CoverageWarning]:
    if not usecase.variations:
        logger.debug("%s declares no variations, skipping verification target check", usecase.id)
        return []

    uncovered_ids: list[str] = []
    lines: list[str] = []
    for condition in usecase.post_conditions:
        if condition.covered:
            continue
        uncovered_ids.append(condition.id)
        leaves = [leaf.id for leaf in condition.uncovered_leaves() if leaf is not condition]
        detail = f" (uncovered details: {', '.join(leaves)})" if leaves else ""
        lines.append(f"postCondition {condition.id} is not verified by any result{detail}")
    for branch in usecase.alternate_flows:
        if not branch.covered:
            uncovered_ids.append(branch.id)
            lines.append(f"alternateFlow {branch.id} is not verified by any result")
    for branch in usecase.exception_flows:
        if not branch.covered:
            uncovered_ids.append(branch.id)
            lines.append(f"exceptionFlow {branch.id} is not verified by any result")

    if not uncovered_ids:
        return []
    return [
        CoverageWarning(
            usecase_id=usecase.id,
            kind=GapKind.UNCOVERED_TARGET,
            message="\n".join(lines),
            hint=TARGET_HINT,
            path=f"usecases.{usecase.id}",
            uncovered_ids=uncovered_ids,
        )
    ]


def validate_coverage(usecase: UseCase, strict: bool = True) -> list[CoverageWarning]:
    """Run both coverage checks on a finalized use case.

    Returns:
        The gaps found, empty when fully covered. Only returned in
        lenient mode; strict mode raises on the first gap.

    Raises:
        CoverageGap: In strict mode, when a gap is found.
    """
    gaps = find_rule_gaps(usecase) + find_target_gaps(usecase)
    for gap in gaps:
        if strict:
            raise gap.to_error()
        logger.warning("%s: %s\n  Hint: %s", gap.path, gap.message, gap.hint)
    return gaps
