"""Decision tables narrowed to the results verifying one branch."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ucdoc.combinatorial import (
    CombinationGenerator,
    FactorEntryPoint,
    FactorLevelChoice,
    FactorLevelChoiceSet,
    Pict,
    generate_pict,
)
from ucdoc.decision.table import DecisionTable, build_decision_table
from ucdoc.decision.variation import Variation, VariationResult
from ucdoc.model.flow import BranchFlow

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SubDecisionTable:
    """A variation's decision table restricted to one branch (or the baseline)."""

    variation: Variation
    branch: BranchFlow | None
    results: tuple[VariationResult, ...]
    pict: Pict
    table: DecisionTable


def narrow_binding(variation: Variation, choices: FactorLevelChoiceSet) -> FactorEntryPoint:
    """Keep only the factors and levels that appear in ``choices``."""
    full_factors = {factor.id: factor for factor in variation.binding.factors}
    binding = variation.binding.regenerate_from_factors(
        full_factors[fid] for fid in choices.factor_ids() if fid in full_factors
    )
    for factor in binding.factors:
        for level in factor.levels:
            choice = FactorLevelChoice(factor.id, level)
            if not choices.contains(choice):
                binding.omit_level(choice)
    return binding


def derive_sub_table(
    variation: Variation,
    branch: BranchFlow | None,
    generator: CombinationGenerator,
) -> SubDecisionTable | None:
    """Regenerate ``variation``'s table for the results verifying ``branch``.

    ``branch=None`` selects the baseline: results verifying postconditions
    only. Returns ``None`` when no result is relevant.
    """
    results = variation.results_verifying(branch)
    if not results:
        return None

    union = FactorLevelChoiceSet()
    for result in results:
        for choice in result.choices:
            union.add(choice)
    binding = narrow_binding(variation, union)

    original_ids = [f.id for f in variation.binding.factors]
    narrowed = [f.id for f in binding.factors] != original_ids or any(
        binding.effective_levels(f.id) != f.levels for f in binding.factors
    )
    constraint = variation.constraint
    if narrowed and constraint.strip():
        # Constraints name factors by position, which no longer match.
        logger.info(
            "%s: dropping constraint for the sub table of %s",
            variation.id, branch.id if branch else "the basic flow",
        )
        constraint = ""

    pict = generate_pict(binding, constraint, generator) if narrowed else variation.pict
    table = build_decision_table(pict, results)
    return SubDecisionTable(variation, branch, tuple(results), pict, table)
