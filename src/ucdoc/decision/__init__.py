"""Variations, decision tables and coverage validation."""

from ucdoc.decision.branch import SubDecisionTable, derive_sub_table, narrow_binding
from ucdoc.decision.coverage import (
    CoverageWarning,
    GapKind,
    find_rule_gaps,
    find_target_gaps,
    validate_coverage,
)
from ucdoc.decision.table import (
    ConditionMark,
    ConditionRow,
    DecisionTable,
    ResultMark,
    ResultRow,
    build_decision_table,
)
from ucdoc.decision.variation import (
    ResultOrder,
    Variation,
    VariationResult,
    VerificationKind,
    VerificationPoint,
    resolve_choices,
)

__all__ = [
    # Variations
    "ResultOrder",
    "Variation",
    "VariationResult",
    "VerificationKind",
    "VerificationPoint",
    "resolve_choices",
    # Tables
    "ConditionMark",
    "ConditionRow",
    "DecisionTable",
    "ResultMark",
    "ResultRow",
    "build_decision_table",
    # Coverage
    "CoverageWarning",
    "GapKind",
    "find_rule_gaps",
    "find_target_gaps",
    "validate_coverage",
    # Branch tables
    "SubDecisionTable",
    "derive_sub_table",
    "narrow_binding",
]
