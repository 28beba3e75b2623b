"""Factors, entry-point binding and combination generation.

Example:
    >>> from ucdoc.combinatorial import (
    ...     CoveringArrayGenerator, EntryPoint, EntryPointKind, Factor,
    ...     FactorEntryPoint, generate_pict,
    ... )
    >>> binding = FactorEntryPoint()
    >>> binding.add(EntryPoint(EntryPointKind.FLOW, "B01"), [
    ...     Factor("a", "A", ("a1", "a2")),
    ...     Factor("b", "B", ("b1", "b2")),
    ... ])
    >>> generate_pict(binding, "", CoveringArrayGenerator()).rule_count
    4
"""

from ucdoc.combinatorial.covering import CoverageStats, CoveringArrayGenerator
from ucdoc.combinatorial.entry_points import EntryPoint, EntryPointKind, FactorEntryPoint
from ucdoc.combinatorial.factors import Factor, FactorLevelChoice, FactorLevelChoiceSet
from ucdoc.combinatorial.generator import CombinationGenerator, PictGenerator, create_generator
from ucdoc.combinatorial.pict import Pict, generate_pict
from ucdoc.combinatorial.protocol import decode_output, encode_model

__all__ = [
    # Factors
    "Factor",
    "FactorLevelChoice",
    "FactorLevelChoiceSet",
    # Binding
    "EntryPoint",
    "EntryPointKind",
    "FactorEntryPoint",
    # Generation
    "CombinationGenerator",
    "CoverageStats",
    "CoveringArrayGenerator",
    "PictGenerator",
    "create_generator",
    "encode_model",
    "decode_output",
    "Pict",
    "generate_pict",
]
