"""Immutable combination result and the function producing it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ucdoc.combinatorial.entry_points import FactorEntryPoint
from ucdoc.combinatorial.factors import Factor, FactorLevelChoice
from ucdoc.combinatorial.generator import CombinationGenerator
from ucdoc.combinatorial.protocol import decode_output, encode_model
from ucdoc.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pict:
    """A covering: for each bound factor, the level it takes in each rule.

    Attributes:
        binding: The factor entry point the covering was generated for.
        constraint: Constraint text passed to the generator.
        combination: ``{factor_id: (level of rule 1, level of rule 2, ...)}``
            in binding order; every tuple has length ``rule_count``.
    """

    binding: FactorEntryPoint
    constraint: str
    combination: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {fid: tuple(levels) for fid, levels in self.combination.items()}
        lengths = {len(levels) for levels in frozen.values()}
        if len(lengths) > 1:
            raise InvalidArgumentError(f"combination columns differ in length: {sorted(lengths)}")
        object.__setattr__(self, "combination", MappingProxyType(frozen))

    @property
    def factors(self) -> list[Factor]:
        return [self.binding.get_factor(fid) for fid in self.combination]

    @property
    def rule_count(self) -> int:
        for levels in self.combination.values():
            return len(levels)
        return 0

    def levels(self, factor_id: str) -> tuple[str, ...]:
        if factor_id not in self.combination:
            raise InvalidArgumentError(f'factor "{factor_id}" is not in this combination result')
        return self.combination[factor_id]

    def rule(self, number: int) -> list[FactorLevelChoice]:
        """Choices realised by the 1-based rule ``number``."""
        if not 1 <= number <= self.rule_count:
            raise InvalidArgumentError(f"rule {number} is out of range 1..{self.rule_count}")
        return [FactorLevelChoice(fid, levels[number - 1]) for fid, levels in self.combination.items()]


def generate_pict(binding: FactorEntryPoint, constraint: str, generator: CombinationGenerator) -> Pict:
    """Run ``generator`` over ``binding`` and decode its covering.

    With no bound factor the generator is not called and the result has
    zero rules.
    """
    binding = binding.copy()
    if not binding.factors:
        return Pict(binding, constraint, {})
    model = encode_model(binding, constraint)
    logger.debug("generator model:\n%s", model)
    combination = decode_output(binding, generator.generate(model))
    pict = Pict(binding, constraint, combination)
    logger.info("generated %d rules for factors %s", pict.rule_count, list(combination))
    return pict
