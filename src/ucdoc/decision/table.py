"""Decision table built from a covering and a variation's results."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ucdoc.combinatorial import EntryPoint, Factor, FactorLevelChoice, FactorLevelChoiceSet, Pict
from ucdoc.errors import CoverageGap, InvalidArgumentError

if TYPE_CHECKING:
    from ucdoc.decision.variation import VariationResult

logger = logging.getLogger(__name__)

RULE_HINT = "render the decision table with `ucdoc decision <file>` to find the rule numbers"


class ConditionMark(Enum):
    YES = "Y"
    NO = "N"
    NONE = ""


class ResultMark(Enum):
    CHECK = "X"
    NONE = ""


@dataclass(frozen=True)
class ConditionRow:
    """One (factor, level) row with a mark per rule."""

    factor: Factor
    level: str
    entry_point: EntryPoint
    marks: tuple[ConditionMark, ...]

    @property
    def choice(self) -> FactorLevelChoice:
        return FactorLevelChoice(self.factor.id, self.level)


@dataclass(frozen=True)
class ResultRow:
    result_id: str
    description: str
    marks: tuple[ResultMark, ...]


@dataclass(frozen=True)
class DecisionTable:
    """Condition rows followed by result rows, all sharing the rule columns.

    Tables are values: rebuilding one from the same covering and results
    gives an equal table.
    """

    condition_rows: tuple[ConditionRow, ...] = ()
    result_rows: tuple[ResultRow, ...] = ()

    @property
    def rule_count(self) -> int:
        if not self.condition_rows:
            return 0
        return len(self.condition_rows[0].marks)

    @property
    def rule_numbers(self) -> list[int]:
        return list(range(1, self.rule_count + 1))

    def _check_rule(self, number: int) -> None:
        if not 1 <= number <= self.rule_count:
            raise InvalidArgumentError(f"rule {number} is out of range 1..{self.rule_count}")

    def rule_conditions(self, number: int) -> FactorLevelChoiceSet:
        """Choices marked Yes in the 1-based rule ``number``."""
        self._check_rule(number)
        return FactorLevelChoiceSet(
            row.choice for row in self.condition_rows if row.marks[number - 1] is ConditionMark.YES
        )

    def rule_results(self, number: int) -> list[ResultRow]:
        self._check_rule(number)
        return [row for row in self.result_rows if row.marks[number - 1] is ResultMark.CHECK]

    def condition_rows_for(self, entry_point_id: str) -> list[ConditionRow]:
        return [row for row in self.condition_rows if row.entry_point.id == entry_point_id]

    def uncovered_rules(self) -> list[int]:
        """1-based numbers of the rules without any checked result."""
        return [number for number in self.rule_numbers if not self.rule_results(number)]

    def validate(self, path: str | None = None) -> None:
        """Raise :class:`CoverageGap` if a rule has no expected result."""
        uncovered = self.uncovered_rules()
        if uncovered:
            lines = [f"rule {number} has no expected result" for number in uncovered]
            raise CoverageGap("\n".join(lines), path=path, hint=RULE_HINT, rule_numbers=uncovered)


def build_decision_table(pict: Pict, results: Iterable[VariationResult]) -> DecisionTable:
    """Turn a covering into condition rows and ``results`` into result rows.

    Condition rows list, per factor, the levels that occur in the
    covering in the factor's declared order. A result row is checked for
    a rule when the rule's choices include every choice of the result.
    """
    condition_rows: list[ConditionRow] = []
    for factor in pict.factors:
        column = pict.levels(factor.id)
        entry_point = pict.binding.entry_point_of(factor.id)
        if entry_point is None:
            raise InvalidArgumentError(f'factor "{factor.id}" has no entry point')
        for level in factor.levels:
            if level not in column:
                continue
            marks = tuple(ConditionMark.YES if value == level else ConditionMark.NONE for value in column)
            condition_rows.append(ConditionRow(factor, level, entry_point, marks))

    table = DecisionTable(tuple(condition_rows))
    rules = [table.rule_conditions(number) for number in table.rule_numbers]
    result_rows = [
        ResultRow(
            result.id,
            result.description,
            tuple(ResultMark.CHECK if rule.contains_all(result.choices) else ResultMark.NONE for rule in rules),
        )
        for result in results
    ]
    logger.debug(
        "built decision table: %d condition rows, %d result rows, %d rules",
        len(condition_rows), len(result_rows), table.rule_count,
    )
    return DecisionTable(tuple(condition_rows), tuple(result_rows))
