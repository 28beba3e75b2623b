"""Decision table and raw covering reporters.

``<uc>-<variation>.decision.md`` holds the condition rows (factor, level,
``Y`` per rule) followed by the result rows (result, description, ``X``
per rule). ``<uc>-<variation>.pict.md`` holds the covering itself: one
column per factor, one row per rule.
"""

from __future__ import annotations

from ucdoc.combinatorial import Pict
from ucdoc.decision import DecisionTable
from ucdoc.model import App
from ucdoc.reporters.base import BaseReporter, markdown_table

CONDITIONS = "Conditions"
RESULTS = "Results"


def decision_table_lines(table: DecisionTable) -> list[str]:
    """Markdown lines of ``table``; section and factor labels appear once."""
    header = ["", "", "", *(str(n) for n in table.rule_numbers)]
    rows: list[list[str]] = []
    previous_factor = None
    for index, row in enumerate(table.condition_rows):
        section = CONDITIONS if index == 0 else ""
        factor = row.factor.id if row.factor.id != previous_factor else ""
        previous_factor = row.factor.id
        rows.append([section, factor, row.level, *(mark.value for mark in row.marks)])
    for index, result in enumerate(table.result_rows):
        section = RESULTS if index == 0 else ""
        rows.append([section, result.result_id, result.description, *(mark.value for mark in result.marks)])
    return markdown_table(header, rows)


def pict_lines(pict: Pict) -> list[str]:
    factor_ids = list(pict.combination)
    if not factor_ids:
        return ["_No factor is bound to this variation._"]
    rows = [[choice.level for choice in pict.rule(n)] for n in range(1, pict.rule_count + 1)]
    return markdown_table(factor_ids, rows)


class DecisionTableReporter(BaseReporter):
    """Writes one decision table per variation."""

    @property
    def file_extension(self) -> str:
        return ".decision.md"

    def generate(self, app: App) -> dict[str, str]:
        documents: dict[str, str] = {}
        for usecase in app.usecases:
            for variation in usecase.variations:
                lines = decision_table_lines(variation.decision_table)
                documents[f"{usecase.id}-{variation.id}"] = "\n".join(lines) + "\n"
        return documents


class PictReporter(BaseReporter):
    """Writes the raw covering of each variation."""

    @property
    def file_extension(self) -> str:
        return ".pict.md"

    def generate(self, app: App) -> dict[str, str]:
        return {
            f"{usecase.id}-{variation.id}": "\n".join(pict_lines(variation.pict)) + "\n"
            for usecase in app.usecases
            for variation in usecase.variations
        }
