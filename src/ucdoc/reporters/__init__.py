"""Reporters module for ucdoc.

- UseCaseReporter: use case description (``<uc>.md``)
- DecisionTableReporter: decision tables (``<uc>-<variation>.decision.md``)
- PictReporter: raw coverings (``<uc>-<variation>.pict.md``)
- UseCaseTestReporter: use case test documents (``<uc>.uctest.md``)
"""

from __future__ import annotations

from ucdoc.reporters.base import BaseReporter, escape_cell, markdown_table
from ucdoc.reporters.decision import DecisionTableReporter, PictReporter, decision_table_lines, pict_lines
from ucdoc.reporters.uctest import UseCaseTestReporter
from ucdoc.reporters.usecase import UseCaseReporter

__all__ = [
    "BaseReporter",
    "DecisionTableReporter",
    "PictReporter",
    "UseCaseReporter",
    "UseCaseTestReporter",
    "decision_table_lines",
    "escape_cell",
    "markdown_table",
    "pict_lines",
]
