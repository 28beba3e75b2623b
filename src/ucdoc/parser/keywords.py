"""Substitution of ``${category/term}`` keywords in free text.

The visitor walks the typed document models, rewrites every free-text
field in place and records, per use case, which glossary terms it
references.
"""

from __future__ import annotations

import logging
import re

from ucdoc.errors import StructuralReferenceError
from ucdoc.model.actor import Glossary, GlossaryCollection
from ucdoc.parser.schema import (
    AppDocument,
    ConditionDocument,
    FlowDocument,
    UseCaseDocument,
)

logger = logging.getLogger(__name__)

KEYWORD_PATTERN = re.compile(r"\$\{([^${}]+)\}")


class KeywordResolver:
    """Replaces keywords with ``keyword_format.format(term=<glossary id>)``."""

    def __init__(self, glossaries: GlossaryCollection, keyword_format: str = "「{term}」") -> None:
        self.glossaries = glossaries
        self.keyword_format = keyword_format

    def lookup(self, keyword: str, path: str) -> Glossary:
        category, _, term = keyword.rpartition("/")
        glossary = self.glossaries.get(term.strip(), category.strip() or None)
        if glossary is None:
            raise StructuralReferenceError(
                f"${{{keyword}}} is not defined in glossaries",
                path=path,
                hint="add the term to glossaries or fix the category/term spelling",
            )
        return glossary

    def resolve(self, text: str, path: str) -> tuple[str, list[Glossary]]:
        used: list[Glossary] = []

        def replace(match: re.Match[str]) -> str:
            glossary = self.lookup(match.group(1), path)
            if glossary not in used:
                used.append(glossary)
            return self.keyword_format.format(term=glossary.id)

        return KEYWORD_PATTERN.sub(replace, text), used


class KeywordVisitor:
    """Walks an :class:`AppDocument`, substituting keywords in place."""

    def __init__(self, resolver: KeywordResolver, actor_ids: set[str]) -> None:
        self.resolver = resolver
        self.actor_ids = actor_ids
        self.used: dict[str, list[Glossary]] = {}

    def _text(self, text: str, path: str, usecase_id: str | None = None) -> str:
        if "${" not in text:
            return text
        replaced, glossaries = self.resolver.resolve(text, path)
        if usecase_id is not None:
            self._record(usecase_id, glossaries)
        return replaced

    def _record(self, usecase_id: str, glossaries: list[Glossary]) -> None:
        used = self.used.setdefault(usecase_id, [])
        for glossary in glossaries:
            if glossary not in used:
                used.append(glossary)

    def visit_app(self, document: AppDocument) -> dict[str, list[Glossary]]:
        for actor_id, actor in document.actors.items():
            actor.name = self._text(actor.name, f"actors.{actor_id}.name")
        for factor_id, factor in document.factors.items():
            factor.name = self._text(factor.name, f"factors.{factor_id}.name")
        for category, terms in document.glossaries.items():
            for term_id, term in terms.items():
                base = f"glossaries.{category}.{term_id}"
                term.name = self._text(term.name, f"{base}.name")
                term.desc = self._text(term.desc, f"{base}.desc")
        for scenario_id, scenario in document.scenarios.items():
            base = f"scenarios.{scenario_id}"
            scenario.name = self._text(scenario.name, f"{base}.name")
            scenario.summary = self._text(scenario.summary, f"{base}.summary")
        for usecase_id, usecase in document.usecases.items():
            self.visit_usecase(usecase_id, usecase)
        return self.used

    def visit_usecase(self, usecase_id: str, usecase: UseCaseDocument) -> None:
        base = f"usecases.{usecase_id}"
        self.used.setdefault(usecase_id, [])
        usecase.name = self._text(usecase.name, f"{base}.name", usecase_id)
        usecase.summary = self._text(usecase.summary, f"{base}.summary", usecase_id)
        for key, conditions in (("preConditions", usecase.pre_conditions), ("postConditions", usecase.post_conditions)):
            for cid, condition in conditions.items():
                self._visit_condition(usecase_id, condition, f"{base}.{key}.{cid}")
        for fid, flow in usecase.basic_flows.items():
            self._visit_flow(usecase_id, flow, f"{base}.basicFlows.{fid}")
        for key, branches in (("alternateFlows", usecase.alternate_flows), ("exceptionFlows", usecase.exception_flows)):
            for bid, branch in branches.items():
                path = f"{base}.{key}.{bid}"
                branch.description = self._text(branch.description, f"{path}.description", usecase_id)
                for source, override in branch.override.items():
                    for fid, flow in override.replace_flows.items():
                        self._visit_flow(usecase_id, flow, f"{path}.override.{source}.replaceFlows.{fid}")
        for vid, variation in usecase.variations.items():
            path = f"{base}.valiations.{vid}"
            variation.description = self._text(variation.description, f"{path}.description", usecase_id)
            for rid, result in variation.results.items():
                result.description = self._text(
                    result.description, f"{path}.results.{rid}.description", usecase_id
                )

    def _visit_condition(self, usecase_id: str, condition: ConditionDocument, path: str) -> None:
        condition.description = self._text(condition.description, f"{path}.description", usecase_id)
        for did, detail in condition.details.items():
            self._visit_condition(usecase_id, detail, f"{path}.details.{did}")

    def _visit_flow(self, usecase_id: str, flow: FlowDocument, path: str) -> None:
        flow.description = self._text(flow.description, f"{path}.description", usecase_id)
        if flow.player_id not in self.actor_ids:
            glossary = self.resolver.glossaries.get(flow.player_id)
            if glossary is not None:
                self._record(usecase_id, [glossary])


def substitute_keywords(
    document: AppDocument,
    glossaries: GlossaryCollection,
    keyword_format: str = "「{term}」",
) -> dict[str, list[Glossary]]:
    """Rewrite keywords in ``document``; return the glossary terms used per use case."""
    visitor = KeywordVisitor(KeywordResolver(glossaries, keyword_format), set(document.actors))
    used = visitor.visit_app(document)
    logger.debug("keyword substitution: %s", {uc: [g.id for g in gs] for uc, gs in used.items()})
    return used
