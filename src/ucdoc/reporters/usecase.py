"""Use case description reporter (``<uc>.md``)."""

from __future__ import annotations

import yaml

from ucdoc.model import App, BranchFlow, Flow, PrePostCondition, UseCase
from ucdoc.reporters.base import BaseReporter


def _anchor(identifier: str) -> str:
    return f'<a name="{identifier}">{identifier}</a>'


def _ref(identifier: str) -> str:
    return f"[{identifier}][]"


def _flow_text(flow: Flow) -> str:
    return f"[{flow.player.text}](#{flow.player.id}): {flow.description}"


class UseCaseReporter(BaseReporter):
    """Writes the human-readable description of every use case.

    Flows that other parts of the document point at (branch sources and
    return flows) get an HTML anchor and a reference-style link
    definition at the end of the document.
    """

    @property
    def file_extension(self) -> str:
        return ".md"

    def generate(self, app: App) -> dict[str, str]:
        return {usecase.id: self.render(usecase) for usecase in app.usecases}

    def render(self, usecase: UseCase) -> str:
        links: list[str] = []
        sections = [
            self._front_matter(usecase),
            f"# {usecase.id} {usecase.name}",
            f"## Summary\n\n{usecase.summary}".rstrip(),
            self._conditions("Preconditions", usecase.pre_conditions),
            self._conditions("Postconditions", usecase.post_conditions),
            self._actors(usecase),
            self._basic_flows(usecase, links),
            self._branches("Alternate flows", list(usecase.alternate_flows), links),
            self._branches("Exception flows", list(usecase.exception_flows), links),
            self._glossaries(usecase, links),
            "\n".join(f"[{link}]: #{link}" for link in links),
        ]
        return "\n\n".join(s for s in sections if s) + "\n"

    def _front_matter(self, usecase: UseCase) -> str:
        data = yaml.safe_dump(
            {"id": usecase.id, "name": usecase.name},
            allow_unicode=True,
            sort_keys=False,
        )
        return f"---\n{data.rstrip()}\n---"

    def _conditions(self, title: str, conditions: list) -> str:
        lines = [f"## {title}", ""]

        def walk(condition: PrePostCondition, depth: int) -> None:
            lines.append(f"{'    ' * depth}- {condition.id}: {condition.description}")
            for detail in condition.details:
                walk(detail, depth + 1)

        for condition in conditions:
            walk(condition, 0)
        return "\n".join(lines).rstrip()

    def _actors(self, usecase: UseCase) -> str:
        lines = ["## Actors", ""]
        lines.extend(f"- {_anchor(actor.id)}: {actor.name}" for actor in usecase.actors)
        return "\n".join(lines).rstrip()

    def _basic_flows(self, usecase: UseCase, links: list[str]) -> str:
        lines = ["## Basic flows", ""]
        for flow in usecase.basic_flows:
            label = _anchor(flow.id) if flow.has_back_link else flow.id
            refs = ""
            if flow.branches:
                refs = " (" + ", ".join(_ref(branch.id) for branch in flow.branches) + ")"
            lines.append(f"- {label}: {_flow_text(flow)}{refs}")
            if flow.has_back_link:
                _add(links, flow.id)
            for branch in flow.branches:
                _add(links, branch.id)
        return "\n".join(lines)

    def _branches(self, title: str, branches: list[BranchFlow], links: list[str]) -> str:
        lines = [f"## {title}", ""]
        for branch in branches:
            sources = ", ".join(_ref(source.id) for source in branch.source_flows)
            lines.append(f"- {_anchor(branch.id)}: {branch.description} (REF: {sources})")
            for nested in branch.next_flows:
                lines.append(f"    - {nested.id}: {_flow_text(nested)}")
            if branch.return_flow is not None:
                lines.append(f"    - Return to {_ref(branch.return_flow.id)}")
                _add(links, branch.return_flow.id)
            else:
                lines.append("    - End")
            for source in branch.source_flows:
                _add(links, source.id)
        return "\n".join(lines).rstrip()

    def _glossaries(self, usecase: UseCase, links: list[str]) -> str:
        if not usecase.glossaries:
            return ""
        lines = ["## Related terms", ""]
        for category in usecase.glossaries.categories:
            lines.append(f"- {category}")
            for glossary in usecase.glossaries.by_category(category):
                text = f"[{glossary.text}]({glossary.url})" if glossary.url else glossary.text
                lines.append(f"    - {_anchor(glossary.id)}: {text}")
                _add(links, glossary.id)
        return "\n".join(lines)


def _add(links: list[str], identifier: str) -> None:
    if identifier not in links:
        links.append(identifier)
