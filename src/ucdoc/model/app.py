"""Top level application model: actors, use cases and app scenarios."""

from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass, field

from ucdoc.errors import ValidationError
from ucdoc.model.actor import Actor, Glossary, GlossaryCollection
from ucdoc.model.usecase import UseCase


@dataclass(eq=False)
class AppScenario:
    """An end-to-end scenario chaining several use cases."""

    id: str
    name: str
    summary: str
    usecase_order: list[UseCase] = field(default_factory=list)


@dataclass(eq=False)
class App:
    actors: list[Actor]
    usecases: list[UseCase]
    scenarios: list[AppScenario] = field(default_factory=list)
    glossaries: GlossaryCollection = field(default_factory=GlossaryCollection)

    def __post_init__(self) -> None:
        self.check_required(self.actors, self.usecases)
        self._actors = {actor.id: actor for actor in self.actors}
        self._usecases = {usecase.id: usecase for usecase in self.usecases}
        self._scenarios = {scenario.id: scenario for scenario in self.scenarios}

    @staticmethod
    def check_required(actors: Sized, usecases: Sized) -> None:
        if not actors:
            raise ValidationError("at least one actor must be declared", path="actors")
        if not usecases:
            raise ValidationError("at least one use case must be declared", path="usecases")

    def get_actor(self, identifier: str) -> Actor | None:
        return self._actors.get(identifier)

    def get_usecase(self, identifier: str) -> UseCase | None:
        return self._usecases.get(identifier)

    def get_scenario(self, identifier: str) -> AppScenario | None:
        return self._scenarios.get(identifier)

    def get_glossary(self, term: str, category: str | None = None) -> Glossary | None:
        return self.glossaries.get(term, category)
