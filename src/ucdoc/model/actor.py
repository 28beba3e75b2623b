"""Actors and glossary terms: the players of a use case flow."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

from ucdoc.errors import UniquenessViolation


@dataclass(frozen=True)
class Actor:
    """A person or external system taking part in use cases."""

    id: str
    name: str

    @property
    def text(self) -> str:
        return self.name


@dataclass(frozen=True)
class Glossary:
    """A glossary term, grouped by category.

    A glossary term can stand in for an actor (e.g. ``system``) and is the
    target of ``${category/term}`` keywords in free text.

    Attributes:
        id: The term itself, unique across all categories.
        category: Category the term is listed under.
        name: Display name. Defaults to the id.
        desc: Longer description. Defaults to the name.
        url: Optional link to further documentation.
    """

    id: str
    category: str
    name: str = ""
    desc: str = ""
    url: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.id)
        if not self.desc:
            object.__setattr__(self, "desc", self.name)

    @property
    def text(self) -> str:
        return self.desc


# A flow is performed either by an actor or by a glossary term.
Player = Union[Actor, Glossary]


@dataclass
class GlossaryCollection:
    """Glossary terms indexed by id and by category (declaration order)."""

    items: list[Glossary] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._by_id: dict[str, Glossary] = {}
        self._by_category: dict[str, list[Glossary]] = {}
        for glossary in self.items:
            if glossary.id in self._by_id:
                raise UniquenessViolation(
                    glossary.id,
                    path=f"glossaries.{glossary.category}.{glossary.id}",
                    first_path=f"glossaries.{self._by_id[glossary.id].category}.{glossary.id}",
                )
            self._by_id[glossary.id] = glossary
            self._by_category.setdefault(glossary.category, []).append(glossary)

    @property
    def categories(self) -> list[str]:
        return list(self._by_category)

    def get(self, term: str, category: str | None = None) -> Glossary | None:
        """Look up a term, optionally requiring it to be in ``category``."""
        glossary = self._by_id.get(term)
        if glossary is None:
            return None
        if category is not None and glossary.category != category:
            return None
        return glossary

    def by_category(self, category: str) -> list[Glossary]:
        return list(self._by_category.get(category, []))

    def __iter__(self) -> Iterator[Glossary]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)
