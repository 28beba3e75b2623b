"""Basic flows and the alternate/exception branches that leave them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from ucdoc.errors import InvalidArgumentError
from ucdoc.model.actor import Actor, Player


@dataclass(eq=False)
class Flow:
    """One step of a use case, performed by a player.

    ``branches`` and ``has_back_link`` are filled in by the finalize pass
    once every flow of the use case exists.
    """

    id: str
    description: str
    player: Player
    branches: list[BranchFlow] = field(default_factory=list, init=False, repr=False)
    has_back_link: bool = field(default=False, init=False, repr=False)

    def add_branch(self, branch: BranchFlow) -> None:
        if branch not in self.branches:
            self.branches.append(branch)
        self.has_back_link = True


class BranchKind(Enum):
    ALTERNATE = "alternate"
    EXCEPTION = "exception"


@dataclass(eq=False)
class BranchFlow:
    """An alternate or exception flow.

    Both kinds branch from one or more source flows and run their own
    nested flows. An alternate flow then resumes the basic sequence at
    ``return_flow``; an exception flow terminates.
    """

    id: str
    description: str
    kind: BranchKind
    source_flows: list[Flow]
    next_flows: FlowCollection
    return_flow: Flow | None = None
    marked: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.kind is BranchKind.ALTERNATE and self.return_flow is None:
            raise InvalidArgumentError(f"alternate flow {self.id} needs a return flow")
        if self.kind is BranchKind.EXCEPTION and self.return_flow is not None:
            raise InvalidArgumentError(f"exception flow {self.id} cannot have a return flow")

    @classmethod
    def alternate(
        cls,
        id: str,
        description: str,
        source_flows: list[Flow],
        next_flows: FlowCollection,
        return_flow: Flow,
    ) -> BranchFlow:
        return cls(id, description, BranchKind.ALTERNATE, source_flows, next_flows, return_flow)

    @classmethod
    def exception(
        cls,
        id: str,
        description: str,
        source_flows: list[Flow],
        next_flows: FlowCollection,
    ) -> BranchFlow:
        return cls(id, description, BranchKind.EXCEPTION, source_flows, next_flows)

    @property
    def is_alternate(self) -> bool:
        return self.kind is BranchKind.ALTERNATE

    @property
    def is_exception(self) -> bool:
        return self.kind is BranchKind.EXCEPTION

    def mark_verified(self) -> None:
        self.marked = True

    @property
    def covered(self) -> bool:
        return self.marked


def _unique(items: Iterable) -> list:
    seen: list = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


class FlowCollection:
    """Ordered flows addressed by id."""

    def __init__(self, flows: list[Flow] | None = None) -> None:
        self.flows: list[Flow] = list(flows or [])
        self._by_id = {flow.id: flow for flow in self.flows}

    def get(self, identifier: str) -> Flow | None:
        return self._by_id.get(identifier)

    def index(self, flow: Flow) -> int:
        return self.flows.index(flow)

    @property
    def players(self) -> list[Player]:
        return _unique(flow.player for flow in self.flows)

    @property
    def actors(self) -> list[Actor]:
        return [player for player in self.players if isinstance(player, Actor)]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_id
        return item in self.flows

    def __iter__(self) -> Iterator[Flow]:
        return iter(self.flows)

    def __len__(self) -> int:
        return len(self.flows)


class BranchFlowCollection:
    """Alternate or exception flows of one use case, in declaration order."""

    def __init__(self, flows: list[BranchFlow] | None = None) -> None:
        self.flows: list[BranchFlow] = list(flows or [])
        self._by_id = {flow.id: flow for flow in self.flows}

    def get(self, identifier: str) -> BranchFlow | None:
        return self._by_id.get(identifier)

    def nested_flows(self) -> list[Flow]:
        return [nested for branch in self.flows for nested in branch.next_flows]

    @property
    def players(self) -> list[Player]:
        return _unique(player for branch in self.flows for player in branch.next_flows.players)

    @property
    def actors(self) -> list[Actor]:
        return [player for player in self.players if isinstance(player, Actor)]

    def __iter__(self) -> Iterator[BranchFlow]:
        return iter(self.flows)

    def __len__(self) -> int:
        return len(self.flows)
