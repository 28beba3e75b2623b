"""Use case aggregate and its post-construction finalize pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ucdoc.model.actor import Actor, GlossaryCollection, Player
from ucdoc.model.conditions import PostCondition, PreCondition
from ucdoc.model.core import IdRegistry
from ucdoc.model.flow import BranchFlow, BranchFlowCollection, Flow, FlowCollection

if TYPE_CHECKING:
    from ucdoc.decision.variation import Variation

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class UseCase:
    """A named unit of behaviour: conditions, flows, branches and variations.

    Every id declared inside the use case is registered in ``ids``; the
    parser does this while constructing each entity, so by the time a
    ``UseCase`` exists its ids are known to be unique.
    """

    id: str
    name: str
    summary: str = ""
    pre_conditions: list[PreCondition] = field(default_factory=list)
    post_conditions: list[PostCondition] = field(default_factory=list)
    basic_flows: FlowCollection = field(default_factory=FlowCollection)
    alternate_flows: BranchFlowCollection = field(default_factory=BranchFlowCollection)
    exception_flows: BranchFlowCollection = field(default_factory=BranchFlowCollection)
    variations: list[Variation] = field(default_factory=list)
    glossaries: GlossaryCollection = field(default_factory=GlossaryCollection)
    ids: IdRegistry = field(default_factory=IdRegistry, repr=False)

    @property
    def players(self) -> list[Player]:
        players: list[Player] = []
        for source in (self.basic_flows, self.alternate_flows, self.exception_flows):
            for player in source.players:
                if player not in players:
                    players.append(player)
        return players

    @property
    def actors(self) -> list[Actor]:
        return [player for player in self.players if isinstance(player, Actor)]

    @property
    def branches(self) -> list[BranchFlow]:
        return list(self.alternate_flows) + list(self.exception_flows)

    def find_flow(self, identifier: str) -> Flow | None:
        """Find a basic flow or a flow nested in any branch."""
        flow = self.basic_flows.get(identifier)
        if flow is not None:
            return flow
        for branch in self.branches:
            flow = branch.next_flows.get(identifier)
            if flow is not None:
                return flow
        return None

    def find_branch(self, identifier: str) -> BranchFlow | None:
        return self.alternate_flows.get(identifier) or self.exception_flows.get(identifier)

    def find_pre_condition(self, identifier: str) -> PreCondition | None:
        for condition in self.pre_conditions:
            found = condition.find(identifier)
            if found is not None:
                return found
        return None

    def find_post_condition(self, identifier: str) -> PostCondition | None:
        for condition in self.post_conditions:
            found = condition.find(identifier)
            if found is not None:
                return found
        return None

    def get_variation(self, identifier: str) -> Variation | None:
        for variation in self.variations:
            if variation.id == identifier:
                return variation
        return None


def wire_branch_links(usecase: UseCase) -> None:
    """Record on every source flow the branches leaving it.

    Return flows of alternate branches are flagged as back-linked too, so
    renderers can emit an anchor for them.
    """
    for branch in usecase.branches:
        for source in branch.source_flows:
            source.add_branch(branch)
        if branch.return_flow is not None:
            branch.return_flow.has_back_link = True
    logger.debug("wired %d branch flows of %s", len(usecase.branches), usecase.id)


def mark_verification_coverage(usecase: UseCase) -> None:
    """Flag every postcondition and branch flow that some result verifies."""
    for variation in usecase.variations:
        for result in variation.results:
            for point in result.verification_points:
                point.target.mark_verified()


def finalize(usecase: UseCase) -> UseCase:
    """Run the post-construction pass once all entities of the use case exist."""
    wire_branch_links(usecase)
    mark_verification_coverage(usecase)
    return usecase
