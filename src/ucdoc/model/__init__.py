"""Entity and flow graph of a use case specification."""

from ucdoc.model.actor import Actor, Glossary, GlossaryCollection, Player
from ucdoc.model.app import App, AppScenario
from ucdoc.model.conditions import PostCondition, PreCondition, PrePostCondition
from ucdoc.model.core import IdRegistry
from ucdoc.model.flow import BranchFlow, BranchFlowCollection, BranchKind, Flow, FlowCollection
from ucdoc.model.usecase import UseCase, finalize, mark_verification_coverage, wire_branch_links

__all__ = [
    "Actor",
    "App",
    "AppScenario",
    "BranchFlow",
    "BranchFlowCollection",
    "BranchKind",
    "Flow",
    "FlowCollection",
    "Glossary",
    "GlossaryCollection",
    "IdRegistry",
    "Player",
    "PostCondition",
    "PreCondition",
    "PrePostCondition",
    "UseCase",
    "finalize",
    "mark_verification_coverage",
    "wire_branch_links",
]
