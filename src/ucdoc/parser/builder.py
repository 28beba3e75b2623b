"""Build the entity model from a validated document.

Building runs in two phases per use case. Phase 1 constructs every
entity and registers its id in the use case's :class:`IdRegistry` as it
goes, so a duplicate id fails before any covering is generated. Phase 2
generates the coverings, attaches the variations and runs
:func:`~ucdoc.model.usecase.finalize` and the coverage checks.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ucdoc.combinatorial import (
    CombinationGenerator,
    EntryPoint,
    Factor,
    FactorEntryPoint,
    FactorLevelChoice,
    FactorLevelChoiceSet,
    create_generator,
    generate_pict,
)
from ucdoc.config import UcdocSettings, load_documents, load_settings
from ucdoc.decision import (
    CoverageWarning,
    ResultOrder,
    Variation,
    VariationResult,
    VerificationPoint,
    resolve_choices,
    validate_coverage,
)
from ucdoc.errors import DuplicateFactorBindingError, StructuralReferenceError, ValidationError
from ucdoc.model import (
    Actor,
    App,
    AppScenario,
    BranchFlow,
    BranchFlowCollection,
    Flow,
    FlowCollection,
    Glossary,
    GlossaryCollection,
    IdRegistry,
    Player,
    PostCondition,
    PreCondition,
    UseCase,
    finalize,
)
from ucdoc.parser.context import ParserContext
from ucdoc.parser.keywords import substitute_keywords
from ucdoc.parser.schema import (
    AlternateFlowDocument,
    AppDocument,
    ConditionDocument,
    ExceptionFlowDocument,
    FlowDocument,
    ResultDocument,
    UseCaseDocument,
    VariationDocument,
    parse_document,
)

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """The built app and the coverage warnings collected in lenient mode."""

    app: App
    warnings: list[CoverageWarning] = field(default_factory=list)


@dataclass
class _VariationDraft:
    id: str
    description: str
    binding: FactorEntryPoint
    constraint: str
    results: list[VariationResult]


class AppBuilder:
    """Turns an :class:`AppDocument` into an :class:`App`.

    Args:
        generator: Combination generator used for every variation.
        keyword_format: Replacement format of ``${...}`` keywords.
        strict: Raise on the first coverage gap instead of collecting
            warnings.
    """

    def __init__(
        self,
        generator: CombinationGenerator,
        keyword_format: str = "「{term}」",
        strict: bool = True,
    ) -> None:
        self.generator = generator
        self.keyword_format = keyword_format
        self.strict = strict
        self.ctx = ParserContext()
        self.actors: dict[str, Actor] = {}
        self.factors: dict[str, Factor] = {}
        self.glossaries = GlossaryCollection()

    def build(self, document: AppDocument) -> ParseResult:
        App.check_required(document.actors, document.usecases)

        terms = GlossaryCollection(
            [Glossary(gid, category) for category, entries in document.glossaries.items() for gid in entries]
        )
        used_terms = substitute_keywords(document, terms, self.keyword_format)

        self.glossaries = GlossaryCollection(
            [
                Glossary(gid, category, doc.name, doc.desc, doc.url)
                for category, entries in document.glossaries.items()
                for gid, doc in entries.items()
            ]
        )
        used_glossaries = {
            uc_id: [self.glossaries.get(term.id, term.category) for term in used]
            for uc_id, used in used_terms.items()
        }
        self.actors = {aid: Actor(aid, doc.name or aid) for aid, doc in document.actors.items()}
        for fid, doc in document.factors.items():
            if not doc.items:
                raise ValidationError(
                    f"factor {fid} needs at least one level",
                    path=f"factors.{fid}.items",
                )
            self.factors[fid] = Factor(fid, doc.name or fid, tuple(doc.items))

        usecases: list[UseCase] = []
        warnings: list[CoverageWarning] = []
        for uc_id, uc_doc in document.usecases.items():
            with self.ctx.scope("usecases", uc_id):
                usecase, drafts = self._build_usecase(uc_id, uc_doc)
                usecase.glossaries = GlossaryCollection(used_glossaries.get(uc_id, []))
                for draft in drafts:
                    pict = generate_pict(draft.binding, draft.constraint, self.generator)
                    usecase.variations.append(
                        Variation(draft.id, draft.description, draft.binding, draft.constraint, pict, draft.results)
                    )
                finalize(usecase)
                warnings.extend(validate_coverage(usecase, strict=self.strict))
            usecases.append(usecase)

        by_id = {usecase.id: usecase for usecase in usecases}
        scenarios: list[AppScenario] = []
        for sid, doc in document.scenarios.items():
            order: list[UseCase] = []
            for uc_id in doc.usecase_order:
                if uc_id not in by_id:
                    raise StructuralReferenceError(
                        f"use case {uc_id} is not defined",
                        path=f"scenarios.{sid}.usecaseOrder.{uc_id}",
                    )
                order.append(by_id[uc_id])
            scenarios.append(AppScenario(sid, doc.name or sid, doc.summary, order))

        app = App(list(self.actors.values()), usecases, scenarios, self.glossaries)
        logger.info("built %d use cases, %d app scenarios", len(usecases), len(scenarios))
        return ParseResult(app, warnings)

    # -------------------------------------------------------------------------
    # Phase 1: entities and ids
    # -------------------------------------------------------------------------

    def _build_usecase(self, uc_id: str, doc: UseCaseDocument) -> tuple[UseCase, list[_VariationDraft]]:
        ids = IdRegistry(scope=uc_id)
        usecase = UseCase(uc_id, doc.name or uc_id, doc.summary, ids=ids)

        with self.ctx.scope("preConditions"):
            usecase.pre_conditions = [
                self._condition(PreCondition, ids, cid, cdoc) for cid, cdoc in doc.pre_conditions.items()
            ]
        with self.ctx.scope("postConditions"):
            usecase.post_conditions = [
                self._condition(PostCondition, ids, cid, cdoc) for cid, cdoc in doc.post_conditions.items()
            ]
        with self.ctx.scope("basicFlows"):
            usecase.basic_flows = FlowCollection(
                [self._flow(ids, fid, fdoc) for fid, fdoc in doc.basic_flows.items()]
            )
        with self.ctx.scope("alternateFlows"):
            usecase.alternate_flows = BranchFlowCollection(
                [self._branch(ids, usecase.basic_flows, bid, bdoc) for bid, bdoc in doc.alternate_flows.items()]
            )
        with self.ctx.scope("exceptionFlows"):
            usecase.exception_flows = BranchFlowCollection(
                [self._branch(ids, usecase.basic_flows, bid, bdoc) for bid, bdoc in doc.exception_flows.items()]
            )

        drafts: list[_VariationDraft] = []
        with self.ctx.scope("valiations"):
            for vid, vdoc in doc.variations.items():
                with self.ctx.scope(vid):
                    drafts.append(self._variation(usecase, vid, vdoc))
        logger.debug("registered %d ids in use case %s", len(ids), uc_id)
        return usecase, drafts

    def _condition(self, cls: type, ids: IdRegistry, cid: str, doc: ConditionDocument):
        with self.ctx.scope(cid):
            ids.register(cid, self.ctx.path)
            with self.ctx.scope("details"):
                details = [self._condition(cls, ids, did, ddoc) for did, ddoc in doc.details.items()]
        return cls(cid, doc.description, details)

    def _player(self, player_id: str) -> Player:
        actor = self.actors.get(player_id)
        if actor is not None:
            return actor
        glossary = self.glossaries.get(player_id)
        if glossary is not None:
            return glossary
        raise StructuralReferenceError(
            f"player {player_id} is neither an actor nor a glossary term",
            path=self.ctx.child("playerId"),
        )

    def _flow(self, ids: IdRegistry, fid: str, doc: FlowDocument) -> Flow:
        with self.ctx.scope(fid):
            ids.register(fid, self.ctx.path)
            return Flow(fid, doc.description, self._player(doc.player_id))

    def _branch(
        self,
        ids: IdRegistry,
        basic_flows: FlowCollection,
        bid: str,
        doc: AlternateFlowDocument | ExceptionFlowDocument,
    ) -> BranchFlow:
        with self.ctx.scope(bid):
            ids.register(bid, self.ctx.path)
            sources: list[Flow] = []
            nested: list[Flow] = []
            with self.ctx.scope("override"):
                for source_id, override in doc.override.items():
                    source = basic_flows.get(source_id)
                    if source is None:
                        raise StructuralReferenceError(
                            f"source flow {source_id} is not a basic flow",
                            path=self.ctx.child(source_id),
                        )
                    sources.append(source)
                    with self.ctx.scope(source_id, "replaceFlows"):
                        nested.extend(self._flow(ids, fid, fdoc) for fid, fdoc in override.replace_flows.items())

            if isinstance(doc, ExceptionFlowDocument):
                return BranchFlow.exception(bid, doc.description, sources, FlowCollection(nested))

            return_flow = basic_flows.get(doc.return_flow_id)
            if return_flow is None:
                first_source = next(iter(doc.override))
                raise StructuralReferenceError(
                    f"return flow {doc.return_flow_id} is not a basic flow",
                    path=self.ctx.child("override", first_source, "returnFlowId"),
                )
            return BranchFlow.alternate(bid, doc.description, sources, FlowCollection(nested), return_flow)

    def _variation(self, usecase: UseCase, vid: str, doc: VariationDocument) -> _VariationDraft:
        usecase.ids.register(vid, self.ctx.path)
        if not doc.results:
            raise ValidationError(f"variation {vid} needs at least one result", path=self.ctx.child("results"))

        binding = FactorEntryPoint()
        with self.ctx.scope("factorEntryPoints"):
            for ep_id, ep_doc in doc.factor_entry_points.items():
                with self.ctx.scope(ep_id):
                    entry_point = self._entry_point(usecase, ep_id)
                    factors = self._factors(binding, ep_id, ep_doc.factors)
                    binding.add(entry_point, factors)

        full = FactorLevelChoiceSet.of_factors(binding.factors)
        results: list[VariationResult] = []
        with self.ctx.scope("results"):
            for rid, rdoc in doc.results.items():
                with self.ctx.scope(rid):
                    usecase.ids.register(rid, self.ctx.path)
                    results.append(self._result(usecase, binding, full, rid, rdoc))
        return _VariationDraft(vid, doc.description, binding, doc.pict_constraint, results)

    def _entry_point(self, usecase: UseCase, ep_id: str) -> EntryPoint:
        condition = usecase.find_pre_condition(ep_id)
        if condition is not None:
            return EntryPoint.of_pre_condition(condition)
        flow = usecase.find_flow(ep_id)
        if flow is not None:
            return EntryPoint.of_flow(flow)
        raise StructuralReferenceError(
            f"entry point {ep_id} is neither a precondition nor a flow of {usecase.id}",
            path=self.ctx.path,
        )

    def _factors(self, binding: FactorEntryPoint, ep_id: str, factor_ids: Iterable[str]) -> list[Factor]:
        factors: list[Factor] = []
        with self.ctx.scope("factors"):
            for fid in factor_ids:
                factor = self.factors.get(fid)
                if factor is None:
                    raise StructuralReferenceError(f"factor {fid} is not defined in factors", path=self.ctx.child(fid))
                bound_to = binding.entry_point_of(fid)
                if bound_to is not None:
                    raise DuplicateFactorBindingError(fid, bound_to.id, path=self.ctx.child(fid))
                if factor in factors:
                    raise DuplicateFactorBindingError(fid, ep_id, path=self.ctx.child(fid))
                factors.append(factor)
        return factors

    def _choices(self, binding: FactorEntryPoint, levels: dict[str, list[str]], key: str) -> FactorLevelChoiceSet:
        choices = FactorLevelChoiceSet()
        with self.ctx.scope(key):
            for fid, values in levels.items():
                if binding.entry_point_of(fid) is None:
                    raise StructuralReferenceError(
                        f"factor {fid} is not bound in this variation",
                        path=self.ctx.child(fid),
                    )
                factor = binding.get_factor(fid)
                for level in values:
                    if not factor.has_level(level):
                        raise StructuralReferenceError(
                            f"{level} is not a level of factor {fid}",
                            path=self.ctx.child(fid, level),
                        )
                    choices.add(FactorLevelChoice(fid, level))
        return choices

    def _result(
        self,
        usecase: UseCase,
        binding: FactorEntryPoint,
        full: FactorLevelChoiceSet,
        rid: str,
        doc: ResultDocument,
    ) -> VariationResult:
        arrow = self._choices(binding, doc.arrow, "arrow") if doc.arrow is not None else None
        disarrow = self._choices(binding, doc.disarrow, "disarrow") if doc.disarrow is not None else None
        choices = resolve_choices(full, arrow, disarrow, ResultOrder(doc.order))

        points: list[VerificationPoint] = []
        with self.ctx.scope("verificationPointIds"):
            for target_id in doc.verification_point_ids:
                points.append(self._verification_point(usecase, target_id))
        return VariationResult(rid, doc.description, choices, points)

    def _verification_point(self, usecase: UseCase, target_id: str) -> VerificationPoint:
        condition = usecase.find_post_condition(target_id)
        if condition is not None:
            return VerificationPoint.of_post_condition(condition)
        branch = usecase.alternate_flows.get(target_id) or usecase.exception_flows.get(target_id)
        if branch is not None:
            return VerificationPoint.of_branch(branch)
        raise StructuralReferenceError(
            f"{target_id} is not a postcondition, alternate flow or exception flow",
            path=self.ctx.child(target_id),
        )


def build_app(
    document: AppDocument,
    generator: CombinationGenerator,
    keyword_format: str = "「{term}」",
    strict: bool = True,
) -> ParseResult:
    """Build an :class:`App` from a validated document."""
    return AppBuilder(generator, keyword_format, strict).build(document)


def generator_for(settings: UcdocSettings) -> CombinationGenerator:
    """The combination generator selected by ``settings``."""
    return create_generator(
        settings.generator,
        pict_path=settings.pict_path,
        pict_args=shlex.split(settings.pict_args),
        tmp_dir=settings.tmp_dir,
        seed=settings.seed,
    )


def parse_files(
    paths: Sequence[str | Path],
    settings: UcdocSettings | None = None,
    generator: CombinationGenerator | None = None,
) -> ParseResult:
    """Load, merge, validate and build the spec files at ``paths``.

    Without ``generator`` one is created from ``settings``.
    """
    settings = settings or load_settings()
    document = parse_document(load_documents(paths, settings.encoding))
    if generator is None:
        generator = generator_for(settings)
    return build_app(document, generator, settings.keyword_format, settings.strict)
