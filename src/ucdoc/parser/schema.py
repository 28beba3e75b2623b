"""Pydantic models of the declarative spec document.

The merged YAML mapping is validated into these models before any
entity is built. Keys follow the document's camelCase names.

Example document::

    actors:
      user: {name: Library user}
    usecases:
      UC01:
        name: Reserve a book
        preConditions:
          R01: The user is signed in
        basicFlows:
          B01: {playerId: user, description: Searches for a book}
        valiations:
          V01:
            factorEntryPoints:
              B01: {factors: [stock]}
            results:
              VR01: {description: Reserved, arrow: {stock: [available]}, verificationPointIds: [P01]}
    factors:
      stock: {name: Stock, items: [available, none]}
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ucdoc.errors import ParseError


class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


def _none_as_empty_mapping(value: Any) -> Any:
    return {} if value is None else value


# =============================================================================
# Actors, glossaries, factors
# =============================================================================


class ActorDocument(_Document):
    name: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_scalar(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, str):
            return {"name": data}
        return data


class GlossaryDocument(_Document):
    name: str = ""
    desc: str = ""
    url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_none(cls, data: Any) -> Any:
        return _none_as_empty_mapping(data)


class FactorDocument(_Document):
    name: str = ""
    items: list[str] = Field(validation_alias=AliasChoices("items", "levels"))

    @field_validator("items", mode="before")
    @classmethod
    def _levels_as_text(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [str(item) for item in v]
        return v


# =============================================================================
# Conditions and flows
# =============================================================================


class ConditionDocument(_Document):
    """A condition: either a bare description or a mapping with details."""

    description: str = ""
    details: dict[str, ConditionDocument] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_scalar(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, (str, int, float)):
            return {"description": str(data)}
        return data

    @field_validator("details", mode="before")
    @classmethod
    def _details(cls, v: Any) -> Any:
        return _none_as_empty_mapping(v)


class FlowDocument(_Document):
    player_id: str = Field(alias="playerId")
    description: str = ""


class OverrideDocument(_Document):
    """Where a branch leaves the basic flow and what it runs instead."""

    replace_flows: dict[str, FlowDocument] = Field(default_factory=dict, alias="replaceFlows")
    return_flow_id: str | None = Field(default=None, alias="returnFlowId")

    @field_validator("replace_flows", mode="before")
    @classmethod
    def _replace_flows(cls, v: Any) -> Any:
        return _none_as_empty_mapping(v)


class AlternateFlowDocument(_Document):
    description: str = ""
    override: dict[str, OverrideDocument]

    @model_validator(mode="after")
    def _one_return_flow(self) -> AlternateFlowDocument:
        if not self.override:
            raise ValueError("override must name at least one source flow")
        targets = {ov.return_flow_id for ov in self.override.values()}
        if None in targets:
            raise ValueError("every override of an alternate flow needs a returnFlowId")
        if len(targets) > 1:
            raise ValueError(f"overrides name different returnFlowIds: {sorted(targets)}")
        return self

    @property
    def return_flow_id(self) -> str:
        return next(iter(self.override.values())).return_flow_id or ""


class ExceptionFlowDocument(_Document):
    description: str = ""
    override: dict[str, OverrideDocument]

    @model_validator(mode="after")
    def _no_return_flow(self) -> ExceptionFlowDocument:
        if not self.override:
            raise ValueError("override must name at least one source flow")
        for source, ov in self.override.items():
            if ov.return_flow_id is not None:
                raise ValueError(f"exception flows do not return (override {source} has a returnFlowId)")
        return self


# =============================================================================
# Variations
# =============================================================================


class EntryPointFactorsDocument(_Document):
    factors: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _from_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"factors": data}
        return data


class ResultDocument(_Document):
    description: str = ""
    order: Literal["arrow", "disarrow"] = "arrow"
    arrow: dict[str, list[str]] | None = None
    disarrow: dict[str, list[str]] | None = None
    verification_point_ids: list[str] = Field(
        validation_alias=AliasChoices("verificationPointIds", "checkIds"),
    )

    @field_validator("arrow", "disarrow", mode="before")
    @classmethod
    def _levels(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {k: [str(i) for i in (vals if isinstance(vals, list) else [vals])] for k, vals in v.items()}
        return v

    @field_validator("verification_point_ids", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (str, int)):
            return [str(v)]
        return v

    @field_validator("verification_point_ids")
    @classmethod
    def _at_least_one(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("at least one verification point id is required")
        return v


class VariationDocument(_Document):
    description: str = ""
    factor_entry_points: dict[str, EntryPointFactorsDocument] = Field(
        default_factory=dict, alias="factorEntryPoints"
    )
    pict_constraint: str = Field(default="", alias="pictConstraint")
    results: dict[str, ResultDocument] = Field(default_factory=dict)

    @field_validator("pict_constraint", mode="before")
    @classmethod
    def _constraint(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("factor_entry_points", "results", mode="before")
    @classmethod
    def _mappings(cls, v: Any) -> Any:
        return _none_as_empty_mapping(v)


# =============================================================================
# Use cases and the app
# =============================================================================


class UseCaseDocument(_Document):
    name: str = ""
    summary: str = ""
    pre_conditions: dict[str, ConditionDocument] = Field(default_factory=dict, alias="preConditions")
    post_conditions: dict[str, ConditionDocument] = Field(default_factory=dict, alias="postConditions")
    basic_flows: dict[str, FlowDocument] = Field(default_factory=dict, alias="basicFlows")
    alternate_flows: dict[str, AlternateFlowDocument] = Field(default_factory=dict, alias="alternateFlows")
    exception_flows: dict[str, ExceptionFlowDocument] = Field(default_factory=dict, alias="exceptionFlows")
    variations: dict[str, VariationDocument] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("valiations", "variations"),
    )

    @field_validator(
        "pre_conditions",
        "post_conditions",
        "basic_flows",
        "alternate_flows",
        "exception_flows",
        "variations",
        mode="before",
    )
    @classmethod
    def _mappings(cls, v: Any) -> Any:
        return _none_as_empty_mapping(v)


class ScenarioDocument(_Document):
    name: str = ""
    summary: str = ""
    usecase_order: list[str] = Field(default_factory=list, alias="usecaseOrder")


class AppDocument(_Document):
    actors: dict[str, ActorDocument] = Field(default_factory=dict)
    usecases: dict[str, UseCaseDocument] = Field(default_factory=dict)
    factors: dict[str, FactorDocument] = Field(default_factory=dict)
    glossaries: dict[str, dict[str, GlossaryDocument]] = Field(default_factory=dict)
    scenarios: dict[str, ScenarioDocument] = Field(default_factory=dict)

    @field_validator("actors", "usecases", "factors", "glossaries", "scenarios", mode="before")
    @classmethod
    def _mappings(cls, v: Any) -> Any:
        return _none_as_empty_mapping(v)

    @field_validator("glossaries", mode="before")
    @classmethod
    def _categories(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {category: _none_as_empty_mapping(terms) for category, terms in v.items()}
        return v


def parse_document(data: dict[str, Any]) -> AppDocument:
    """Validate a merged spec mapping.

    Raises:
        ParseError: With the dotted path of the first invalid field.
    """
    try:
        return AppDocument.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        path = ".".join(str(part) for part in first["loc"])
        more = f" (and {e.error_count() - 1} more)" if e.error_count() > 1 else ""
        raise ParseError(f"{first['msg']}{more}", path=path) from e
