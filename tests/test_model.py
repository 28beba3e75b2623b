"""Tests for the entity model and the error taxonomy."""

from __future__ import annotations

import pytest

from ucdoc.errors import (
    CoverageGap,
    GeneratorError,
    ParseError,
    SpecLoadError,
    UcdocError,
    UniquenessViolation,
    ValidationError,
)
from ucdoc.model import (
    Actor,
    App,
    Flow,
    Glossary,
    GlossaryCollection,
    IdRegistry,
    PostCondition,
    PreCondition,
    UseCase,
)

# ============================================================
# Error Tests
# ============================================================


class TestErrors:
    """Tests for error formatting and hierarchy."""

    def test_message_with_path_and_hint(self):
        error = UcdocError("bad value", path="usecases.UC01", hint="fix it")
        assert str(error) == "usecases.UC01: bad value\n  Hint: fix it"

    def test_message_only(self):
        assert str(UcdocError("bad value")) == "bad value"

    def test_hierarchy(self):
        assert issubclass(UniquenessViolation, ParseError)
        assert issubclass(CoverageGap, ValidationError)
        assert issubclass(SpecLoadError, UcdocError)

    def test_uniqueness_violation_names_both_paths(self):
        error = UniquenessViolation("B01", path="a.B01", first_path="b.B01")
        assert 'id "B01" is declared more than once (first declared at b.B01)' in str(error)
        assert str(error).startswith("a.B01: ")

    def test_generator_error_includes_stderr(self):
        error = GeneratorError("pict exited with status 1", command=["pict"], stderr="Input Error\n")
        assert str(error) == "pict exited with status 1\nInput Error"

    def test_spec_load_error_path(self):
        error = SpecLoadError("failed", {"path": "spec.yml"})
        assert error.path == "spec.yml"


# ============================================================
# Model Tests
# ============================================================


class TestIdRegistry:
    def test_register(self):
        ids = IdRegistry("UC01")
        ids.register("R01", "usecases.UC01.preConditions.R01")
        assert "R01" in ids
        assert ids.path_of("R01") == "usecases.UC01.preConditions.R01"
        assert ids.ids == ["R01"]

    def test_duplicate(self):
        ids = IdRegistry("UC01")
        ids.register("R01", "first")
        with pytest.raises(UniquenessViolation) as exc_info:
            ids.register("R01", "second")
        assert exc_info.value.first_path == "first"
        assert exc_info.value.path == "second"


class TestGlossary:
    def test_defaults(self):
        glossary = Glossary("search_screen", "screen")
        assert glossary.name == "search_screen"
        assert glossary.desc == "search_screen"
        assert glossary.text == "search_screen"

    def test_collection_lookup(self):
        collection = GlossaryCollection([Glossary("a", "screen"), Glossary("b", "button"), Glossary("c", "screen")])
        assert collection.categories == ["screen", "button"]
        assert [g.id for g in collection.by_category("screen")] == ["a", "c"]
        assert collection.get("b", "button").id == "b"
        assert collection.get("b", "screen") is None

    def test_term_unique_across_categories(self):
        with pytest.raises(UniquenessViolation) as exc_info:
            GlossaryCollection([Glossary("a", "screen"), Glossary("a", "button")])
        assert exc_info.value.path == "glossaries.button.a"


class TestConditions:
    def test_walk_and_find(self):
        condition = PreCondition("R01", "root", [PreCondition("R01-1", "child", [PreCondition("R01-1-1", "leaf")])])
        assert [c.id for c in condition.walk()] == ["R01", "R01-1", "R01-1-1"]
        assert condition.find("R01-1-1").description == "leaf"
        assert condition.find("R99") is None

    def test_leaf_coverage(self):
        condition = PostCondition("P01", "leaf")
        assert not condition.covered
        condition.mark_verified()
        assert condition.covered

    def test_parent_coverage_aggregates(self):
        first, second = PostCondition("P01-1", "a"), PostCondition("P01-2", "b")
        parent = PostCondition("P01", "parent", [first, second])
        first.mark_verified()
        assert not parent.covered
        assert parent.uncovered_leaves() == [second]
        second.mark_verified()
        assert parent.covered

    def test_marked_parent_with_covered_details(self):
        detail = PostCondition("P01-1", "a")
        parent = PostCondition("P01", "parent", [detail])
        parent.mark_verified()
        assert not parent.covered
        assert parent.uncovered_leaves() == [detail]
        detail.mark_verified()
        assert parent.covered
        assert parent.uncovered_leaves() == []


class TestUseCase:
    def test_lookups(self, sample_usecase):
        assert sample_usecase.find_flow("A01-1").description == "Shows the waiting list"
        assert sample_usecase.find_flow("A01") is None
        assert sample_usecase.find_branch("E01").is_exception
        assert sample_usecase.find_pre_condition("R01").description == "The user is signed in"
        assert sample_usecase.find_post_condition("P01") is not None
        assert sample_usecase.get_variation("V99") is None

    def test_ids_are_registered(self, sample_usecase):
        assert sample_usecase.ids.ids == [
            "R01", "P01", "B01", "B02", "B03", "A01", "A01-1", "E01", "E01-1", "V01", "VR01", "VR02", "VR03",
        ]

    def test_players(self, sample_usecase):
        assert [player.id for player in sample_usecase.players] == ["user", "system"]


class TestApp:
    def test_requires_actor_and_use_case(self):
        with pytest.raises(ValidationError, match="actor"):
            App([], [UseCase("UC01", "x")])
        with pytest.raises(ValidationError, match="use case"):
            App([Actor("user", "User")], [])

    def test_lookups(self):
        user = Actor("user", "User")
        usecase = UseCase("UC01", "x")
        app = App([user], [usecase])
        assert app.get_actor("user") is user
        assert app.get_usecase("UC01") is usecase
        assert app.get_scenario("S01") is None

    def test_flow_player(self):
        flow = Flow("B01", "step", Actor("user", "User"))
        assert flow.branches == []
        assert not flow.has_back_link
