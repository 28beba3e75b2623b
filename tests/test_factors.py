"""Tests for factors, level choice sets and factor entry point bindings.

Tests cover:
- Factor level ordering and deduplication
- Arrow/disarrow set algebra
- Binding factors to entry points, omitting levels and regenerating
"""

from __future__ import annotations

import pytest

from ucdoc.combinatorial import (
    EntryPoint,
    EntryPointKind,
    Factor,
    FactorEntryPoint,
    FactorLevelChoice,
    FactorLevelChoiceSet,
)
from ucdoc.errors import DuplicateFactorBindingError, InvalidArgumentError


def choices(*pairs: str) -> FactorLevelChoiceSet:
    return FactorLevelChoiceSet(FactorLevelChoice(*pair.split("=")) for pair in pairs)


OS = Factor("os", "Operating system", ("linux", "mac", "windows"))
BROWSER = Factor("browser", "Browser", ("firefox", "chrome"))
B01 = EntryPoint(EntryPointKind.FLOW, "B01", "Opens the page")
R01 = EntryPoint(EntryPointKind.PRE_CONDITION, "R01", "Signed in")


# ============================================================
# Factor Tests
# ============================================================


class TestFactor:
    """Tests for the Factor class."""

    def test_levels_keep_declared_order(self):
        f = Factor("f", "F", ("b", "a", "c"))
        assert f.levels == ("b", "a", "c")

    def test_duplicate_levels_are_dropped(self):
        f = Factor("f", "F", ("a", "b", "a"))
        assert f.levels == ("a", "b")

    def test_levels_are_text(self):
        f = Factor("f", "F", (1, 2))
        assert f.levels == ("1", "2")
        assert f.has_level("1")

    def test_with_levels_keeps_declared_order(self):
        assert OS.with_levels(["windows", "linux"]).levels == ("linux", "windows")

    def test_text_falls_back_to_id(self):
        assert Factor("f", "", ("a",)).text == "f"
        assert OS.text == "Operating system"


# ============================================================
# Choice Set Tests
# ============================================================


class TestFactorLevelChoiceSet:
    """Tests for the arrow/disarrow set algebra."""

    def test_of_factors_lists_every_level(self):
        full = FactorLevelChoiceSet.of_factors([OS, BROWSER])
        assert [str(c) for c in full] == [
            "os=linux", "os=mac", "os=windows", "browser=firefox", "browser=chrome",
        ]

    def test_add_is_idempotent(self):
        s = choices("os=linux")
        s.add(FactorLevelChoice("os", "linux"))
        assert len(s) == 1

    def test_arrow_keeps_only_allowed(self):
        s = FactorLevelChoiceSet.of_factors([OS, BROWSER])
        s.arrow(choices("os=mac", "browser=chrome"))
        assert s == choices("os=mac", "browser=chrome")

    def test_arrow_with_full_set_changes_nothing(self):
        s = FactorLevelChoiceSet.of_factors([OS])
        s.arrow(FactorLevelChoiceSet.of_factors([OS]))
        assert len(s) == 3

    def test_arrow_is_idempotent(self):
        s = FactorLevelChoiceSet.of_factors([OS])
        s.arrow(choices("os=linux"))
        s.arrow(choices("os=linux"))
        assert s == choices("os=linux")

    def test_disarrow_drops_denied(self):
        s = FactorLevelChoiceSet.of_factors([OS])
        s.disarrow(choices("os=mac", "os=linux"))
        assert s == choices("os=windows")

    def test_disarrow_with_empty_set_changes_nothing(self):
        s = FactorLevelChoiceSet.of_factors([OS])
        s.disarrow(FactorLevelChoiceSet())
        assert len(s) == 3

    def test_contains_all(self):
        s = choices("os=linux", "browser=chrome")
        assert s.contains_all(choices("os=linux"))
        assert not s.contains_all(choices("os=linux", "browser=firefox"))

    def test_copy_is_independent(self):
        s = choices("os=linux")
        c = s.copy()
        c.add(FactorLevelChoice("os", "mac"))
        assert len(s) == 1

    def test_factor_ids_and_levels(self):
        s = choices("browser=chrome", "os=linux", "os=mac")
        assert s.factor_ids() == ["browser", "os"]
        assert s.levels_of("os") == ["linux", "mac"]

    def test_regenerate_factors(self):
        s = choices("browser=chrome", "os=windows", "os=linux")
        regenerated = s.regenerate_factors([OS, BROWSER])
        assert [f.id for f in regenerated] == ["browser", "os"]
        assert regenerated[1].levels == ("linux", "windows")


# ============================================================
# Factor Entry Point Tests
# ============================================================


class TestFactorEntryPoint:
    """Tests for binding factors to entry points."""

    def test_add_and_lookup(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS, BROWSER])
        assert fep.entry_point_of("os") == B01
        assert [f.id for f in fep.factors_of("B01")] == ["os", "browser"]
        assert len(fep) == 2

    def test_unknown_entry_point_has_no_factors(self):
        assert FactorEntryPoint().factors_of("B99") is None

    def test_factor_bound_twice_raises(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS])
        with pytest.raises(DuplicateFactorBindingError) as exc_info:
            fep.add(R01, [OS])
        assert exc_info.value.factor_id == "os"
        assert exc_info.value.entry_point_id == "B01"

    def test_failed_add_leaves_binding_untouched(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS])
        with pytest.raises(DuplicateFactorBindingError):
            fep.add(R01, [BROWSER, OS])
        assert fep.entry_point_of("browser") is None
        assert [ep.id for ep in fep.entry_points] == ["B01"]

    def test_remove_last_factor_drops_entry_point(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS])
        fep.add(R01, [BROWSER])
        fep.remove_factor("os")
        assert [ep.id for ep in fep.entry_points] == ["R01"]

    def test_omit_level(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS])
        fep.omit_level(FactorLevelChoice("os", "mac"))
        assert fep.effective_levels("os") == ("linux", "windows")

    def test_omitting_every_level_unbinds_factor(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS, BROWSER])
        fep.omit_level(FactorLevelChoice("browser", "firefox"))
        fep.omit_level(FactorLevelChoice("browser", "chrome"))
        assert [f.id for f in fep.factors] == ["os"]
        assert fep.entry_point_of("browser") is None

    def test_omit_unbound_factor_raises(self):
        with pytest.raises(InvalidArgumentError):
            FactorEntryPoint().omit_level(FactorLevelChoice("os", "mac"))

    def test_regenerate_from_subset(self):
        fep = FactorEntryPoint()
        fep.add(R01, [BROWSER])
        fep.add(B01, [OS])
        regenerated = fep.regenerate_from_factors([OS.with_levels(["mac"])])
        assert [ep.id for ep in regenerated.entry_points] == ["B01"]
        assert regenerated.get_factor("os").levels == ("mac",)
        # the source binding is untouched
        assert len(fep) == 2

    def test_regenerate_with_unbound_factor_raises(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS])
        with pytest.raises(InvalidArgumentError, match="not bound"):
            fep.regenerate_from_factors([BROWSER])

    def test_copy_is_independent(self):
        fep = FactorEntryPoint()
        fep.add(B01, [OS])
        duplicate = fep.copy()
        duplicate.omit_level(FactorLevelChoice("os", "linux"))
        assert fep.effective_levels("os") == ("linux", "mac", "windows")
