"""Tests for the generator protocol codec, the generators and generate_pict.

No real pict executable is needed: ``subprocess.run`` is monkeypatched.
"""

from __future__ import annotations

import itertools
import subprocess
from types import SimpleNamespace

import pytest

from ucdoc.combinatorial import (
    CombinationGenerator,
    CoveringArrayGenerator,
    EntryPoint,
    EntryPointKind,
    Factor,
    FactorEntryPoint,
    FactorLevelChoice,
    Pict,
    PictGenerator,
    create_generator,
    decode_output,
    encode_model,
    generate_pict,
)
from ucdoc.combinatorial.covering import parse_model
from ucdoc.errors import (
    AdapterProtocolError,
    GeneratorError,
    GeneratorNotFoundError,
    InvalidArgumentError,
)


def make_binding(*factors: Factor) -> FactorEntryPoint:
    binding = FactorEntryPoint()
    binding.add(EntryPoint(EntryPointKind.FLOW, "B01"), factors)
    return binding


A = Factor("a", "A", ("a1", "a2"))
B = Factor("b", "B", ("b1", "b2"))
C = Factor("c", "C", ("c1", "c2", "c3"))


# ============================================================
# Protocol Tests
# ============================================================


class TestEncodeModel:
    """Tests for the request encoding."""

    def test_one_line_per_factor(self):
        assert encode_model(make_binding(A, C)) == "f0: i0, i1\nf1: i0, i1, i2\n"

    def test_constraint_appended_after_blank_line(self):
        model = encode_model(make_binding(A), "IF [f0] = \"i0\" THEN [f0] <> \"i1\";")
        assert model == 'f0: i0, i1\n\nIF [f0] = "i0" THEN [f0] <> "i1";\n'

    def test_blank_constraint_is_ignored(self):
        assert encode_model(make_binding(A), "  \n") == "f0: i0, i1\n"

    def test_omitted_levels_are_not_encoded(self):
        binding = make_binding(C)
        binding.omit_level(FactorLevelChoice("c", "c2"))
        assert encode_model(binding) == "f0: i0, i1\n"


class TestDecodeOutput:
    """Tests for the response decoding."""

    def test_decodes_levels_per_factor(self):
        result = decode_output(make_binding(A, B), "f0\tf1\ni0\ti1\ni1\ti0\n")
        assert result == {"a": ["a1", "a2"], "b": ["b2", "b1"]}

    def test_tokens_index_effective_levels(self):
        binding = make_binding(C)
        binding.omit_level(FactorLevelChoice("c", "c1"))
        assert decode_output(binding, "f0\ni0\ni1\n") == {"c": ["c2", "c3"]}

    def test_crlf_line_endings(self):
        assert decode_output(make_binding(A), "f0\r\ni1\r\n") == {"a": ["a2"]}

    def test_empty_output_raises(self):
        with pytest.raises(AdapterProtocolError, match="no output"):
            decode_output(make_binding(A), "")

    def test_bad_header_raises(self):
        with pytest.raises(AdapterProtocolError, match="header"):
            decode_output(make_binding(A, B), "f1\tf0\ni0\ti0\n")

    def test_wrong_column_count_raises(self):
        with pytest.raises(AdapterProtocolError, match="columns"):
            decode_output(make_binding(A, B), "f0\tf1\ni0\n")

    def test_out_of_range_token_raises(self):
        with pytest.raises(AdapterProtocolError, match="unknown level token"):
            decode_output(make_binding(A), "f0\ni2\n")

    def test_malformed_token_raises(self):
        with pytest.raises(AdapterProtocolError):
            decode_output(make_binding(A), "f0\na1\n")

    def test_header_without_rules_raises(self):
        with pytest.raises(AdapterProtocolError, match="no rules"):
            decode_output(make_binding(A), "f0\n")


# ============================================================
# Builtin Generator Tests
# ============================================================


class TestCoveringArrayGenerator:
    """Tests for the in-process covering array generator."""

    def test_satisfies_protocol(self):
        assert isinstance(CoveringArrayGenerator(), CombinationGenerator)

    def test_two_factors_are_exhaustive(self):
        output = CoveringArrayGenerator().generate("f0: i0, i1\nf1: i0, i1\n")
        assert output.splitlines() == ["f0\tf1", "i0\ti0", "i0\ti1", "i1\ti0", "i1\ti1"]

    def test_single_factor_lists_every_level(self):
        output = CoveringArrayGenerator().generate("f0: i0, i1, i2\n")
        assert output.splitlines() == ["f0", "i0", "i1", "i2"]

    def test_pairwise_covers_every_pair(self):
        gen = CoveringArrayGenerator(seed=7)
        space, _ = parse_model("f0: i0, i1, i2\nf1: i0, i1, i2\nf2: i0, i1\nf3: i0, i1\n")
        combos = gen.cover(space)
        stats = gen.coverage_stats(space, combos)
        assert stats.coverage_pct == 100.0
        assert stats.test_count < space.total_combinations

    def test_same_seed_same_output(self):
        model = "f0: i0, i1, i2\nf1: i0, i1, i2\nf2: i0, i1, i2\n"
        gen = CoveringArrayGenerator(seed=3)
        assert gen.generate(model) == gen.generate(model)
        assert CoveringArrayGenerator(seed=3).generate(model) == gen.generate(model)

    def test_constraint_is_rejected(self):
        with pytest.raises(GeneratorError, match="constraints"):
            CoveringArrayGenerator().generate('f0: i0, i1\n\n[f0] <> "i0";\n')

    def test_malformed_model_raises(self):
        with pytest.raises(GeneratorError, match="cannot parse"):
            CoveringArrayGenerator().generate("not a model\n")

    def test_factor_without_levels_raises(self):
        with pytest.raises(GeneratorError, match="no levels"):
            CoveringArrayGenerator().generate("f0:\n")


# ============================================================
# Pict Generator Tests
# ============================================================


class TestPictGenerator:
    """Tests for the subprocess generator."""

    def test_writes_model_and_returns_stdout(self, monkeypatch, tmp_path):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return SimpleNamespace(returncode=0, stdout="f0\ni0\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        gen = PictGenerator("pict", ["/o:2"], tmp_path)

        assert gen.generate("f0: i0\n") == "f0\ni0\n"
        cmd, kwargs = calls[0]
        assert cmd[0] == "pict"
        assert cmd[1].endswith(".pict.in")
        assert cmd[2:] == ["/o:2"]
        assert (tmp_path / cmd[1].rsplit("/", 1)[-1]).read_text() == "f0: i0\n"
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    def test_sequence_numbers_differ(self, monkeypatch, tmp_path):
        paths = []

        def fake_run(cmd, **kwargs):
            paths.append(cmd[1])
            return SimpleNamespace(returncode=0, stdout="f0\ni0\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        gen = PictGenerator(tmp_dir=tmp_path)
        gen.generate("f0: i0\n")
        gen.generate("f0: i0\n")
        assert paths[0] != paths[1]

    def test_missing_executable(self, monkeypatch, tmp_path):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(GeneratorNotFoundError, match="not found"):
            PictGenerator("no-such-pict", tmp_dir=tmp_path).generate("f0: i0\n")

    def test_nonzero_exit(self, monkeypatch, tmp_path):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda cmd, **kwargs: SimpleNamespace(returncode=1, stdout="", stderr="Input Error"),
        )
        with pytest.raises(GeneratorError) as exc_info:
            PictGenerator(tmp_dir=tmp_path).generate("f0: i0\n")
        assert exc_info.value.stderr == "Input Error"
        assert "Input Error" in str(exc_info.value)


class TestCreateGenerator:
    def test_pict(self, tmp_path):
        gen = create_generator("pict", pict_path="/opt/pict", pict_args=["/r"], tmp_dir=tmp_path)
        assert isinstance(gen, PictGenerator)
        assert gen.executable == "/opt/pict"
        assert gen.args == ["/r"]

    def test_builtin(self):
        gen = create_generator("builtin", seed=5)
        assert isinstance(gen, CoveringArrayGenerator)
        assert gen.seed == 5

    def test_unknown(self):
        with pytest.raises(InvalidArgumentError, match="unknown generator"):
            create_generator("allpairs")


# ============================================================
# Pict (Combination Result) Tests
# ============================================================


class TestGeneratePict:
    """Tests for generate_pict and the Pict value."""

    def test_two_by_two_gives_four_rules(self):
        pict = generate_pict(make_binding(A, B), "", CoveringArrayGenerator())
        assert pict.rule_count == 4
        assert pict.levels("a") == ("a1", "a1", "a2", "a2")
        assert pict.levels("b") == ("b1", "b2", "b1", "b2")

    def test_every_level_pair_is_realised(self):
        pict = generate_pict(make_binding(A, B), "", CoveringArrayGenerator())
        realised = {tuple(c.level for c in pict.rule(n)) for n in range(1, pict.rule_count + 1)}
        assert realised == set(itertools.product(A.levels, B.levels))

    def test_no_factors_skips_generator(self, stub_generator):
        stub = stub_generator("f0\ni0\n")
        pict = generate_pict(FactorEntryPoint(), "", stub)
        assert pict.rule_count == 0
        assert stub.models == []

    def test_constraint_passed_verbatim(self, stub_generator):
        stub = stub_generator("f0\ni0\n")
        generate_pict(make_binding(A), '[f0] = "i0";', stub)
        assert stub.models == ['f0: i0, i1\n\n[f0] = "i0";\n']

    def test_binding_is_copied(self):
        binding = make_binding(A)
        pict = generate_pict(binding, "", CoveringArrayGenerator())
        binding.omit_level(FactorLevelChoice("a", "a1"))
        assert pict.binding.effective_levels("a") == ("a1", "a2")

    def test_combination_is_read_only(self):
        pict = generate_pict(make_binding(A), "", CoveringArrayGenerator())
        with pytest.raises(TypeError):
            pict.combination["a"] = ("a1",)

    def test_unequal_columns_raise(self):
        with pytest.raises(InvalidArgumentError, match="differ in length"):
            Pict(make_binding(A, B), "", {"a": ["a1"], "b": ["b1", "b2"]})

    def test_unknown_factor_raises(self):
        pict = generate_pict(make_binding(A), "", CoveringArrayGenerator())
        with pytest.raises(InvalidArgumentError):
            pict.levels("zzz")

    def test_rule_out_of_range_raises(self):
        pict = generate_pict(make_binding(A), "", CoveringArrayGenerator())
        with pytest.raises(InvalidArgumentError, match="out of range"):
            pict.rule(3)
