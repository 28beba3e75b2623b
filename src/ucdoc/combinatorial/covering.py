"""In-process covering array generator.

Speaks the same text protocol as the external pict executable, so it can
stand in for it when pict is not installed. Every t-way combination of
level tokens is exercised at least once:

- t=2 (pairwise): every pair of factor levels appears together.
- t=N (exhaustive): the full Cartesian product.

Example:
    >>> gen = CoveringArrayGenerator(seed=0)
    >>> gen.generate("f0: i0, i1\\nf1: i0, i1\\n").splitlines()
    ['f0\\tf1', 'i0\\ti0', 'i0\\ti1', 'i1\\ti0', 'i1\\ti1']
"""

from __future__ import annotations

import itertools
import logging
import random
import re
from dataclasses import dataclass

from ucdoc.errors import GeneratorError

logger = logging.getLogger(__name__)

_MODEL_LINE = re.compile(r"^\s*(f\d+)\s*:\s*(.*?)\s*$")


@dataclass
class Dimension:
    """One factor of the model: a name and its level tokens."""

    name: str
    values: list[str]

    def __post_init__(self) -> None:
        if not self.values:
            raise GeneratorError(f"factor '{self.name}' has no levels")


@dataclass
class Combination:
    """An assignment of one value to every dimension."""

    values: dict[str, str]

    def covers(self, t_tuple: dict[str, str]) -> bool:
        return all(self.values.get(k) == v for k, v in t_tuple.items())

    def row(self, dimensions: list[Dimension]) -> list[str]:
        return [self.values[d.name] for d in dimensions]


@dataclass
class DimensionSpace:
    dimensions: list[Dimension]

    @property
    def total_combinations(self) -> int:
        total = 1
        for dim in self.dimensions:
            total *= len(dim.values)
        return total

    def all_combinations(self) -> list[Combination]:
        names = [d.name for d in self.dimensions]
        return [
            Combination(dict(zip(names, values)))
            for values in itertools.product(*(d.values for d in self.dimensions))
        ]


@dataclass
class CoverageStats:
    strength: int
    total_tuples: int
    covered_tuples: int
    test_count: int

    @property
    def coverage_pct(self) -> float:
        return (self.covered_tuples / self.total_tuples * 100) if self.total_tuples else 100.0


def parse_model(model: str) -> tuple[DimensionSpace, str]:
    """Split model text into its dimensions and the trailing constraint text."""
    dimensions: list[Dimension] = []
    lines = model.splitlines()
    index = 0
    while index < len(lines) and lines[index].strip():
        match = _MODEL_LINE.match(lines[index])
        if match is None:
            raise GeneratorError(f"cannot parse model line {index + 1}: {lines[index]!r}")
        tokens = [token.strip() for token in match.group(2).split(",") if token.strip()]
        dimensions.append(Dimension(match.group(1), tokens))
        index += 1
    constraint = "\n".join(lines[index:]).strip()
    return DimensionSpace(dimensions), constraint


class CoveringArrayGenerator:
    """Greedy t-wise covering array generator with a seedable RNG.

    1. Collect every t-tuple that needs covering.
    2. Try random candidates seeded from uncovered tuples and keep the
       one covering the most.
    3. Repeat until every tuple is covered.

    Constraint expressions are pict syntax and are not evaluated here; a
    model carrying one is rejected.
    """

    def __init__(self, seed: int | None = 0, strength: int = 2) -> None:
        self.seed = seed
        self.strength = strength
        self._rng = random.Random(seed)

    def generate(self, model: str) -> str:
        space, constraint = parse_model(model)
        if constraint:
            raise GeneratorError(
                "the builtin generator does not support constraints; use the pict generator"
            )
        combinations = self.cover(space)
        header = "\t".join(d.name for d in space.dimensions)
        rows = ["\t".join(c.row(space.dimensions)) for c in combinations]
        return "\n".join([header, *rows]) + "\n"

    def cover(self, space: DimensionSpace) -> list[Combination]:
        n_dims = len(space.dimensions)
        if n_dims == 0:
            return []
        strength = min(self.strength, n_dims)
        if strength == n_dims:
            return space.all_combinations()

        # Reseed per model so equal models always yield equal coverings.
        self._rng = random.Random(self.seed)
        uncovered = self._all_t_tuples(space, strength)
        logger.info(
            "covering %d %d-wise tuples over %d factors (%d exhaustive combinations)",
            len(uncovered), strength, n_dims, space.total_combinations,
        )

        result: list[Combination] = []
        remaining = set(range(len(uncovered)))
        while remaining:
            best = self._find_best_combination(space, uncovered, remaining)
            result.append(best)
            remaining -= {idx for idx in remaining if best.covers(uncovered[idx])}

        logger.info("generated %d rules for %d-wise coverage", len(result), strength)
        return result

    def coverage_stats(self, space: DimensionSpace, combinations: list[Combination]) -> CoverageStats:
        strength = min(self.strength, len(space.dimensions))
        tuples = self._all_t_tuples(space, strength)
        covered = sum(1 for t in tuples if any(c.covers(t) for c in combinations))
        return CoverageStats(strength, len(tuples), covered, len(combinations))

    @staticmethod
    def _all_t_tuples(space: DimensionSpace, strength: int) -> list[dict[str, str]]:
        tuples: list[dict[str, str]] = []
        for subset in itertools.combinations(space.dimensions, strength):
            names = [d.name for d in subset]
            for values in itertools.product(*(d.values for d in subset)):
                tuples.append(dict(zip(names, values)))
        return tuples

    def _find_best_combination(
        self,
        space: DimensionSpace,
        all_tuples: list[dict[str, str]],
        uncovered: set[int],
    ) -> Combination:
        best: Combination | None = None
        best_score = -1
        # Sorted so the candidate sequence only depends on the seed.
        pool = sorted(uncovered)
        for _ in range(max(50, len(space.dimensions) * 10)):
            candidate = self._build_candidate(space, all_tuples[self._rng.choice(pool)])
            score = sum(1 for idx in uncovered if candidate.covers(all_tuples[idx]))
            if score > best_score:
                best, best_score = candidate, score
        assert best is not None
        return best

    def _build_candidate(self, space: DimensionSpace, seed_tuple: dict[str, str]) -> Combination:
        values = dict(seed_tuple)
        for dim in space.dimensions:
            if dim.name not in values:
                values[dim.name] = self._rng.choice(dim.values)
        return Combination({d.name: values[d.name] for d in space.dimensions})
