"""Text protocol spoken with the combination generator.

Request (one line per bound factor, levels as positional tokens)::

    f0: i0, i1
    f1: i0, i1, i2

    <constraint text, verbatim>

Response (tab separated, header row then one row per rule)::

    f0\tf1
    i1\ti0
    i0\ti2

Level text never crosses the boundary, so no escaping rules apply.
"""

from __future__ import annotations

import re

from ucdoc.combinatorial.entry_points import FactorEntryPoint
from ucdoc.errors import AdapterProtocolError

_TOKEN = re.compile(r"^i(\d+)$")


def encode_model(binding: FactorEntryPoint, constraint: str = "") -> str:
    lines = []
    for number, factor in enumerate(binding.factors):
        levels = binding.effective_levels(factor.id)
        tokens = ", ".join(f"i{index}" for index in range(len(levels)))
        lines.append(f"f{number}: {tokens}\n")
    text = "".join(lines)
    if constraint and constraint.strip():
        text += "\n" + constraint.strip("\n") + "\n"
    return text


def decode_output(binding: FactorEntryPoint, output: str) -> dict[str, list[str]]:
    """Map generator output back to ``{factor_id: [level per rule]}``.

    Raises:
        AdapterProtocolError: On a bad header, a wrong column count, an
            unknown token, or an output without any rule.
    """
    factors = binding.factors
    combination: dict[str, list[str]] = {factor.id: [] for factor in factors}
    rows = [row.rstrip("\r") for row in output.split("\n")]
    rows = [row for row in rows if row != ""]
    if not rows:
        raise AdapterProtocolError("generator returned no output")

    expected = len(factors)
    for line_no, row in enumerate(rows, start=1):
        columns = row.split("\t")
        if len(columns) != expected:
            raise AdapterProtocolError(
                f"generator output line {line_no} has {len(columns)} columns, expected {expected}"
            )
        if line_no == 1:
            for number, column in enumerate(columns):
                if column != f"f{number}":
                    raise AdapterProtocolError(f"unexpected header column {column!r}, expected 'f{number}'")
            continue
        for factor, column in zip(factors, columns):
            match = _TOKEN.match(column)
            levels = binding.effective_levels(factor.id)
            if match is None or int(match.group(1)) >= len(levels):
                raise AdapterProtocolError(
                    f"generator output line {line_no} has unknown level token {column!r} for factor {factor.id}"
                )
            combination[factor.id].append(levels[int(match.group(1))])

    if len(rows) == 1:
        raise AdapterProtocolError("generator output has a header but no rules")
    return combination
