"""Combination generator implementations.

A generator takes pict model text (see :mod:`ucdoc.combinatorial.protocol`)
and returns the raw tab-separated covering. The decision table engine only
depends on the :class:`CombinationGenerator` protocol, so tests can plug in
a stub.
"""

from __future__ import annotations

import itertools
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from ucdoc.combinatorial.covering import CoveringArrayGenerator
from ucdoc.errors import GeneratorError, GeneratorNotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)


@runtime_checkable
class CombinationGenerator(Protocol):
    """Produces a covering for a pict model.

    Example::

        class FixedGenerator:
            def generate(self, model: str) -> str:
                return "f0\\ni0\\ni1\\n"
    """

    def generate(self, model: str) -> str:
        """Return the covering for ``model`` as tab-separated text."""
        ...


class PictGenerator:
    """Runs the external ``pict`` executable.

    The model is written to ``<seq>.pict.in`` under ``tmp_dir`` and pict is
    run as a blocking subprocess. Failures are not retried.
    """

    _seq = itertools.count(1)

    def __init__(
        self,
        executable: str = "pict",
        args: list[str] | None = None,
        tmp_dir: Path | str | None = None,
    ) -> None:
        self.executable = executable
        self.args = list(args or [])
        self.tmp_dir = Path(tmp_dir) if tmp_dir else Path(tempfile.gettempdir())

    def generate(self, model: str) -> str:
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        model_path = self.tmp_dir / f"{next(self._seq)}.pict.in"
        model_path.write_text(model, encoding="utf-8")

        cmd = [self.executable, str(model_path), *self.args]
        logger.debug("Running pict: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise GeneratorNotFoundError(
                f"pict executable not found: {self.executable}",
                command=cmd,
            ) from e

        if result.returncode != 0:
            raise GeneratorError(
                f"pict exited with status {result.returncode}",
                command=cmd,
                stderr=result.stderr,
            )
        return result.stdout


def create_generator(
    kind: str = "pict",
    *,
    pict_path: str = "pict",
    pict_args: list[str] | None = None,
    tmp_dir: Path | str | None = None,
    seed: int | None = 0,
) -> CombinationGenerator:
    """Build the generator named by ``kind`` (``pict`` or ``builtin``)."""
    if kind == "pict":
        return PictGenerator(pict_path, pict_args, tmp_dir)
    if kind == "builtin":
        return CoveringArrayGenerator(seed=seed)
    raise InvalidArgumentError(f"unknown generator: {kind}", hint="use 'pict' or 'builtin'")
