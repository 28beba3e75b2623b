"""Abstract base reporter class for ucdoc.

Reporters turn a built :class:`~ucdoc.model.App` into documents, one
file per use case or per (use case, variation). ``generate`` returns the
documents keyed by file stem; ``save`` writes them under an output
directory.

Example:
    >>> class CountReporter(BaseReporter):
    ...     @property
    ...     def file_extension(self) -> str:
    ...         return ".count.md"
    ...
    ...     def generate(self, app: App) -> dict[str, str]:
    ...         return {uc.id: f"{len(uc.variations)}\\n" for uc in app.usecases}
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path

from ucdoc.model import App

logger = logging.getLogger(__name__)


class BaseReporter(ABC):
    """Abstract base class for all ucdoc reporters.

    Attributes:
        output_dir: Default directory where documents are written.
        encoding: Encoding of written files.
    """

    def __init__(self, output_dir: str | Path | None = None, encoding: str = "utf-8") -> None:
        self.output_dir = Path(output_dir) if output_dir else None
        self.encoding = encoding

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Suffix appended to every document stem, e.g. ``.decision.md``."""
        ...

    @abstractmethod
    def generate(self, app: App) -> dict[str, str]:
        """Render the documents of ``app`` keyed by file stem."""
        ...

    def save(self, app: App, output_dir: str | Path | None = None) -> list[Path]:
        """Write every generated document and return the written paths.

        The output directory is created if missing.

        Raises:
            ValueError: If no output directory is given and none was set
                in the constructor.
        """
        directory = Path(output_dir) if output_dir else self.output_dir
        if directory is None:
            raise ValueError(
                "Output directory required for saving documents. "
                "Provide 'output_dir' argument or set it in the constructor."
            )
        directory.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for stem, content in self.generate(app).items():
            path = directory / f"{stem}{self.file_extension}"
            with open(path, "w", encoding=self.encoding) as f:
                f.write(content)
            logger.info("%s generated", path)
            written.append(path)
        return written


def escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def markdown_table(header: Sequence[str], rows: Iterable[Sequence[str]]) -> list[str]:
    """Lines of a Markdown table; empty cells are rendered as a space."""
    lines = [
        "|" + "|".join(escape_cell(cell) or " " for cell in header) + "|",
        "|" + "|".join("-" for _ in header) + "|",
    ]
    for row in rows:
        lines.append("|" + "|".join(escape_cell(cell) or " " for cell in row) + "|")
    return lines
