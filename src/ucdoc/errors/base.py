"""Exception hierarchy for ucdoc.

Every error raised by the parser, the decision-table engine and the
combination generator adapter derives from :class:`UcdocError`. Errors
carry the dotted path of the offending field (when one is known) and an
optional remediation hint so the CLI can print actionable messages.

Hierarchy::

    UcdocError
    ├── SpecLoadError
    ├── ConfigError
    ├── ParseError
    │   ├── StructuralReferenceError
    │   ├── UniquenessViolation
    │   └── DuplicateFactorBindingError
    ├── ValidationError
    │   └── CoverageGap
    ├── GeneratorError
    │   ├── GeneratorNotFoundError
    │   └── AdapterProtocolError
    └── InvalidArgumentError
"""

from __future__ import annotations

from typing import Any


class UcdocError(Exception):
    """Base class for all ucdoc errors.

    Attributes:
        message: The bare error message (without path or hint).
        path: Dotted path to the offending field, if known.
        hint: Optional suggestion for fixing the problem.
    """

    def __init__(self, message: str, path: str | None = None, hint: str | None = None) -> None:
        self.message = message
        self.path = path or None
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        text = f"{self.path}: {self.message}" if self.path else self.message
        if self.hint:
            text += f"\n  Hint: {self.hint}"
        return text


class SpecLoadError(UcdocError):
    """Raised when a spec file cannot be read or is not a YAML mapping."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message, path=self.details.get("path"))


class ConfigError(UcdocError):
    """Raised when ucdoc settings are invalid."""


class ParseError(UcdocError):
    """Raised when a spec document is structurally malformed."""


class StructuralReferenceError(ParseError):
    """An id is referenced but never declared (unknown actor, factor, flow...)."""


class UniquenessViolation(ParseError):
    """The same id is declared twice in one scope."""

    def __init__(self, identifier: str, path: str | None = None, first_path: str | None = None) -> None:
        self.identifier = identifier
        self.first_path = first_path
        message = f'id "{identifier}" is declared more than once'
        if first_path:
            message += f" (first declared at {first_path})"
        super().__init__(
            message,
            path=path,
            hint=(
                "ids of preConditions, postConditions, basicFlows, alternateFlows, "
                "exceptionFlows, valiations and results must be unique within a use case"
            ),
        )


class DuplicateFactorBindingError(ParseError):
    """A factor is bound to more than one entry point."""

    def __init__(self, factor_id: str, entry_point_id: str, path: str | None = None) -> None:
        self.factor_id = factor_id
        self.entry_point_id = entry_point_id
        super().__init__(
            f'factor "{factor_id}" is already bound to entry point "{entry_point_id}"',
            path=path,
            hint="a factor can be used by only one entry point within factorEntryPoints",
        )


class ValidationError(UcdocError):
    """Raised when a constructed model violates a rule."""


class CoverageGap(ValidationError):
    """A decision-table rule or a verification target is not covered.

    Attributes:
        rule_numbers: 1-based rule numbers without any satisfied result.
        uncovered_ids: ids of postconditions/branch flows no result verifies.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        hint: str | None = None,
        rule_numbers: list[int] | None = None,
        uncovered_ids: list[str] | None = None,
    ) -> None:
        self.rule_numbers = list(rule_numbers or [])
        self.uncovered_ids = list(uncovered_ids or [])
        super().__init__(message, path=path, hint=hint)


class GeneratorError(UcdocError):
    """The combination generator could not produce a covering."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        detail = f"{message}\n{stderr.strip()}" if stderr.strip() else message
        super().__init__(detail)


class GeneratorNotFoundError(GeneratorError):
    """The generator executable is not installed or not on PATH."""


class AdapterProtocolError(GeneratorError):
    """The generator returned output that does not follow the protocol."""


class InvalidArgumentError(UcdocError):
    """A core API was called with arguments outside its contract."""
