"""ucdoc - use case documents, decision tables and test scenarios.

Use cases are declared in YAML: actors, pre/post conditions, basic flows
and the alternate/exception flows branching from them, plus variations
that bind test factors to entry points. ucdoc generates a pairwise
covering for each variation, builds its decision table, checks that
every rule and every branch is verified, and derives the test scenarios.

Example:
    >>> from ucdoc import parse_files, load_settings
    >>> result = parse_files(["usecase.yml"], load_settings(generator="builtin"))  # doctest: +SKIP
    >>> for uc in result.app.usecases:  # doctest: +SKIP
    ...     print(uc.id, [v.rule_count for v in uc.variations])
"""

from ucdoc.config import UcdocSettings, load_settings
from ucdoc.errors import UcdocError
from ucdoc.model import App, UseCase
from ucdoc.parser import ParseResult, build_app, parse_files

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "App",
    "ParseResult",
    "UcdocError",
    "UcdocSettings",
    "UseCase",
    "build_app",
    "load_settings",
    "parse_files",
]
