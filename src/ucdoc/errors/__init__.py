"""ucdoc error handling module.

Provides the exception taxonomy shared by the parser, the decision
table engine and the combination generator adapter.
"""

from ucdoc.errors.base import (
    AdapterProtocolError,
    ConfigError,
    CoverageGap,
    DuplicateFactorBindingError,
    GeneratorError,
    GeneratorNotFoundError,
    InvalidArgumentError,
    ParseError,
    SpecLoadError,
    StructuralReferenceError,
    UcdocError,
    UniquenessViolation,
    ValidationError,
)

__all__ = [
    # Base
    "UcdocError",
    # Input errors
    "SpecLoadError",
    "ConfigError",
    "ParseError",
    "StructuralReferenceError",
    "UniquenessViolation",
    "DuplicateFactorBindingError",
    # Model validation
    "ValidationError",
    "CoverageGap",
    # Generator boundary
    "GeneratorError",
    "GeneratorNotFoundError",
    "AdapterProtocolError",
    # API misuse
    "InvalidArgumentError",
]
