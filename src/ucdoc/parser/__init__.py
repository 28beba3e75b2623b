"""Spec document parsing: schema validation, keyword substitution and model building.

Example:
    >>> from ucdoc.combinatorial import CoveringArrayGenerator
    >>> from ucdoc.config import load_settings
    >>> result = parse_files(["usecase.yml"], load_settings(), CoveringArrayGenerator())  # doctest: +SKIP
    >>> result.app.get_usecase("UC01").variations  # doctest: +SKIP
"""

from ucdoc.parser.builder import AppBuilder, ParseResult, build_app, generator_for, parse_files
from ucdoc.parser.context import ParserContext
from ucdoc.parser.keywords import KEYWORD_PATTERN, KeywordResolver, KeywordVisitor, substitute_keywords
from ucdoc.parser.schema import AppDocument, UseCaseDocument, parse_document

__all__ = [
    # Building
    "AppBuilder",
    "ParseResult",
    "build_app",
    "generator_for",
    "parse_files",
    # Schema
    "AppDocument",
    "UseCaseDocument",
    "parse_document",
    # Keywords
    "KEYWORD_PATTERN",
    "KeywordResolver",
    "KeywordVisitor",
    "substitute_keywords",
    "ParserContext",
]
