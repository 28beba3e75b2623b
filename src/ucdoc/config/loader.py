"""Loading and merging of YAML spec files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from ucdoc.errors import SpecLoadError

logger = logging.getLogger(__name__)


def load_document(path: str | Path, encoding: str = "utf-8") -> dict[str, Any]:
    """Read one YAML spec file; an empty file yields an empty mapping."""
    path = Path(path)
    if not path.exists():
        raise SpecLoadError(
            f"spec file not found: {path}",
            {"path": str(path)},
        )
    try:
        with open(path, encoding=encoding) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"failed to parse YAML: {e}", {"path": str(path)}) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SpecLoadError(f"failed to read spec file: {e}", {"path": str(path)}) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SpecLoadError(
            f"spec file must be a YAML mapping, got {type(data).__name__}",
            {"path": str(path)},
        )
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_documents(paths: Iterable[str | Path], encoding: str = "utf-8") -> dict[str, Any]:
    """Read spec files in order and deep merge them into one mapping."""
    merged: dict[str, Any] = {}
    count = 0
    for path in paths:
        merged = deep_merge(merged, load_document(path, encoding))
        count += 1
    if count == 0:
        raise SpecLoadError("no spec files given")
    logger.debug("merged %d spec files", count)
    return merged
