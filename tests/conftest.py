"""Pytest fixtures for ucdoc tests."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import pytest
import yaml

from ucdoc.combinatorial import CoveringArrayGenerator
from ucdoc.config import UcdocSettings
from ucdoc.parser import build_app, parse_document


class StubGenerator:
    """Generator returning canned output and recording every model it receives."""

    def __init__(self, output: str = "") -> None:
        self.output = output
        self.models: list[str] = []

    def generate(self, model: str) -> str:
        self.models.append(model)
        return self.output


class RecordingGenerator(CoveringArrayGenerator):
    """The builtin generator, recording every model it receives."""

    def __init__(self) -> None:
        super().__init__(seed=0)
        self.models: list[str] = []

    def generate(self, model: str) -> str:
        self.models.append(model)
        return super().generate(model)


SAMPLE_DOCUMENT: dict[str, Any] = {
    "actors": {
        "user": {"name": "Library user"},
        "system": {"name": "Reservation system"},
    },
    "glossaries": {
        "screen": {
            "search_screen": {"name": "Search screen", "desc": "Screen listing the search results"},
        },
    },
    "factors": {
        "member": {"name": "Member status", "items": ["regular", "suspended"]},
        "stock": {"name": "Stock", "items": ["available", "none"]},
    },
    "usecases": {
        "UC01": {
            "name": "Reserve a book",
            "summary": "The user reserves a book from the ${screen/search_screen}.",
            "preConditions": {"R01": "The user is signed in"},
            "postConditions": {"P01": "The reservation is stored"},
            "basicFlows": {
                "B01": {"playerId": "user", "description": "Searches for a book on the ${search_screen}"},
                "B02": {"playerId": "system", "description": "Shows the stock"},
                "B03": {"playerId": "user", "description": "Reserves the book"},
            },
            "alternateFlows": {
                "A01": {
                    "description": "The book is out of stock",
                    "override": {
                        "B02": {
                            "replaceFlows": {
                                "A01-1": {"playerId": "system", "description": "Shows the waiting list"},
                            },
                            "returnFlowId": "B03",
                        },
                    },
                },
            },
            "exceptionFlows": {
                "E01": {
                    "description": "The user is suspended",
                    "override": {
                        "B01": {
                            "replaceFlows": {
                                "E01-1": {"playerId": "system", "description": "Shows an error"},
                            },
                        },
                    },
                },
            },
            "valiations": {
                "V01": {
                    "description": "Reservation by member status and stock",
                    "factorEntryPoints": {
                        "R01": {"factors": ["member"]},
                        "B02": {"factors": ["stock"]},
                    },
                    "results": {
                        "VR01": {
                            "description": "The book is reserved",
                            "arrow": {"member": ["regular"], "stock": ["available"]},
                            "verificationPointIds": ["P01"],
                        },
                        "VR02": {
                            "description": "The user is put on the waiting list",
                            "arrow": {"member": ["regular"], "stock": ["none"]},
                            "verificationPointIds": ["A01"],
                        },
                        "VR03": {
                            "description": "The reservation is rejected",
                            "arrow": {"member": ["suspended"]},
                            "verificationPointIds": "E01",
                        },
                    },
                },
            },
        },
    },
    "scenarios": {
        "S01": {"name": "Borrowing", "summary": "Reserve then borrow", "usecaseOrder": ["UC01"]},
    },
}


@pytest.fixture
def sample_data() -> dict[str, Any]:
    """A fresh, fully covered sample document as a plain mapping."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def sample_usecase_data(sample_data: dict[str, Any]) -> dict[str, Any]:
    return sample_data["usecases"]["UC01"]


@pytest.fixture
def builtin_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def build(builtin_generator: RecordingGenerator):
    """Build an app from a mapping with the builtin generator."""

    def _build(data: dict[str, Any], strict: bool = True):
        return build_app(parse_document(data), builtin_generator, strict=strict)

    return _build


@pytest.fixture
def sample_app(build, sample_data):
    return build(sample_data).app


@pytest.fixture
def sample_usecase(sample_app):
    return sample_app.get_usecase("UC01")


@pytest.fixture
def sample_file(tmp_path: Path, sample_data: dict[str, Any]) -> Path:
    path = tmp_path / "usecase.yml"
    path.write_text(yaml.safe_dump(sample_data, allow_unicode=True, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def builtin_settings() -> UcdocSettings:
    return UcdocSettings(generator="builtin")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep UCDOC_* variables and a stray ucdoc.yaml out of every test."""
    for key in list(os.environ):
        if key.startswith("UCDOC_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def stub_generator():
    """Factory of generators returning canned output."""
    return StubGenerator
