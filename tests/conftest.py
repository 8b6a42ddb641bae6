"""Shared fixtures for the repair tests."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8").rstrip("\n")


@pytest.fixture
def reference_correct() -> str:
    """A multi-box document with tees, arrows and a partial layout, drawn correctly."""
    return load_fixture("reference_correct.txt")


@pytest.fixture
def reference_broken() -> str:
    """The same document after lossy editing: bad widths, stray glyphs, shifted borders."""
    return load_fixture("reference_broken.txt")
