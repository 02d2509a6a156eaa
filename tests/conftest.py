"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from default settings regardless of the caller's shell."""

    for name in list(os.environ):
        if name.startswith("READING_LISTS_"):
            monkeypatch.delenv(name)
