"""Shared fixtures for filter_def tests."""

from __future__ import annotations

from typing import Any

import pytest

from filter_def.operators_memory import build_default_registry


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return build_default_registry()


@pytest.fixture
def people() -> list[dict[str, Any]]:
    """A small population of mapping entities."""
    return [
        {"name": "John", "email": "john@example.com", "age": 30, "nickname": "JJ"},
        {"name": "Jane", "email": "jane@example.org", "age": 25, "nickname": None},
        {"name": "Bob", "email": "bob@example.com", "age": 28},
        {"name": "Alice", "email": "alice@test.io", "age": 35, "nickname": "Al"},
    ]
