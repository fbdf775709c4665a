"""Shared test fixtures.

No external services are required: every store lives under ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from docdb.models.enums import SerializationMethod

IMPLEMENTED_METHODS = [SerializationMethod.JSON, SerializationMethod.YAML, SerializationMethod.BIN]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture(params=IMPLEMENTED_METHODS, ids=lambda m: m.value)
def method(request: pytest.FixtureRequest) -> SerializationMethod:
    """Run a test once per implemented codec."""
    return request.param


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru output emitted during the test."""
    messages: list[str] = []
    logger.enable("docdb")
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
    logger.disable("docdb")


@pytest.fixture
def leftover_temp_files(tmp_path: Path):
    """Return a callable listing snapshot staging files left in ``tmp_path``."""

    def _list() -> list[Path]:
        return sorted(p for p in tmp_path.iterdir() if ".temp." in p.name)

    return _list
