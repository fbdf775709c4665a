"""Opt-in loguru configuration."""

from __future__ import annotations

import io
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from docdb import AutoDump, DocDb
from docdb.log import setup_logging


@pytest.fixture
def restore_loguru() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr)
    logger.disable("docdb")


def test_silent_by_default(db_path: Path) -> None:
    stream = io.StringIO()
    handler_id = logger.add(stream, level="DEBUG")
    try:
        DocDb(db_path, AutoDump()).set("key", 1)
    finally:
        logger.remove(handler_id)

    assert stream.getvalue() == ""


def test_setup_logging_enables_docdb(db_path: Path, restore_loguru: None) -> None:
    stream = io.StringIO()
    setup_logging("debug", sink=stream)

    DocDb(db_path, AutoDump()).set("key", 1)

    output = stream.getvalue()
    assert "Logging initialised (level=DEBUG)" in output
    assert "Wrote snapshot" in output
    assert "docdb.writer" in output


def test_setup_logging_respects_level(db_path: Path, restore_loguru: None) -> None:
    stream = io.StringIO()
    setup_logging("warning", sink=stream)

    DocDb(db_path, AutoDump()).set("key", 1)

    assert stream.getvalue() == ""
