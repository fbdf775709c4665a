"""DOCDB_* environment configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from docdb import AutoDump, DocDb, DumpRelyRequest, NeverDump, PeriodicDump
from docdb.models.enums import SerializationMethod
from docdb.settings import DocDbSettings, get_settings


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty directory (no .env) with no DOCDB_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("PATH", "SERIALIZATION", "DUMP_POLICY", "DUMP_INTERVAL", "LOG_LEVEL"):
        monkeypatch.delenv(f"DOCDB_{name}", raising=False)
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = DocDbSettings()
    assert settings.path == "docdb.db"
    assert settings.serialization == SerializationMethod.JSON
    assert settings.build_dump_policy() == AutoDump()
    assert settings.log_level == "INFO"


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCDB_PATH", "cache.db")
    monkeypatch.setenv("DOCDB_SERIALIZATION", "yaml")
    monkeypatch.setenv("DOCDB_DUMP_POLICY", "periodic")
    monkeypatch.setenv("DOCDB_DUMP_INTERVAL", "2.5")

    settings = DocDbSettings()
    assert settings.path == "cache.db"
    assert settings.serialization == SerializationMethod.YAML
    assert settings.build_dump_policy() == PeriodicDump(interval=2.5)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("never", NeverDump()), ("auto", AutoDump()), ("request", DumpRelyRequest())],
)
def test_policy_names(name: str, expected: object) -> None:
    assert DocDbSettings(dump_policy=name).build_dump_policy() == expected


def test_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCDB_DUMP_POLICY", "sometimes")
    with pytest.raises(ValidationError):
        DocDbSettings()

    monkeypatch.setenv("DOCDB_DUMP_POLICY", "periodic")
    monkeypatch.setenv("DOCDB_DUMP_INTERVAL", "-1")
    with pytest.raises(ValidationError):
        DocDbSettings()


def test_dotenv_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("DOCDB_SERIALIZATION=bin\n", encoding="utf-8")
    assert DocDbSettings().serialization == SerializationMethod.BIN


def test_open_db_creates_then_loads(tmp_path: Path) -> None:
    settings = DocDbSettings(path=str(tmp_path / "app.db"))

    with settings.open_db() as db:
        assert db.key_count() == 0
        db.set("key", "value")

    with settings.open_db() as db:
        assert db.get("key", str) == "value"
        assert isinstance(db, DocDb)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("DOCDB_LOG_LEVEL", "DEBUG")
    assert get_settings().log_level == "INFO"

    get_settings.cache_clear()
    assert get_settings().log_level == "DEBUG"
