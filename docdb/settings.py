"""Store configuration loaded from DOCDB_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docdb.models.enums import SerializationMethod
from docdb.models.policy import AutoDump, DumpPolicy, DumpRelyRequest, NeverDump, PeriodicDump
from docdb.store import DocDb


class DocDbSettings(BaseSettings):
    """docdb settings.

    All fields are read from environment variables with the ``DOCDB_`` prefix.
    For example, ``DOCDB_DUMP_POLICY=periodic`` maps to ``dump_policy``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Store -----------------------------------------------------------------
    path: str = "docdb.db"
    """Backing file of the store."""

    serialization: SerializationMethod = SerializationMethod.JSON

    dump_policy: Literal["never", "auto", "request", "periodic"] = "auto"

    dump_interval: float = Field(default=1.0, ge=0)
    """Seconds between dumps (only when dump_policy = "periodic")."""

    # -- Helpers ---------------------------------------------------------------

    def build_dump_policy(self) -> DumpPolicy:
        match self.dump_policy:
            case "never":
                return NeverDump()
            case "request":
                return DumpRelyRequest()
            case "periodic":
                return PeriodicDump(interval=self.dump_interval)
            case _:
                return AutoDump()

    def open_db(self) -> DocDb:
        """Load the configured store, or create it if the file does not exist yet."""
        policy = self.build_dump_policy()
        if Path(self.path).exists():
            return DocDb.load(self.path, policy, self.serialization)
        return DocDb.create(self.path, policy, self.serialization)


@lru_cache(maxsize=1)
def get_settings() -> DocDbSettings:
    """Return a cached settings instance.

    Call ``get_settings.cache_clear()`` in tests to force a re-read after
    overriding env vars.
    """
    return DocDbSettings()
