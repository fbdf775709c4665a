"""Dump policies: the rule deciding when the map is flushed to disk.

Each policy is a small frozen pydantic model; ``DumpPolicy`` is the
discriminated union over them (keyed on ``kind``) so a policy can also be
parsed from plain data, e.g. ``{"kind": "periodic_dump", "interval": 5}``.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Policy(BaseModel):
    model_config = ConfigDict(frozen=True)


class NeverDump(_Policy):
    """In-memory only.  ``dump()`` reports success without writing."""

    kind: Literal["never_dump"] = "never_dump"


class AutoDump(_Policy):
    """Persist after every successful ``set`` / ``remove``."""

    kind: Literal["auto_dump"] = "auto_dump"


class DumpRelyRequest(_Policy):
    """Persist only when ``dump()`` is called explicitly."""

    kind: Literal["dump_rely_request"] = "dump_rely_request"


class PeriodicDump(_Policy):
    """Persist on a mutation only once ``interval`` has elapsed since the last dump.

    ``interval`` accepts a ``timedelta`` or a number of seconds.
    """

    kind: Literal["periodic_dump"] = "periodic_dump"
    interval: timedelta = timedelta(seconds=1)

    @field_validator("interval")
    @classmethod
    def _check_non_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            msg = f"interval must be non-negative, got {value}"
            raise ValueError(msg)
        return value

    @property
    def interval_seconds(self) -> float:
        return self.interval.total_seconds()


DumpPolicy = Annotated[
    NeverDump | AutoDump | DumpRelyRequest | PeriodicDump,
    Field(discriminator="kind"),
]
