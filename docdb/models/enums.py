"""Shared enumerations used across docdb."""

from __future__ import annotations

from enum import StrEnum

# -- Codec -------------------------------------------------------------------


class SerializationMethod(StrEnum):
    """Encoding used for values and for the on-disk snapshot."""

    JSON = "json"
    BIN = "bin"
    YAML = "yaml"
    CBOR = "cbor"


# -- Persistence -------------------------------------------------------------


class DumpPolicyKind(StrEnum):
    """Discriminator for the dump policy union."""

    NEVER_DUMP = "never_dump"
    AUTO_DUMP = "auto_dump"
    DUMP_RELY_REQUEST = "dump_rely_request"
    PERIODIC_DUMP = "periodic_dump"


# -- Errors ------------------------------------------------------------------


class ErrorType(StrEnum):
    """Coarse error classification exposed on every ``DocError``."""

    IO = "io"
    SERIALIZATION = "serialization"
