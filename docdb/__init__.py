"""docdb - an embeddable, file-backed document store."""

from loguru import logger

from docdb.errors import (
    DeserializationError,
    DocError,
    DocIOError,
    SerializationError,
    UnsupportedCodecError,
)
from docdb.iterator import DocDbItem
from docdb.models.enums import ErrorType, SerializationMethod
from docdb.models.policy import AutoDump, DumpPolicy, DumpRelyRequest, NeverDump, PeriodicDump
from docdb.store import DocDb

__all__ = [
    "AutoDump",
    "DeserializationError",
    "DocDb",
    "DocDbItem",
    "DocError",
    "DocIOError",
    "DumpPolicy",
    "DumpRelyRequest",
    "ErrorType",
    "NeverDump",
    "PeriodicDump",
    "SerializationError",
    "SerializationMethod",
    "UnsupportedCodecError",
]

# Library code stays silent until the application opts in via docdb.log.setup_logging.
logger.disable("docdb")
