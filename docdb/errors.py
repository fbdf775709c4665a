"""Exception hierarchy.

Every failure surfaced by the store is a ``DocError``.  ``error_type`` gives
the coarse classification (I/O versus encoding) for callers that only need
to know which side failed.
"""

from __future__ import annotations

from pathlib import Path

from docdb.models.enums import ErrorType


class DocError(Exception):
    """Base class for all docdb errors."""

    error_type: ErrorType = ErrorType.SERIALIZATION


class DocIOError(DocError):
    """Reading, writing or renaming the backing file failed.

    Also raised by ``DocDb.load`` when the file does not exist.  The
    originating ``OSError`` is chained as ``__cause__``.
    """

    error_type = ErrorType.IO

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class SerializationError(DocError, ValueError):
    """A value or the whole snapshot could not be encoded."""

    def __str__(self) -> str:
        return f"Serialization err: {super().__str__()}"


class DeserializationError(DocError, ValueError):
    """Bytes could not be decoded into the expected shape."""

    def __str__(self) -> str:
        return f"Deserialization err: {super().__str__()}"


class UnsupportedCodecError(DocError, NotImplementedError):
    """The selected serialization method has no codec implementation."""
