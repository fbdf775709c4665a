"""Lazy view over store entries with on-demand decoding."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from docdb.codecs import Codec
from docdb.errors import DeserializationError


@dataclass(frozen=True)
class DocDbItem:
    """One ``(key, encoded value)`` entry.  Decoding happens in ``get_value``."""

    key: str
    value: bytes
    codec: Codec

    def get_value(self, as_type: Any = Any) -> Any:
        """Decode the value as ``as_type``; ``None`` if it does not decode."""
        try:
            return self.codec.decode_value(self.value, as_type)
        except DeserializationError as e:
            logger.debug("Item {!r} does not decode as {}: {}", self.key, as_type, e)
            return None


def iter_items(entries: Mapping[str, bytes], codec: Codec) -> Iterator[DocDbItem]:
    # Copy first so the store can be mutated while a caller iterates.
    for key, value in list(entries.items()):
        yield DocDbItem(key=key, value=value, codec=codec)
