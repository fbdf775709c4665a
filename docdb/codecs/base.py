"""Codec interface.

A codec turns single values and the whole key -> encoded-value map into
bytes and back.  Variants must agree on one snapshot contract: a flat
mapping at top level whose values are the pre-encoded representation of
each stored value.  Typed decoding goes through pydantic ``TypeAdapter`` so
scalars, lists, dicts, pydantic models and dataclasses all round-trip.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter

from docdb.models.enums import SerializationMethod

Snapshot = dict[str, bytes]


@runtime_checkable
class Codec(Protocol):
    """Encode/decode single values and whole snapshots.

    Encoding failures raise ``SerializationError``; decoding failures raise
    ``DeserializationError``.
    """

    method: SerializationMethod

    def encode_value(self, value: Any) -> bytes:
        """Encode a single value."""
        ...

    def decode_value(self, data: bytes, as_type: Any = Any) -> Any:
        """Decode a single value, validating it as ``as_type``."""
        ...

    def encode_snapshot(self, snapshot: Snapshot) -> bytes:
        """Encode the whole key -> encoded-value map."""
        ...

    def decode_snapshot(self, data: bytes) -> Snapshot:
        """Decode file contents back into a key -> encoded-value map."""
        ...


@lru_cache(maxsize=256)
def _cached_adapter(as_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(as_type)


def type_adapter(as_type: Any) -> TypeAdapter[Any]:
    """Return a (cached where possible) ``TypeAdapter`` for ``as_type``."""
    try:
        return _cached_adapter(as_type)
    except TypeError:
        # Unhashable type expression, e.g. Annotated with a dict in its metadata.
        return TypeAdapter(as_type)


def validate_strict(json_data: bytes, as_type: Any) -> Any:
    """Validate JSON text as ``as_type`` without type coercion.

    ``"100"`` does not become ``100`` and ``1`` does not become ``True``;
    objects still validate into models and dataclasses.
    """
    return type_adapter(as_type).validate_json(json_data, strict=True)
