"""JSON codec.

Values are stored as JSON text; the snapshot is a JSON object mapping each
key to that text::

    {"num": "100", "str": "\\"hello\\""}
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from docdb.codecs.base import Snapshot, validate_strict
from docdb.errors import DeserializationError, SerializationError
from docdb.models.enums import SerializationMethod

_SNAPSHOT_ADAPTER = TypeAdapter(dict[str, str])


class JsonCodec:
    method = SerializationMethod.JSON

    def encode_value(self, value: Any) -> bytes:
        try:
            return to_json(value)
        except PydanticSerializationError as e:
            raise SerializationError(str(e)) from e

    def decode_value(self, data: bytes, as_type: Any = Any) -> Any:
        try:
            return validate_strict(data, as_type)
        except ValidationError as e:
            raise DeserializationError(str(e)) from e

    def encode_snapshot(self, snapshot: Snapshot) -> bytes:
        try:
            text_map = {key: value.decode("utf-8") for key, value in snapshot.items()}
        except UnicodeDecodeError as e:
            raise SerializationError(f"value is not UTF-8 JSON text: {e}") from e
        return to_json(text_map)

    def decode_snapshot(self, data: bytes) -> Snapshot:
        try:
            text_map = _SNAPSHOT_ADAPTER.validate_json(data)
        except ValidationError as e:
            raise DeserializationError(str(e)) from e
        return {key: value.encode("utf-8") for key, value in text_map.items()}
