"""YAML codec.

Each value is a standalone YAML document; the snapshot is a YAML mapping
from key to that document's text.  YAML being a superset of JSON, a JSON
snapshot also loads through this codec.
"""

from __future__ import annotations

from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from docdb.codecs.base import Snapshot, validate_strict
from docdb.errors import DeserializationError, SerializationError
from docdb.models.enums import SerializationMethod

_SNAPSHOT_ADAPTER = TypeAdapter(dict[str, str])


def _dump(data: Any) -> bytes:
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False).encode("utf-8")


class YamlCodec:
    method = SerializationMethod.YAML

    def encode_value(self, value: Any) -> bytes:
        try:
            return _dump(to_jsonable_python(value))
        except (PydanticSerializationError, yaml.YAMLError) as e:
            raise SerializationError(str(e)) from e

    def decode_value(self, data: bytes, as_type: Any = Any) -> Any:
        try:
            return validate_strict(to_json(yaml.safe_load(data)), as_type)
        except (yaml.YAMLError, PydanticSerializationError, ValidationError) as e:
            raise DeserializationError(str(e)) from e

    def encode_snapshot(self, snapshot: Snapshot) -> bytes:
        try:
            text_map = {key: value.decode("utf-8") for key, value in snapshot.items()}
            return _dump(text_map)
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise SerializationError(str(e)) from e

    def decode_snapshot(self, data: bytes) -> Snapshot:
        try:
            text_map = _SNAPSHOT_ADAPTER.validate_python(yaml.safe_load(data))
        except (yaml.YAMLError, ValidationError) as e:
            raise DeserializationError(str(e)) from e
        return {key: value.encode("utf-8") for key, value in text_map.items()}
