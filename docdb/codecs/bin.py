"""Binary codec built on pickle.

Only plain data is ever pickled: values are first reduced to JSON-compatible
Python objects, and the snapshot is a ``dict[str, bytes]``.  Loading uses an
unpickler that refuses every global, so a snapshot file cannot smuggle in
arbitrary objects.
"""

from __future__ import annotations

import io
import pickle
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from docdb.codecs.base import Snapshot, validate_strict
from docdb.errors import DeserializationError, SerializationError
from docdb.models.enums import SerializationMethod

_SNAPSHOT_ADAPTER = TypeAdapter(dict[str, bytes])


class _PlainDataUnpickler(pickle.Unpickler):
    def find_class(self, module: str, name: str) -> Any:
        msg = f"global '{module}.{name}' is forbidden"
        raise pickle.UnpicklingError(msg)


def _loads(data: bytes) -> Any:
    """Unpickle plain data.  Raises ``DeserializationError`` on any malformed input."""
    try:
        return _PlainDataUnpickler(io.BytesIO(data)).load()
    except Exception as e:  # malformed pickles raise assorted builtin errors
        raise DeserializationError(str(e) or type(e).__name__) from e


class BinCodec:
    method = SerializationMethod.BIN

    def encode_value(self, value: Any) -> bytes:
        try:
            return pickle.dumps(to_jsonable_python(value), protocol=pickle.HIGHEST_PROTOCOL)
        except PydanticSerializationError as e:
            raise SerializationError(str(e)) from e

    def decode_value(self, data: bytes, as_type: Any = Any) -> Any:
        try:
            return validate_strict(to_json(_loads(data)), as_type)
        except (PydanticSerializationError, ValidationError) as e:
            raise DeserializationError(str(e)) from e

    def encode_snapshot(self, snapshot: Snapshot) -> bytes:
        return pickle.dumps(dict(snapshot), protocol=pickle.HIGHEST_PROTOCOL)

    def decode_snapshot(self, data: bytes) -> Snapshot:
        try:
            return _SNAPSHOT_ADAPTER.validate_python(_loads(data), strict=True)
        except (DeserializationError, ValidationError) as e:
            raise DeserializationError("cannot deserialize from db") from e
