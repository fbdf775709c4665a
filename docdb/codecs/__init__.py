"""Codec variants and the registry that selects between them.

``SerializationMethod.CBOR`` is declared but has no implementation;
selecting it fails immediately with ``UnsupportedCodecError``.
"""

from __future__ import annotations

from collections.abc import Callable

from docdb.codecs.base import Codec, Snapshot
from docdb.codecs.bin import BinCodec
from docdb.codecs.json import JsonCodec
from docdb.codecs.yaml import YamlCodec
from docdb.errors import UnsupportedCodecError
from docdb.models.enums import SerializationMethod

_REGISTRY: dict[SerializationMethod, Callable[[], Codec]] = {
    SerializationMethod.JSON: JsonCodec,
    SerializationMethod.YAML: YamlCodec,
    SerializationMethod.BIN: BinCodec,
}


def register_codec(method: SerializationMethod, factory: Callable[[], Codec]) -> None:
    """Install (or replace) the codec used for ``method``."""
    _REGISTRY[SerializationMethod(method)] = factory


def get_codec(method: SerializationMethod | str) -> Codec:
    """Build the codec for ``method``.

    Raises ``UnsupportedCodecError`` for unknown or unimplemented methods.
    """
    try:
        method = SerializationMethod(method)
    except ValueError:
        msg = f"unknown serialization method: {method!r}"
        raise UnsupportedCodecError(msg) from None
    factory = _REGISTRY.get(method)
    if factory is None:
        msg = f"serialization method {method.value!r} is not implemented"
        raise UnsupportedCodecError(msg)
    return factory()


__all__ = [
    "BinCodec",
    "Codec",
    "JsonCodec",
    "Snapshot",
    "YamlCodec",
    "get_codec",
    "register_codec",
]
