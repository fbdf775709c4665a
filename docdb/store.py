"""The document store.

``DocDb`` keeps an in-memory ``dict[str, bytes]`` of pre-encoded values and
decides, per its dump policy, when to flush that map to its backing file.

Mutations update the map first and then consult the policy.  If the
resulting dump fails, the map is restored to its exact pre-call state before
the error propagates, so the map never holds the result of a failed call.

Decoding happens lazily on read with the caller supplying the expected type.
``get`` returns ``None`` both for a missing key and for a value that does not
decode as the requested type; use ``exists`` to tell the two apart.

Not thread-safe: serialise access externally, or use
:class:`docdb.aio.AsyncDocDb`.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from pathlib import Path
from types import TracebackType
from typing import Any

from loguru import logger
from pydantic import TypeAdapter

from docdb.codecs import Codec, get_codec
from docdb.errors import DeserializationError
from docdb.iterator import DocDbItem, iter_items
from docdb.models.enums import DumpPolicyKind, SerializationMethod
from docdb.models.policy import DumpPolicy, NeverDump, PeriodicDump
from docdb.writer import read_snapshot, write_snapshot

_POLICY_ADAPTER: TypeAdapter[DumpPolicy] = TypeAdapter(DumpPolicy)

_MISSING = object()


def _resolve_codec(serialization: SerializationMethod | str | Codec) -> Codec:
    if isinstance(serialization, str):
        return get_codec(serialization)
    if isinstance(serialization, Codec):
        return serialization
    msg = f"expected a SerializationMethod or Codec, got {type(serialization).__name__}"
    raise TypeError(msg)


class DocDb:
    """File-backed key-value store with policy-driven, atomic dumps.

    Use as a context manager so the final flush runs on every exit path::

        with DocDb("app.db", AutoDump()) as db:
            db.set("num", 100)
    """

    def __init__(
        self,
        path: str | Path,
        dump_policy: DumpPolicy | dict[str, Any],
        serialization: SerializationMethod | str | Codec = SerializationMethod.JSON,
    ) -> None:
        self._path = Path(path)
        self._policy: DumpPolicy = _POLICY_ADAPTER.validate_python(dump_policy)
        self._codec = _resolve_codec(serialization)
        self._map: dict[str, bytes] = {}
        self._last_dump = time.monotonic()
        self._closed = False

    # -- Construction ----------------------------------------------------------

    @classmethod
    def create(
        cls,
        path: str | Path,
        dump_policy: DumpPolicy | dict[str, Any],
        serialization: SerializationMethod | str | Codec = SerializationMethod.JSON,
    ) -> DocDb:
        """Create a new, empty store.  Nothing is written until the policy says so."""
        return cls(path, dump_policy, serialization)

    @classmethod
    def load(
        cls,
        path: str | Path,
        dump_policy: DumpPolicy | dict[str, Any],
        serialization: SerializationMethod | str | Codec = SerializationMethod.JSON,
    ) -> DocDb:
        """Load a store from an existing snapshot file.

        Raises ``DocIOError`` if the file cannot be read (including when it
        does not exist) and ``DeserializationError`` if its contents are not
        a snapshot for the selected codec.
        """
        db = cls(path, dump_policy, serialization)
        raw = read_snapshot(db._path)
        db._map = db._codec.decode_snapshot(raw)
        logger.debug("Loaded {} keys from {}", len(db._map), db._path)
        return db

    @classmethod
    def load_read_only(
        cls,
        path: str | Path,
        serialization: SerializationMethod | str | Codec = SerializationMethod.JSON,
    ) -> DocDb:
        """``load`` with the policy forced to ``NeverDump``."""
        return cls.load(path, NeverDump(), serialization)

    @classmethod
    def new_json(cls, path: str | Path, dump_policy: DumpPolicy | dict[str, Any]) -> DocDb:
        return cls(path, dump_policy, SerializationMethod.JSON)

    @classmethod
    def new_yaml(cls, path: str | Path, dump_policy: DumpPolicy | dict[str, Any]) -> DocDb:
        return cls(path, dump_policy, SerializationMethod.YAML)

    @classmethod
    def new_bin(cls, path: str | Path, dump_policy: DumpPolicy | dict[str, Any]) -> DocDb:
        return cls(path, dump_policy, SerializationMethod.BIN)

    @classmethod
    def load_json(cls, path: str | Path, dump_policy: DumpPolicy | dict[str, Any]) -> DocDb:
        return cls.load(path, dump_policy, SerializationMethod.JSON)

    @classmethod
    def load_yaml(cls, path: str | Path, dump_policy: DumpPolicy | dict[str, Any]) -> DocDb:
        return cls.load(path, dump_policy, SerializationMethod.YAML)

    @classmethod
    def load_bin(cls, path: str | Path, dump_policy: DumpPolicy | dict[str, Any]) -> DocDb:
        return cls.load(path, dump_policy, SerializationMethod.BIN)

    # -- Properties ------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def dump_policy(self) -> DumpPolicy:
        return self._policy

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def closed(self) -> bool:
        return self._closed

    # -- Read ------------------------------------------------------------------

    def get(self, key: str, as_type: Any = Any) -> Any:
        """Return the value for ``key`` decoded as ``as_type``.

        Returns ``None`` when the key is missing *or* when the stored value
        does not decode as ``as_type``.  The two cases are indistinguishable
        here; check ``exists`` if it matters.
        """
        data = self._map.get(key)
        if data is None:
            return None
        try:
            return self._codec.decode_value(data, as_type)
        except DeserializationError as e:
            logger.debug("Key {!r} does not decode as {}: {}", key, as_type, e)
            return None

    def exists(self, key: str) -> bool:
        return key in self._map

    def key_count(self) -> int:
        return len(self._map)

    def all_keys(self) -> set[str]:
        """Return a copy of all keys (unordered)."""
        return set(self._map)

    def iter(self) -> Iterator[DocDbItem]:
        """Iterate over entries, decoding each value only on ``get_value``."""
        return iter_items(self._map, self._codec)

    def __iter__(self) -> Iterator[DocDbItem]:
        return self.iter()

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    # -- Write -----------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, overwriting any value of any type.

        Raises ``SerializationError`` if the value cannot be encoded (the map
        is untouched), or the dump error if the policy-triggered dump fails
        (the previous value is restored first).
        """
        data = self._codec.encode_value(value)
        original = self._map.get(key, _MISSING)
        self._map[key] = data
        try:
            self.dump_if_policy_due()
        except BaseException:
            if original is _MISSING:
                del self._map[key]
            else:
                self._map[key] = original
            logger.warning("Dump failed, rolled back set of {!r} in {}", key, self._path)
            raise

    def remove(self, key: str) -> bool:
        """Remove ``key``.  Returns ``False`` if it was not present.

        A missing key never triggers the dump policy.  If the triggered dump
        fails, the entry is restored before the error propagates.
        """
        original = self._map.pop(key, _MISSING)
        if original is _MISSING:
            return False
        try:
            self.dump_if_policy_due()
        except BaseException:
            self._map[key] = original
            logger.warning("Dump failed, rolled back removal of {!r} in {}", key, self._path)
            raise
        return True

    # -- Persistence -----------------------------------------------------------

    def dump(self) -> None:
        """Persist the whole map now, regardless of policy.

        ``NeverDump`` stores return without writing.  Raises
        ``SerializationError`` (no file touched) or ``DocIOError`` (the
        previous snapshot file is left intact).
        """
        if self._policy.kind == DumpPolicyKind.NEVER_DUMP:
            return
        data = self._codec.encode_snapshot(self._map)
        write_snapshot(self._path, data)
        if isinstance(self._policy, PeriodicDump):
            self._last_dump = time.monotonic()

    def dump_if_policy_due(self) -> None:
        """Dump if the policy calls for it after a successful mutation."""
        match self._policy.kind:
            case DumpPolicyKind.AUTO_DUMP:
                self.dump()
            case DumpPolicyKind.PERIODIC_DUMP:
                now = time.monotonic()
                if now - self._last_dump > self._policy.interval_seconds:
                    # Stamp before dumping so a failing dump is not retried on
                    # every mutation within the same interval.
                    self._last_dump = now
                    self.dump()
            case _:
                pass

    # -- Lifecycle -------------------------------------------------------------

    def close(self) -> None:
        """Run the final flush for ``AutoDump`` / ``PeriodicDump`` stores.

        A failure here is logged and discarded: there is no caller left to
        handle it.  Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        if self._policy.kind not in (DumpPolicyKind.AUTO_DUMP, DumpPolicyKind.PERIODIC_DUMP):
            return
        try:
            self.dump()
        except Exception as e:
            logger.warning("Final dump of {} failed, discarding: {}", self._path, e)

    def __enter__(self) -> DocDb:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"DocDb(path={str(self._path)!r}, policy={self._policy.kind}, "
            f"codec={self._codec.method}, keys={len(self._map)})"
        )
