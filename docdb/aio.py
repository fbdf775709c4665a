"""Async facade over :class:`docdb.store.DocDb`.

``DocDb`` is single-owner: its rollback sequence (capture, mutate, dump,
maybe restore) is not atomic across threads.  ``AsyncDocDb`` holds one
``anyio.Lock`` for the duration of every public call and runs the blocking
file I/O via ``anyio.to_thread.run_sync``, so concurrent tasks are
serialised without blocking the event loop.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from types import TracebackType
from typing import Any

import anyio
from anyio import to_thread

from docdb.codecs import Codec
from docdb.models.enums import SerializationMethod
from docdb.models.policy import DumpPolicy
from docdb.store import DocDb


class AsyncDocDb:
    """Lock-guarded async wrapper around a ``DocDb``.

    Prefer ``async with`` so the final flush runs on every exit path::

        async with await AsyncDocDb.load("app.db", AutoDump()) as db:
            await db.set("num", 100)
    """

    def __init__(self, db: DocDb) -> None:
        self._db = db
        self._lock = anyio.Lock()

    @classmethod
    def create(
        cls,
        path: str | Path,
        dump_policy: DumpPolicy | dict[str, Any],
        serialization: SerializationMethod | str | Codec = SerializationMethod.JSON,
    ) -> AsyncDocDb:
        return cls(DocDb.create(path, dump_policy, serialization))

    @classmethod
    async def load(
        cls,
        path: str | Path,
        dump_policy: DumpPolicy | dict[str, Any],
        serialization: SerializationMethod | str | Codec = SerializationMethod.JSON,
    ) -> AsyncDocDb:
        db = await to_thread.run_sync(partial(DocDb.load, path, dump_policy, serialization))
        return cls(db)

    @property
    def db(self) -> DocDb:
        """The wrapped store.  Touch it directly only while no task is using this wrapper."""
        return self._db

    # -- Read ------------------------------------------------------------------

    async def get(self, key: str, as_type: Any = Any) -> Any:
        async with self._lock:
            return self._db.get(key, as_type)

    async def exists(self, key: str) -> bool:
        async with self._lock:
            return self._db.exists(key)

    async def key_count(self) -> int:
        async with self._lock:
            return self._db.key_count()

    async def all_keys(self) -> set[str]:
        async with self._lock:
            return self._db.all_keys()

    # -- Write -----------------------------------------------------------------

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            await to_thread.run_sync(partial(self._db.set, key, value))

    async def remove(self, key: str) -> bool:
        async with self._lock:
            return await to_thread.run_sync(partial(self._db.remove, key))

    async def dump(self) -> None:
        async with self._lock:
            await to_thread.run_sync(self._db.dump)

    # -- Lifecycle -------------------------------------------------------------

    async def aclose(self) -> None:
        """Run the final flush.  Shielded, so it also runs when the caller is cancelled."""
        with anyio.CancelScope(shield=True):
            async with self._lock:
                await to_thread.run_sync(self._db.close)

    async def __aenter__(self) -> AsyncDocDb:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
