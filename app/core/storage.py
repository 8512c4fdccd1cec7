"""
Whole-document JSON storage for the Assets and SubAssets collections
"""

import contextlib
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from enum import Enum
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional

import anyio

from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    """Named collections, in lock acquisition order"""
    ASSETS = "Assets"
    SUB_ASSETS = "SubAssets"


LOCK_ORDER = [Collection.ASSETS, Collection.SUB_ASSETS]


def _atomic_write(path: Path, text: str) -> None:
    """Write text to a temporary sibling file, fsync it and rename it over path"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def _serialize(items: List[dict]) -> str:
    return json.dumps(items, indent=2, ensure_ascii=False)


class StoreTransaction:
    """Locked read-modify-write cycle over one or more collections

    Documents are loaded once when the transaction opens. Callers mutate the
    loaded lists (or build new ones) and hand them to ``commit``.
    """

    def __init__(self, store: "EntityStore", documents: Dict[Collection, List[dict]], raw: Dict[Collection, Optional[str]]):
        self._store = store
        self._documents = documents
        self._raw = raw
        self.committed = False

    def __getitem__(self, collection: Collection) -> List[dict]:
        return self._documents[collection]

    async def commit(self, changes: Dict[Collection, List[dict]]) -> None:
        """Persist the given collections all-or-nothing"""
        for collection in changes:
            if collection not in self._documents:
                raise ValueError(f"Collection {collection.value} is not part of this transaction")

        written: List[Collection] = []
        for collection in LOCK_ORDER:
            if collection not in changes:
                continue
            path = self._store.path_for(collection)
            try:
                await anyio.to_thread.run_sync(_atomic_write, path, _serialize(changes[collection]))
            except OSError as e:
                logger.error(f"Error writing {path}: {e}")
                await self._rollback(written)
                raise StorageError(f"Failed to write {collection.value}", operation="write")
            written.append(collection)

        for collection in written:
            self._documents[collection] = changes[collection]
        self.committed = True
        logger.debug(f"Committed {', '.join(c.value for c in written)}")

    async def _rollback(self, written: List[Collection]) -> None:
        for collection in written:
            path = self._store.path_for(collection)
            previous = self._raw[collection]
            try:
                await anyio.to_thread.run_sync(_atomic_write, path, previous if previous is not None else "[]")
                logger.warning(f"Restored {path} after a failed commit")
            except OSError as e:
                logger.error(f"Could not restore {path} after a failed commit: {e}")


class EntityStore:
    """Loads and flushes whole collections; mutations are serialized per collection"""

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)
        self._locks: Dict[Collection, anyio.Lock] = {}

    def initialize(self) -> None:
        """Create the data directory and empty documents if missing"""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for collection in Collection:
            path = self.path_for(collection)
            if not path.exists():
                _atomic_write(path, "[]")
                logger.info(f"Created empty document {path}")

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / f"{collection.value}.json"

    def _lock(self, collection: Collection) -> anyio.Lock:
        lock = self._locks.get(collection)
        if lock is None:
            lock = self._locks[collection] = anyio.Lock()
        return lock

    async def _load(self, collection: Collection):
        path = self.path_for(collection)
        try:
            raw = await anyio.to_thread.run_sync(_read_text, path)
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise StorageError(f"Failed to read {collection.value}", operation="read")
        if raw is None:
            return [], None
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing {path}: {e}")
            raise StorageError(f"{collection.value} document is corrupt", operation="read")
        if not isinstance(items, list):
            raise StorageError(f"{collection.value} document is not a list", operation="read")
        return items, raw

    async def read_all(self, collection: Collection) -> List[dict]:
        """Return the last committed contents of a collection"""
        items, _ = await self._load(collection)
        return items

    async def write_all(self, collection: Collection, items: List[dict]) -> None:
        """Replace a whole collection"""
        async with self.transaction(collection) as tx:
            await tx.commit({collection: items})

    @asynccontextmanager
    async def transaction(self, *collections: Collection) -> AsyncIterator[StoreTransaction]:
        """Hold the locks of the given collections across a read-modify-write cycle"""
        ordered = [c for c in LOCK_ORDER if c in collections]
        async with contextlib.AsyncExitStack() as stack:
            for collection in ordered:
                await stack.enter_async_context(self._lock(collection))
            documents = {}
            raw = {}
            for collection in ordered:
                documents[collection], raw[collection] = await self._load(collection)
            yield StoreTransaction(self, documents, raw)
