"""Durable Snapshot Store — whole-collection JSON persistence with atomic replace.

Invariants:
    - One JSON object per collection at <data_dir>/<name>.json
    - load(): missing file → {}; corrupt/unparsable/non-object → {} + warning log
    - save(): full rewrite, never incremental; OSError / TypeError → PersistenceError
    - A crash mid-write never leaves a half-written snapshot: content goes to a
      temp file in the same directory, is fsynced, then os.replace()d into place

Design Decisions:
    - File IO runs in a worker thread (asyncio.to_thread) so the event loop is
      not blocked; ordering is the caller's job (RecordRepository holds a lock)
    - InMemorySnapshotStore deep-copies on save/load so tests observe exactly
      what a reload from disk would see
"""

import asyncio
import copy
import json
import logging
import os
import tempfile
from pathlib import Path

from calcshare.core.domain_types import Collection, CollectionName
from calcshare.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class JsonFileSnapshotStore:
    """Persists each collection as a pretty-printed JSON file in data_dir."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def path_for(self, name: CollectionName) -> Path:
        return self.data_dir / f"{name.value}.json"

    async def load(self, name: CollectionName) -> Collection:
        return await asyncio.to_thread(self._load_sync, name)

    async def save(self, name: CollectionName, collection: Collection) -> None:
        await asyncio.to_thread(self._save_sync, name, collection)

    async def health_check(self) -> bool:
        """Data dir exists (or can be created) and is writable."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Snapshot store health check failed: {e}")
            return False
        return os.access(self.data_dir, os.W_OK)

    def _load_sync(self, name: CollectionName) -> Collection:
        path = self.path_for(name)
        if not path.exists():
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                f"Failed to load snapshot, starting fresh: {e}",
                extra={"collection": name.value, "path": str(path)},
            )
            return {}
        if not isinstance(content, dict):
            logger.warning(
                "Snapshot is not a JSON object, starting fresh",
                extra={"collection": name.value, "path": str(path)},
            )
            return {}
        return content

    def _save_sync(self, name: CollectionName, collection: Collection) -> None:
        path = self.path_for(name)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{name.value}.", suffix=".tmp", dir=self.data_dir,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(collection, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(str(e), name.value) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning(
                        "Could not remove temp snapshot",
                        extra={"collection": name.value, "path": tmp_name},
                    )


class InMemorySnapshotStore:
    """Keeps snapshots in a dict. For tests and ephemeral runs."""

    def __init__(self, initial: dict[CollectionName, Collection] | None = None):
        self.snapshots: dict[CollectionName, Collection] = copy.deepcopy(initial or {})
        self.save_count = 0
        self.fail_saves = False

    async def load(self, name: CollectionName) -> Collection:
        return copy.deepcopy(self.snapshots.get(name, {}))

    async def save(self, name: CollectionName, collection: Collection) -> None:
        if self.fail_saves:
            raise PersistenceError("simulated write failure", name.value)
        self.snapshots[name] = copy.deepcopy(collection)
        self.save_count += 1

    async def health_check(self) -> bool:
        return not self.fail_saves
