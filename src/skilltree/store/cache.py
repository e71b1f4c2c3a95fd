import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from skilltree.config.models import AppConfig
from skilltree.store.exceptions import NodeNotFoundError, StorageError
from skilltree.store.models import Node

logger = logging.getLogger(__name__)


class NodeCache(Protocol):
    """Key/value store of one node per normalized topic.

    Writes replace the whole entry; there is no partial update, so callers
    load, modify and store the complete node.
    """

    async def exists(self, key: str) -> bool: ...

    async def load(self, key: str) -> Node: ...

    async def store(self, key: str, node: Node) -> None: ...


class FileNodeCache:
    """Node cache persisted as one JSON file per key in a flat directory.

    File access runs in a worker thread so the event loop stays free while
    several builds share the cache.
    """

    suffix = ".json"

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}{self.suffix}"

    async def exists(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            return await asyncio.to_thread(path.is_file)
        except OSError as e:
            raise StorageError(f"Failed to check {path}: {e}") from e

    async def load(self, key: str) -> Node:
        path = self.path_for(key)
        try:
            data = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise NodeNotFoundError(key) from None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

        try:
            return Node.model_validate_json(data)
        except ValidationError as e:
            raise StorageError(f"Corrupt cache entry {path}: {e}") from e

    async def store(self, key: str, node: Node) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(self._write, path, node.to_json())
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Stored node '{node.name}' at {path}")

    def _write(self, path: Path, data: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and swap it in so readers never see a
        # partially written entry.
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def keys(self) -> list[str]:
        """List the keys currently stored, sorted."""
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{self.suffix}"))


class MemoryNodeCache:
    """In-process node cache. Entries are copied on the way in and out."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    async def exists(self, key: str) -> bool:
        return key in self._entries

    async def load(self, key: str) -> Node:
        try:
            data = self._entries[key]
        except KeyError:
            raise NodeNotFoundError(key) from None
        return Node.model_validate_json(data)

    async def store(self, key: str, node: Node) -> None:
        self._entries[key] = node.to_json(indent=None)

    def keys(self) -> list[str]:
        return sorted(self._entries)


def get_cache(config: AppConfig) -> FileNodeCache:
    """Create the file-backed cache configured for this application."""
    return FileNodeCache(config.storage.node_dir)
