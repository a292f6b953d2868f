"""
SaveStore interface for pluggable save-game backends.

A SaveStore is a key/value store for opaque text blobs. The orchestrator keeps
exactly one save under a fixed key and never interprets the store's contents
itself; it encodes and validates blobs through ``townbuilder.snapshot``.

Two included implementations:
1. InMemorySaveStore - Dict-based storage, data lost on exit (tests, headless runs)
2. JsonFileSaveStore - One ``<key>.json`` file per key under a directory

Usage pattern:
    store = JsonFileSaveStore("saves")
    game = Orchestrator(store=store)
    game.start_new_game()
    game.save_game()
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict, Optional

from .config import Config


class SaveStore(ABC):
    """Abstract base class for save-game storage.

    Orchestrator depends on this interface, not an implementation. Custom
    backends (browser storage bridges, databases, remote blobs) only need these
    four methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Return the blob stored under ``key``.

        Args:
            key: Save slot name

        Returns:
            The stored text, or None if nothing is stored
        """
        pass

    @abstractmethod
    def write(self, key: str, blob: str) -> None:
        """
        Store ``blob`` under ``key``, replacing any previous value.

        Raises:
            OSError: If the backend cannot persist the blob
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; deleting a missing key is a no-op."""
        pass

    def exists(self, key: str) -> bool:
        return self.read(key) is not None


class InMemorySaveStore(SaveStore):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self) -> None:
        self._blobs: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        self._blobs[key] = blob

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._blobs


class JsonFileSaveStore(SaveStore):
    """File-based store writing ``{base_path}/{key}.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a reader never sees a half-written save.
    The directory is created on first write.
    """

    def __init__(self, base_path: Path | str | None = None):
        self.base_path = Path(base_path) if base_path is not None else Config.SAVE_DIR

    def _path(self, key: str) -> Path:
        return self.base_path / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def write(self, key: str, blob: str) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)
        path = self._path(key)

        temp_path: Optional[Path] = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.base_path,
                delete=False,
                suffix=".tmp",
            ) as temp_file:
                temp_file.write(blob)
                temp_file.flush()
                os.fsync(temp_file.fileno())
                temp_path = Path(temp_file.name)
            os.replace(temp_path, path)
        except Exception:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()
