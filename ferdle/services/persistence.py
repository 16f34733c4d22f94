"""
Persistence Service

Key-value stores for the in-progress game snapshot. Every store keeps a
single logical key (PERSISTENCE_KEY) holding the structured form of a
PersistedGameState and exposes the same three operations: save, load, clear.

Stores report decode problems as "no snapshot" but let I/O errors
propagate; the engine decides that storage failures are non-fatal.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..config.game_settings import PERSISTENCE_KEY
from ..models.game import PersistedGameState, SnapshotDecodeError
from ..utils.game_logger import game_logger


class GameStore(ABC):
    """Storage boundary consumed by the game engine."""

    key = PERSISTENCE_KEY

    @abstractmethod
    def save(self, state: PersistedGameState) -> None:
        """Persist ``state``, replacing any previous snapshot."""

    @abstractmethod
    def load(self) -> Optional[PersistedGameState]:
        """Return the stored snapshot, or None if absent or undecodable."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored snapshot if there is one."""

    def _decode(self, data: Any) -> Optional[PersistedGameState]:
        if not isinstance(data, dict):
            game_logger.logger.warning(f"Discarding persisted state for {self.key}: not an object")
            return None
        try:
            return PersistedGameState.from_dict(data)
        except SnapshotDecodeError as e:
            game_logger.logger.warning(f"Discarding persisted state for {self.key}: {e}")
            return None


class MemoryGameStore(GameStore):
    """Process-local store. Values are kept as JSON text, the same shape a real store sees."""

    def __init__(self):
        self._values: Dict[str, str] = {}

    def save(self, state):
        self._values[self.key] = json.dumps(state.to_dict())

    def load(self):
        raw = self._values.get(self.key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            game_logger.logger.warning(f"Discarding persisted state for {self.key}: {e}")
            return None
        return self._decode(data)

    def clear(self):
        self._values.pop(self.key, None)


class JsonFileGameStore(GameStore):
    """
    Stores the snapshot in a JSON file, one top-level entry per key.

    Other keys already present in the file are preserved.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                contents = json.load(f)
            except json.JSONDecodeError as e:
                game_logger.logger.warning(f"State file {self.path} is not valid JSON: {e}")
                return {}
        return contents if isinstance(contents, dict) else {}

    def _write_all(self, contents: Dict[str, Any]) -> None:
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(contents, f, ensure_ascii=False)
        tmp_path.replace(self.path)

    def save(self, state):
        contents = self._read_all()
        contents[self.key] = state.to_dict()
        self._write_all(contents)

    def load(self):
        data = self._read_all().get(self.key)
        if data is None:
            return None
        return self._decode(data)

    def clear(self):
        contents = self._read_all()
        if self.key in contents:
            del contents[self.key]
            self._write_all(contents)


class MongoGameStore(GameStore):
    """
    Stores the snapshot as one MongoDB document whose ``_id`` is the persistence key.
    """

    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = 'ferdle', collection=None):
        """
        Args:
            mongo_uri: MongoDB connection string, used when no collection is given
            db_name: Database holding the ``game_state`` collection
            collection: Ready-made collection object (takes precedence over mongo_uri)
        """
        if collection is None:
            if not mongo_uri:
                raise ValueError("MongoGameStore needs either a mongo_uri or a collection")
            self.client = MongoClient(mongo_uri, server_api=ServerApi('1'))
            collection = self.client[db_name].game_state
        else:
            self.client = None
        self.collection = collection

    def save(self, state):
        self.collection.replace_one(
            {"_id": self.key},
            {"_id": self.key, "state": state.to_dict()},
            upsert=True
        )

    def load(self):
        document = self.collection.find_one({"_id": self.key})
        if document is None:
            return None
        return self._decode(document.get("state"))

    def clear(self):
        self.collection.delete_one({"_id": self.key})


def build_store(config) -> GameStore:
    """
    Creates the store selected by ``config.STORAGE_BACKEND``.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = str(getattr(config, 'STORAGE_BACKEND', 'memory')).lower()

    if backend == 'memory':
        return MemoryGameStore()
    if backend == 'file':
        return JsonFileGameStore(config.STATE_FILE)
    if backend == 'mongo':
        return MongoGameStore(config.MONGO_URI, config.MONGO_DB)

    raise ValueError(f"Unknown storage backend '{backend}'. Must be 'memory', 'file' or 'mongo'")
