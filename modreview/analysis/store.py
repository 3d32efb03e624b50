"""
Moderation state persistence.

The controller talks to a ModerationStore keyed by content item id. Two
implementations:
- JsonModerationStore: a single JSON document on disk
- SqlModerationStore: the moderation_results table

Both round-trip a ModerationState exactly, including the optional
``timestamps`` list of its result.
"""
import asyncio
import json
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from modreview.core.config import settings
from modreview.core.logging import get_logger
from modreview.db.connection import get_session_factory
from modreview.db.repository import ModerationRepository
from modreview.moderation.result import ModerationState

logger = get_logger("analysis.store")


class ModerationStore(ABC):
    """Durable store for per-item moderation state."""

    @abstractmethod
    async def load(self, item_id: str) -> ModerationState:
        """Load the state for an item; absent records load as PENDING."""
        pass

    @abstractmethod
    async def save(self, item_id: str, state: ModerationState) -> None:
        """Persist the state for an item."""
        pass


class JsonModerationStore(ModerationStore):
    """Stores moderation state for all items in one JSON file."""

    def __init__(self, data_dir: str = None):
        self.data_dir = Path(data_dir or settings.data_dir)
        self.results_file = self.data_dir / "moderation_results.json"
        self._lock = threading.Lock()
        self._ensure_data_dir()

    def _ensure_data_dir(self):
        """Create data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Data directory: {self.data_dir}")

    def _read_all(self) -> Dict[str, Any]:
        if not self.results_file.exists():
            return {}
        with open(self.results_file, "r") as f:
            data = json.load(f)
        return data.get("results", {})

    def _write_all(self, results: Dict[str, Any]) -> None:
        data = {
            "last_updated": datetime.utcnow().isoformat(),
            "version": "1.0",
            "results": results,
        }
        tmp_file = self.results_file.with_suffix(".json.tmp")
        with open(tmp_file, "w") as f:
            json.dump(data, f, indent=2)
        tmp_file.replace(self.results_file)

    def load_sync(self, item_id: str) -> ModerationState:
        with self._lock:
            record = self._read_all().get(item_id)
        return ModerationState.from_dict(record)

    def save_sync(self, item_id: str, state: ModerationState) -> None:
        with self._lock:
            results = self._read_all()
            results[item_id] = state.to_dict()
            self._write_all(results)
        logger.debug(f"Saved moderation state for {item_id}: {state.status.value}")

    def delete(self, item_id: str) -> bool:
        """Delete the stored state for an item."""
        with self._lock:
            results = self._read_all()
            if item_id not in results:
                logger.warning(f"Item {item_id} not found in stored results")
                return False
            del results[item_id]
            self._write_all(results)
        logger.info(f"Deleted moderation state for {item_id}")
        return True

    async def load(self, item_id: str) -> ModerationState:
        return await asyncio.to_thread(self.load_sync, item_id)

    async def save(self, item_id: str, state: ModerationState) -> None:
        await asyncio.to_thread(self.save_sync, item_id, state)


class SqlModerationStore(ModerationStore):
    """Stores moderation state in the moderation_results table."""

    def __init__(self, session_factory=None):
        if session_factory is None:
            session_factory = get_session_factory()
        self.session_factory = session_factory

    def load_sync(self, item_id: str) -> ModerationState:
        session = self.session_factory()
        try:
            return ModerationRepository(session).load_state(item_id)
        finally:
            session.close()

    def save_sync(self, item_id: str, state: ModerationState) -> None:
        session = self.session_factory()
        try:
            ModerationRepository(session).upsert(item_id, state)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, item_id: str) -> bool:
        """Delete the stored state for an item; the item row is kept."""
        session = self.session_factory()
        try:
            deleted = ModerationRepository(session).delete(item_id)
        finally:
            session.close()
        if deleted:
            logger.info(f"Deleted moderation state for {item_id}")
        return deleted

    async def load(self, item_id: str) -> ModerationState:
        return await asyncio.to_thread(self.load_sync, item_id)

    async def save(self, item_id: str, state: ModerationState) -> None:
        await asyncio.to_thread(self.save_sync, item_id, state)


# Global store instance
_store: Optional[ModerationStore] = None


def get_store() -> ModerationStore:
    """Get or create the configured store."""
    global _store
    if _store is None:
        if settings.store_backend == "json":
            _store = JsonModerationStore()
        else:
            _store = SqlModerationStore()
    return _store
