"""
Durable storage for the settings document.

`DataStorage` is the async load/save primitive the persistence bridge
wraps. `SqlDataStorage` keeps the document as JSON text in `plugin_data`,
one row per key, and runs the blocking session work in a worker thread so
the event loop stays free.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from yeartrace.core.errors import StorageError
from yeartrace.models.plugin_data import PluginData

logger = logging.getLogger(__name__)


class DataStorage(Protocol):
    async def load_data(self) -> Any:
        """Return the stored document, or None when nothing was saved yet."""
        ...

    async def save_data(self, document: dict) -> None:
        ...


class SqlDataStorage:

    def __init__(self, session_factory: Callable[[], Session], key: str):
        self._session_factory = session_factory
        self.key = key

    async def load_data(self) -> Any:
        return await asyncio.to_thread(self._load)

    async def save_data(self, document: dict) -> None:
        await asyncio.to_thread(self._save, document)

    def _load(self) -> Any:
        try:
            with self._session_factory() as db:
                row: Optional[PluginData] = (
                    db.query(PluginData).filter(PluginData.key == self.key).first()
                )
                raw = row.document if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read document: {exc}", key=self.key) from exc

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            # Unreadable JSON is a malformed document: fall back to defaults.
            logger.warning("Stored document %r is not valid JSON", self.key)
            return None

    def _save(self, document: dict) -> None:
        payload = json.dumps(document, ensure_ascii=False)
        try:
            with self._session_factory() as db:
                row = db.query(PluginData).filter(PluginData.key == self.key).first()
                if row is None:
                    db.add(PluginData(key=self.key, document=payload))
                else:
                    row.document = payload
                db.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not write document: {exc}", key=self.key) from exc
        logger.debug("Saved document %r (%d bytes)", self.key, len(payload))
