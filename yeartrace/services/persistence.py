"""
Persistence bridge between the records store, the settings aggregate and
durable storage.

load()          → read document, merge over defaults, seed the store with
                  score and tier re-derived against the loaded catalogs
save(settings)  → copy the store into settings.records, write the whole
                  aggregate in a single save_data call

No retries: a storage failure propagates to whoever triggered the save.
"""
from __future__ import annotations

import logging

from yeartrace.schemas.domain import YeartraceSettings
from yeartrace.services.defaults import merge_settings
from yeartrace.services.records_store import RecordsStore
from yeartrace.services.storage import DataStorage

logger = logging.getLogger(__name__)


class PersistenceBridge:

    def __init__(self, storage: DataStorage, store: RecordsStore):
        self.storage = storage
        self.store = store

    async def load(self) -> YeartraceSettings:
        raw = await self.storage.load_data()
        settings = merge_settings(raw)
        self.store.replace_all(settings.records, catalogs=settings)
        settings.records = self.store.snapshot()
        logger.info(
            "Settings loaded: %d behaviors, %d tiers, %d goals",
            len(settings.behaviors), len(settings.status_tiers), len(settings.goals),
        )
        return settings

    async def save(self, settings: YeartraceSettings) -> None:
        settings.records = self.store.snapshot()
        await self.storage.save_data(settings.to_document())
