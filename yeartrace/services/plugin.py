"""
Plugin lifecycle owner.

Holds the one Settings aggregate and the one RecordsStore for the process
and wires them to persistence and the heatmap projection. Views never
touch the record mapping directly: day changes go through `apply`, catalog
changes through `edit_catalog`, and both save the whole document
afterwards.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

from yeartrace.core.errors import BehaviorNotFoundError
from yeartrace.schemas.domain import DayRecord, YeartraceSettings
from yeartrace.services.commands import (
    Command,
    IncrementBehaviorEntry,
    UpsertBehaviorEntry,
)
from yeartrace.services.defaults import default_settings
from yeartrace.services.heatmap import HeatmapProjection
from yeartrace.services.persistence import PersistenceBridge
from yeartrace.services.records_store import RecordsStore
from yeartrace.services.storage import DataStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class YeartracePlugin:

    def __init__(self, storage: DataStorage):
        self.settings: YeartraceSettings = default_settings()
        self.store = RecordsStore(self._current_settings)
        self.bridge = PersistenceBridge(storage, self.store)
        self.heatmap = HeatmapProjection(self.store, self._current_settings)

    def _current_settings(self) -> YeartraceSettings:
        return self.settings

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------

    async def load_settings(self) -> None:
        self.settings = await self.bridge.load()

    async def save_settings(self) -> None:
        await self.bridge.save(self.settings)

    def unload(self) -> None:
        self.heatmap.close()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def apply(self, command: Command) -> DayRecord:
        """Apply a day command, then persist."""
        if isinstance(command, (UpsertBehaviorEntry, IncrementBehaviorEntry)):
            if self.settings.find_behavior(command.behavior_id) is None:
                raise BehaviorNotFoundError(command.behavior_id)
        record = self.store.dispatch(command)
        await self.save_settings()
        return record

    async def edit_catalog(self, edit: Callable[[YeartraceSettings], T]) -> T:
        """
        Run a catalog edit against the live settings, re-derive every day
        record against the edited catalogs, then persist.
        """
        result = edit(self.settings)
        self.store.recompute_all()
        await self.save_settings()
        return result
