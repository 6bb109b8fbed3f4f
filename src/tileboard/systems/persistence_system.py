from __future__ import annotations

import json
import logging
from typing import Any, List

from tileboard.components.tile import Tile
from tileboard.constants import STORAGE_KEY
from tileboard.events.bus import EVENT_BOARD_CHANGED, EVENT_BOARD_LOADED, EventBus
from tileboard.systems.board_store import BoardStore
from tileboard.utils.storage import KeyValueStore

logger = logging.getLogger(__name__)


class PersistenceSystem:
    """Loads the board from a key-value store and writes it back on every change."""

    def __init__(
        self,
        event_bus: EventBus,
        store: BoardStore,
        storage: KeyValueStore,
        *,
        key: str = STORAGE_KEY,
        load_existing: bool = True,
    ) -> None:
        self.event_bus = event_bus
        self.store = store
        self.storage = storage
        self.key = key
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self._on_board_changed)
        if load_existing:
            self.load()

    def load(self) -> List[Tile]:
        tiles = self._read_tiles()
        if tiles:
            self.store.load_tiles(tiles)
        logger.info("Loaded %d tile(s) from %r", len(self.store.tiles), self.key)
        self.event_bus.emit(EVENT_BOARD_LOADED, count=len(self.store.tiles), source=self.key)
        return list(self.store.tiles)

    def save(self) -> bool:
        payload = json.dumps([tile.to_dict() for tile in self.store.tiles])
        try:
            self.storage.set(self.key, payload)
        except OSError as exc:
            logger.warning("Could not save board to %r: %s", self.key, exc)
            return False
        logger.debug("Saved %d tile(s) to %r", len(self.store.tiles), self.key)
        return True

    def _read_tiles(self) -> List[Tile]:
        try:
            raw = self.storage.get(self.key)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %r from storage (%s); starting empty", self.key, exc)
            return []
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored value under %r is not valid JSON; starting empty", self.key)
            return []
        if not isinstance(payload, list):
            logger.warning("Stored value under %r is not a list; starting empty", self.key)
            return []
        try:
            return [Tile.from_dict(entry) for entry in payload]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Stored tiles under %r are malformed (%s); starting empty", self.key, exc)
            return []

    def _on_board_changed(self, sender: Any, **payload: Any) -> None:
        if payload.get("reason") == "load":
            return
        self.save()
