from __future__ import annotations

import logging
from typing import Any, List, Optional

from esper import World

from tileboard.components.catalog_selection import CatalogSelection
from tileboard.components.tile import Tile
from tileboard.constants import KEY_DOWN, KEY_ENTER, KEY_UP
from tileboard.events.bus import (
    EVENT_CATALOG_SELECTION_CHANGED,
    EVENT_CATALOG_TOGGLED,
    EVENT_KEY_PRESS,
    EventBus,
)
from tileboard.systems.board_ops import get_tile_kinds
from tileboard.systems.board_store import BoardStore

logger = logging.getLogger(__name__)


class CatalogSystem:
    """Sidebar behaviour: toggling tile types on and off the board."""

    def __init__(self, world: World, event_bus: EventBus, store: BoardStore) -> None:
        self.world = world
        self.event_bus = event_bus
        self.store = store
        self._selection_entity = self._ensure_selection()
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def _ensure_selection(self) -> int:
        existing = list(self.world.get_component(CatalogSelection))
        if existing:
            return existing[0][0]
        return self.world.create_entity(CatalogSelection())

    @property
    def selection(self) -> CatalogSelection:
        return self.world.component_for_entity(self._selection_entity, CatalogSelection)

    def entries(self) -> List[str]:
        return get_tile_kinds(self.world).ordered_types()

    def selected_type(self) -> Optional[str]:
        entries = self.entries()
        if not entries:
            return None
        return entries[self.selection.index % len(entries)]

    def is_active(self, tile_type: str) -> bool:
        return self.store.is_tile_active(tile_type)

    def toggle(self, tile_type: str) -> Optional[Tile]:
        """Remove the type's tiles when present, otherwise add one at the next free spot.

        Returns the added tile, or None when tiles were removed or nothing changed.
        """
        if self.store.is_tile_active(tile_type):
            if not self.store.config.removable:
                logger.debug("Tiles are not removable; keeping %s", tile_type)
                return None
            for tile in self.store.tiles_of_type(tile_type):
                self.store.remove_tile(tile.id)
            self.event_bus.emit(EVENT_CATALOG_TOGGLED, tile_type=tile_type, active=False)
            return None
        kinds = get_tile_kinds(self.world)
        tile = self.store.add_tile_of_type(tile_type, size=kinds.default_size_for(tile_type))
        if tile is not None:
            self.event_bus.emit(EVENT_CATALOG_TOGGLED, tile_type=tile_type, active=True)
        return tile

    def select_next(self) -> Optional[str]:
        return self._move_selection(1)

    def select_previous(self) -> Optional[str]:
        return self._move_selection(-1)

    def toggle_selected(self) -> Optional[Tile]:
        tile_type = self.selected_type()
        if tile_type is None:
            return None
        return self.toggle(tile_type)

    def _move_selection(self, step: int) -> Optional[str]:
        entries = self.entries()
        if not entries:
            return None
        selection = self.selection
        selection.index = (selection.index + step) % len(entries)
        tile_type = entries[selection.index]
        self.event_bus.emit(EVENT_CATALOG_SELECTION_CHANGED, index=selection.index, tile_type=tile_type)
        return tile_type

    def on_key_press(self, sender: Any, **kwargs: Any) -> None:
        symbol = kwargs.get("symbol")
        if symbol == KEY_DOWN:
            self.select_next()
        elif symbol == KEY_UP:
            self.select_previous()
        elif symbol == KEY_ENTER:
            self.toggle_selected()
