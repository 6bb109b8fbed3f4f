from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from tileboard.components.tile import GridPosition
from tileboard.constants import DRAG_START_THRESHOLD, KEY_DELETE, KEY_ESCAPE
from tileboard.events.bus import (
    EVENT_KEY_PRESS,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EventBus,
)
from tileboard.systems.board_store import BoardStore
from tileboard.systems.catalog_system import CatalogSystem
from tileboard.systems.drag_system import DragState, DragSystem
from tileboard.ui.layout import (
    BoardGeometry,
    catalog_index_at,
    compute_board_geometry,
    point_to_cell,
)
from tileboard.utils.grid_math import span_of

logger = logging.getLogger(__name__)

MOUSE_BUTTON_LEFT = 1
MOUSE_BUTTON_RIGHT = 4


@dataclass(slots=True)
class _PendingPress:
    x: float
    y: float
    tile_id: Optional[str] = None
    catalog_type: Optional[str] = None


class InputSystem:
    """Turns window mouse and key events into drag coordinator and catalog calls.

    A left press on a tile or catalog entry only becomes a drag once the pointer
    travels past DRAG_START_THRESHOLD; releasing earlier counts as a click.
    """

    def __init__(
        self,
        event_bus: EventBus,
        window,
        store: BoardStore,
        drag: DragSystem,
        catalog: CatalogSystem | None = None,
    ):
        self.event_bus = event_bus
        self.window = window
        self.store = store
        self.drag = drag
        self.catalog = catalog
        self._pending: Optional[_PendingPress] = None
        self.focused_tile_id: Optional[str] = None
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_MOUSE_DRAG, self.on_mouse_drag)
        self.event_bus.subscribe(EVENT_MOUSE_RELEASE, self.on_mouse_release)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    # Geometry ------------------------------------------------------------

    def geometry(self) -> BoardGeometry:
        render_system = getattr(self.window, "render_system", None)
        if render_system is not None and hasattr(render_system, "board_geometry"):
            return render_system.board_geometry()
        return compute_board_geometry(
            self.window.width, self.window.height, self.store.config.columns, self.store.rows
        )

    def tile_at_point(self, x: float, y: float) -> Optional[str]:
        cell = point_to_cell(self.geometry(), x, y)
        if cell is None:
            return None
        col, row = cell
        for tile in self.store.tiles:
            span = span_of(self.store.config, tile.size)
            if tile.position.x <= col < tile.position.x + span.col_span and tile.position.y <= row < tile.position.y + span.row_span:
                return tile.id
        return None

    def drop_target_at_point(self, x: float, y: float) -> Optional[GridPosition]:
        """Return the drop zone under the pointer for the dragged size, or None off the board."""
        cell = point_to_cell(self.geometry(), x, y)
        if cell is None:
            return None
        span = span_of(self.store.config, self.drag.dragging_size())
        col, row = cell
        return GridPosition((col // span.col_span) * span.col_span, (row // span.row_span) * span.row_span)

    def _catalog_type_at_point(self, x: float, y: float) -> Optional[str]:
        if self.catalog is None:
            return None
        entries = self.catalog.entries()
        index = catalog_index_at(x, y, self.window.height, len(entries))
        if index is None:
            return None
        return entries[index]

    # Handlers ------------------------------------------------------------

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        button = kwargs.get("button")
        if x is None or y is None:
            return
        if self.drag.is_dragging:
            return
        if button == MOUSE_BUTTON_RIGHT:
            tile_id = self.tile_at_point(x, y)
            if tile_id is not None and self.store.config.removable:
                self.store.remove_tile(tile_id)
            return
        if button != MOUSE_BUTTON_LEFT:
            return
        catalog_type = self._catalog_type_at_point(x, y)
        if catalog_type is not None:
            self._pending = _PendingPress(x, y, catalog_type=catalog_type)
            return
        tile_id = self.tile_at_point(x, y)
        self.focused_tile_id = tile_id
        if tile_id is not None:
            self._pending = _PendingPress(x, y, tile_id=tile_id)

    def on_mouse_drag(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        if not self.drag.is_dragging:
            self._maybe_start_drag(x, y)
        if not self.drag.is_dragging:
            return
        if self.drag.state is DragState.DRAGGING_TILE:
            origin = self.drag.session.origin or (x, y)
            self.drag.update_tile_drag((x - origin[0], y - origin[1]))
        self.drag.set_hover_cell(self.drop_target_at_point(x, y))

    def on_mouse_release(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        pending = self._pending
        self._pending = None
        if x is None or y is None:
            if self.drag.is_dragging:
                self.drag.cancel(reason="release_without_position")
            return
        state = self.drag.state
        if state is DragState.DRAGGING_TILE:
            self.drag.end_tile_drag(self.drop_target_at_point(x, y))
        elif state is DragState.DRAGGING_CATALOG_ITEM:
            self.drag.end_catalog_drag(self.drop_target_at_point(x, y))
        elif pending is not None and pending.catalog_type is not None and self.catalog is not None:
            # Released before the drag threshold: a plain click on the catalog.
            self.catalog.toggle(pending.catalog_type)

    def on_key_press(self, sender, **kwargs):
        symbol = kwargs.get("symbol")
        if symbol == KEY_ESCAPE:
            self._pending = None
            self.drag.cancel(reason="escape")
        elif symbol == KEY_DELETE and not self.drag.is_dragging:
            tile_id = self.focused_tile_id
            if tile_id is not None and self.store.config.removable:
                self.store.remove_tile(tile_id)
                self.focused_tile_id = None

    def _maybe_start_drag(self, x: float, y: float) -> None:
        pending = self._pending
        if pending is None:
            return
        if math.hypot(x - pending.x, y - pending.y) < DRAG_START_THRESHOLD:
            return
        self._pending = None
        if pending.tile_id is not None:
            started = self.drag.start_tile_drag(pending.tile_id, (pending.x, pending.y))
        elif pending.catalog_type is not None:
            started = self.drag.start_catalog_drag(pending.catalog_type)
        else:
            started = False
        if started:
            logger.debug("Pointer drag began at (%.0f, %.0f)", pending.x, pending.y)
