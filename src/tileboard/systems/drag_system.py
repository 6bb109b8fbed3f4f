from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Iterator, Mapping, Optional, Tuple, Union

from esper import World

from tileboard.components.drag_session import DragKind, DragSession
from tileboard.components.grid_config import CollisionPolicy
from tileboard.components.tile import GridPosition, Tile
from tileboard.constants import FALLBACK_SIZE
from tileboard.events.bus import (
    EVENT_DRAG_CANCELLED,
    EVENT_DRAG_ENDED,
    EVENT_DRAG_HOVER,
    EVENT_DRAG_STARTED,
    EVENT_DROP_REJECTED,
    EventBus,
)
from tileboard.systems.board_ops import ensure_drag_session, get_tile_kinds
from tileboard.systems.board_store import BoardStore
from tileboard.utils.grid_math import (
    enumerate_candidate_origins,
    snap_to_cell_increment,
    span_of,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Target = Union[GridPosition, Tuple[float, float], Mapping[str, float], None]


class DragState(Enum):
    IDLE = auto()
    DRAGGING_TILE = auto()
    DRAGGING_CATALOG_ITEM = auto()


_STATE_BY_KIND = {
    DragKind.NONE: DragState.IDLE,
    DragKind.MOVING_TILE: DragState.DRAGGING_TILE,
    DragKind.INSERTING_FROM_CATALOG: DragState.DRAGGING_CATALOG_ITEM,
}


class DragStateError(RuntimeError):
    """Raised when a drag operation is called from a state that does not allow it."""


def _raw_target(target: Target) -> Optional[Point]:
    if target is None:
        return None
    if isinstance(target, GridPosition):
        return float(target.x), float(target.y)
    if isinstance(target, Mapping):
        return float(target["x"]), float(target["y"])
    x, y = target
    return float(x), float(y)


class DragSystem:
    """Coordinates drag gestures between the pointer and the board store.

    States: idle, dragging an existing tile, dragging a catalog item. Only one
    gesture can be active; starting another while one is running raises
    DragStateError. Hover updates never touch the board. Board mutations happen
    only in end_tile_drag / end_catalog_drag, through the store.
    """

    def __init__(self, world: World, event_bus: EventBus, store: BoardStore) -> None:
        self.world = world
        self.event_bus = event_bus
        self.store = store
        self.config = store.config
        self.session_entity = ensure_drag_session(world)

    # Queries -------------------------------------------------------------

    @property
    def session(self) -> DragSession:
        return self.world.component_for_entity(self.session_entity, DragSession)

    @property
    def state(self) -> DragState:
        return _STATE_BY_KIND[self.session.kind]

    @property
    def is_dragging(self) -> bool:
        return self.session.active

    def dragging_size(self) -> Optional[str]:
        session = self.session
        if session.kind is DragKind.MOVING_TILE and session.tile_id is not None:
            tile = self.store.get_tile(session.tile_id)
            return tile.size if tile is not None else FALLBACK_SIZE
        if session.kind is DragKind.INSERTING_FROM_CATALOG:
            return self._catalog_size(session.catalog_type)
        return None

    def drop_zones(self) -> Iterator[GridPosition]:
        """Candidate origins for the dragged tile's size; empty when idle."""
        size = self.dragging_size()
        if size is None:
            return iter(())
        return enumerate_candidate_origins(self.config, size, self.store.rows)

    # Transitions ---------------------------------------------------------

    def start_tile_drag(self, tile_id: str, origin: Point) -> bool:
        self._require_idle("start_tile_drag")
        if not self.config.movement_enabled:
            logger.debug("Tile movement disabled; ignoring drag of %s", tile_id)
            return False
        if self.store.get_tile(tile_id) is None:
            logger.debug("Ignoring drag of unknown tile %s", tile_id)
            return False
        session = self.session
        session.kind = DragKind.MOVING_TILE
        session.tile_id = tile_id
        session.origin = (float(origin[0]), float(origin[1]))
        session.offset = (0.0, 0.0)
        session.hover_cell = None
        session.drop_target = None
        logger.debug("Started dragging tile %s", tile_id)
        self.event_bus.emit(EVENT_DRAG_STARTED, kind=session.kind, tile_id=tile_id, catalog_type=None)
        return True

    def start_catalog_drag(self, tile_type: str) -> bool:
        self._require_idle("start_catalog_drag")
        session = self.session
        session.kind = DragKind.INSERTING_FROM_CATALOG
        session.catalog_type = tile_type
        session.tile_id = None
        session.origin = None
        session.offset = None
        session.hover_cell = None
        session.drop_target = None
        logger.debug("Started dragging catalog item %s", tile_type)
        self.event_bus.emit(EVENT_DRAG_STARTED, kind=session.kind, tile_id=None, catalog_type=tile_type)
        return True

    def update_tile_drag(self, offset: Point) -> None:
        session = self.session
        if session.kind is not DragKind.MOVING_TILE:
            raise DragStateError("update_tile_drag called without an active tile drag")
        session.offset = (float(offset[0]), float(offset[1]))

    def set_hover_cell(self, cell: Target) -> Optional[GridPosition]:
        """Record the cell under the pointer, snapped to the dragged span; None clears it."""
        session = self.session
        if not session.active:
            raise DragStateError("set_hover_cell called while no drag is active")
        raw = _raw_target(cell)
        hover: Optional[GridPosition] = None
        if raw is not None:
            hover = self._snap(raw, self.dragging_size())
        if hover != session.hover_cell:
            session.hover_cell = hover
            self.event_bus.emit(EVENT_DRAG_HOVER, cell=hover)
        return hover

    def end_tile_drag(self, drop_target: Target, tile_id: str | None = None) -> Optional[Tile]:
        """Finish moving a tile. Returns the moved tile, or None when nothing moved.

        A None target means the pointer was released off the board; any other
        target is snapped and clamped onto the grid.
        """
        session = self.session
        if session.kind is not DragKind.MOVING_TILE:
            raise DragStateError("end_tile_drag called without an active tile drag")
        if tile_id is not None and tile_id != session.tile_id:
            raise DragStateError(f"end_tile_drag for {tile_id!r} but {session.tile_id!r} is being dragged")
        dragged_id = session.tile_id
        kind = session.kind
        tile = self.store.get_tile(dragged_id) if dragged_id is not None else None
        raw = _raw_target(drop_target)
        if tile is None:
            self._finish(kind, None, committed=False)
            return None

        if raw is None:
            if self.config.allow_drag_out_of_bounds and self.config.removable:
                logger.debug("Tile %s dragged out of bounds; removing", dragged_id)
                self.store.remove_tile(dragged_id)
                self._finish(kind, None, committed=True)
                return None
            self._finish(kind, None, committed=False)
            return None

        target = self._snap(raw, tile.size)
        collisions = self.store.collisions_for(target, tile.size, ignore_id=dragged_id)
        if collisions and self.config.collision_policy is CollisionPolicy.REJECT:
            self._reject(kind, target, "occupied")
            return None
        moved = self.store.move_tile(dragged_id, target)
        if collisions:
            self.store.compact()
            moved = self.store.get_tile(dragged_id)
        self._finish(kind, target, committed=True)
        return moved

    def end_catalog_drag(self, drop_target: Target, tile_type: str | None = None) -> Optional[Tile]:
        """Finish a catalog drag. Returns the inserted tile, or None when abandoned."""
        session = self.session
        if session.kind is not DragKind.INSERTING_FROM_CATALOG:
            raise DragStateError("end_catalog_drag called without an active catalog drag")
        tile_type = tile_type or session.catalog_type
        kind = session.kind
        raw = _raw_target(drop_target)
        if tile_type is None or raw is None:
            self._finish(kind, None, committed=False)
            return None
        if not self.config.allow_duplicate_types and self.store.is_tile_active(tile_type):
            self._reject(kind, None, "duplicate_type")
            return None

        size = self._catalog_size(tile_type)
        target = self._snap(raw, size)
        collisions = self.store.collisions_for(target, size)
        if collisions and self.config.collision_policy is CollisionPolicy.REJECT:
            self._reject(kind, target, "occupied")
            return None
        tile = Tile(
            id=self.store.new_tile_id(),
            type=tile_type,
            position=target,
            size=size,
            created_at=self.store.new_timestamp(),
        )
        self.store.add_tile(tile)
        if collisions:
            self.store.compact()
        self._finish(kind, target, committed=True)
        return self.store.get_tile(tile.id)

    def cancel(self, reason: str = "cancel") -> None:
        """Abandon the current gesture without touching the board; idle is a no-op."""
        session = self.session
        if not session.active:
            return
        kind = session.kind
        session.reset()
        logger.debug("Drag cancelled (%s)", reason)
        self.event_bus.emit(EVENT_DRAG_CANCELLED, kind=kind, reason=reason)

    # Internals -----------------------------------------------------------

    def _require_idle(self, operation: str) -> None:
        if self.session.active:
            raise DragStateError(f"{operation} called while a {self.session.kind.name} drag is active")

    def _snap(self, raw: Point, size: str | None) -> GridPosition:
        span = span_of(self.config, size)
        return snap_to_cell_increment(self.config, raw[0], raw[1], span, self.store.rows)

    def _catalog_size(self, tile_type: str | None) -> str:
        try:
            kinds = get_tile_kinds(self.world)
        except RuntimeError:
            return FALLBACK_SIZE
        return kinds.default_size_for(tile_type)

    def _finish(self, kind: DragKind, target: Optional[GridPosition], *, committed: bool) -> None:
        self.session.reset(drop_target=target if committed else None)
        self.event_bus.emit(EVENT_DRAG_ENDED, kind=kind, target=target, committed=committed)

    def _reject(self, kind: DragKind, target: Optional[GridPosition], reason: str) -> None:
        logger.debug("Drop rejected (%s) at %s", reason, target.as_tuple() if target else None)
        self.session.reset()
        self.event_bus.emit(EVENT_DROP_REJECTED, kind=kind, target=target, reason=reason)
        self.event_bus.emit(EVENT_DRAG_ENDED, kind=kind, target=None, committed=False)
