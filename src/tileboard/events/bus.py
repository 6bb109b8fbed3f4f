from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                        # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"          # payload: x, y, button, modifiers
EVENT_MOUSE_DRAG = "mouse_drag"            # payload: x, y, dx, dy, buttons
EVENT_MOUSE_RELEASE = "mouse_release"      # payload: x, y, button
EVENT_MOUSE_MOVE = "mouse_move"            # payload: x, y, dx, dy
EVENT_KEY_PRESS = "key_press"              # payload: symbol, modifiers


# ============================================================================
# BOARD STATE
# ============================================================================
EVENT_TILE_ADDED = "tile_added"            # payload: tile=Tile
EVENT_TILE_REMOVED = "tile_removed"        # payload: tile=Tile
EVENT_TILE_UPDATED = "tile_updated"        # payload: tile=Tile, changes=dict
EVENT_TILE_MOVED = "tile_moved"            # payload: tile=Tile, previous=GridPosition
EVENT_TILES_REORDERED = "tiles_reordered"  # payload: tile_ids=list[str]
EVENT_TILES_COMPACTED = "tiles_compacted"  # payload: tiles=tuple[Tile,...], rows=int
EVENT_TILES_DROPPED = "tiles_dropped"      # payload: tiles=tuple[Tile,...], reason=str
EVENT_BOARD_CHANGED = "board_changed"      # payload: reason=str, version=int
EVENT_BOARD_LOADED = "board_loaded"        # payload: count=int, source=str


# ============================================================================
# DRAG & DROP
# ============================================================================
EVENT_DRAG_STARTED = "drag_started"        # payload: kind=DragKind, tile_id=str|None, catalog_type=str|None
EVENT_DRAG_HOVER = "drag_hover"            # payload: cell=GridPosition|None
EVENT_DRAG_ENDED = "drag_ended"            # payload: kind=DragKind, target=GridPosition|None, committed=bool
EVENT_DRAG_CANCELLED = "drag_cancelled"    # payload: kind=DragKind, reason=str
EVENT_DROP_REJECTED = "drop_rejected"      # payload: kind=DragKind, target=GridPosition, reason=str


# ============================================================================
# CATALOG
# ============================================================================
EVENT_CATALOG_SELECTION_CHANGED = "catalog_selection_changed"  # payload: index=int, tile_type=str
EVENT_CATALOG_TOGGLED = "catalog_toggled"                      # payload: tile_type=str, active=bool
