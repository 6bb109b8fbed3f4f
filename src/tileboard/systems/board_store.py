from __future__ import annotations

import logging
import time
import uuid
from dataclasses import fields
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from esper import World

from tileboard.components.board_state import BoardState
from tileboard.components.grid_config import DEFAULT_GRID_CONFIG, GridConfig
from tileboard.components.tile import GridPosition, Tile
from tileboard.constants import FALLBACK_SIZE
from tileboard.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_TILE_ADDED,
    EVENT_TILE_MOVED,
    EVENT_TILE_REMOVED,
    EVENT_TILE_UPDATED,
    EVENT_TILES_COMPACTED,
    EVENT_TILES_DROPPED,
    EVENT_TILES_REORDERED,
    EventBus,
)
from tileboard.systems.board_ops import ensure_board_state
from tileboard.systems.placement import (
    CompactionResult,
    find_collisions,
    find_next_free_position,
    rearrange_tiles,
    validate_layout,
)
from tileboard.utils.grid_math import fits_in_bounds, span_of

logger = logging.getLogger(__name__)

PositionLike = Union[GridPosition, Tuple[int, int], Mapping[str, int]]
_TILE_FIELDS = {f.name for f in fields(Tile)}


def _coerce_position(position: PositionLike) -> GridPosition:
    if isinstance(position, GridPosition):
        return position
    if isinstance(position, Mapping):
        return GridPosition(int(position["x"]), int(position["y"]))
    x, y = position
    return GridPosition(int(x), int(y))


class BoardStore:
    """Single source of truth for the tile list of one board.

    All mutations replace ``BoardState.tiles`` with a new tuple, so anything
    reading the component between events sees a complete snapshot. Unknown ids
    passed to remove/update/move are ignored.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        config: GridConfig = DEFAULT_GRID_CONFIG,
        *,
        clock: Callable[[], float] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.config = config
        self._clock = clock or time.time
        self._id_factory = id_factory or (lambda: f"tile-{uuid.uuid4().hex[:12]}")
        self._last_timestamp = 0.0
        self.board_entity = ensure_board_state(world, config.rows)
        state = self.state
        if state.rows < config.rows:
            state.rows = config.rows

    # Queries -------------------------------------------------------------

    @property
    def state(self) -> BoardState:
        return self.world.component_for_entity(self.board_entity, BoardState)

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return self.state.tiles

    @property
    def rows(self) -> int:
        return self.state.rows

    @property
    def version(self) -> int:
        return self.state.version

    def get_tile(self, tile_id: str) -> Optional[Tile]:
        for tile in self.state.tiles:
            if tile.id == tile_id:
                return tile
        return None

    def is_tile_active(self, tile_type: str) -> bool:
        return any(tile.type == tile_type for tile in self.state.tiles)

    def tiles_of_type(self, tile_type: str) -> List[Tile]:
        return [tile for tile in self.state.tiles if tile.type == tile_type]

    def collisions_for(self, position: GridPosition, size: str | None, ignore_id: str | None = None) -> List[Tile]:
        return find_collisions(self.state.tiles, self.config, position, size, ignore_id=ignore_id)

    def new_tile_id(self) -> str:
        tile_id = self._id_factory()
        while self.get_tile(tile_id) is not None:
            tile_id = self._id_factory()
        return tile_id

    def new_timestamp(self) -> float:
        """Strictly increasing insertion stamp, so creation order is never ambiguous."""
        now = float(self._clock())
        if now <= self._last_timestamp:
            now = self._last_timestamp + 0.001
        self._last_timestamp = now
        return now

    # Mutations -----------------------------------------------------------

    def add_tile(self, tile: Tile) -> Tile:
        if self.get_tile(tile.id) is not None:
            raise ValueError(f"Tile id {tile.id!r} is already on the board")
        self._last_timestamp = max(self._last_timestamp, tile.created_at)
        self._replace(self.state.tiles + (tile,))
        logger.debug("Added tile %s (%s) at %s", tile.id, tile.type, tile.position.as_tuple())
        self.event_bus.emit(EVENT_TILE_ADDED, tile=tile)
        self._announce("add")
        return tile

    def add_tile_of_type(
        self,
        tile_type: str,
        size: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> Optional[Tile]:
        """Place a new tile of ``tile_type`` at the first free position.

        Returns None when the type is already present (unless duplicates are
        allowed) or when the board is full and cannot be extended.
        """
        if not self.config.allow_duplicate_types and self.is_tile_active(tile_type):
            logger.debug("Tile type %s already on the board", tile_type)
            return None
        size = size or FALLBACK_SIZE
        tile = Tile(
            id=self.new_tile_id(),
            type=tile_type,
            size=size,
            created_at=self.new_timestamp(),
            config=dict(config or {}),
        )
        rows = self.state.rows
        position = find_next_free_position(self.state.tiles, self.config, size, rows)
        if position is None and self.config.dynamic_extensions:
            while position is None:
                rows += 1
                position = find_next_free_position(self.state.tiles, self.config, size, rows)
        if position is None:
            logger.warning("Board is full; could not place a %s tile of type %s", size, tile_type)
            self.event_bus.emit(EVENT_TILES_DROPPED, tiles=(tile,), reason="board_full")
            return None
        tile = tile.with_position(position.x, position.y)
        if rows != self.state.rows:
            self.state.rows = rows
        return self.add_tile(tile)

    def remove_tile(self, tile_id: str) -> Optional[Tile]:
        """Remove a tile and compact the remaining ones."""
        removed = self.get_tile(tile_id)
        if removed is None:
            return None
        remaining = tuple(tile for tile in self.state.tiles if tile.id != tile_id)
        result = self._compact(remaining)
        logger.debug("Removed tile %s", tile_id)
        self.event_bus.emit(EVENT_TILE_REMOVED, tile=removed)
        self._emit_compaction(result)
        self._announce("remove")
        return removed

    def update_tile(self, tile_id: str, **changes: Any) -> Optional[Tile]:
        """Merge field changes into a tile without repositioning anything else."""
        if "id" in changes:
            raise ValueError("Tile ids are immutable")
        unknown = set(changes) - _TILE_FIELDS
        if unknown:
            raise TypeError(f"Unknown tile fields: {sorted(unknown)}")
        current = self.get_tile(tile_id)
        if current is None:
            return None
        if "position" in changes:
            changes["position"] = _coerce_position(changes["position"])
        updated = current.with_changes(**changes)
        self._replace(tuple(updated if tile.id == tile_id else tile for tile in self.state.tiles))
        self.event_bus.emit(EVENT_TILE_UPDATED, tile=updated, changes=dict(changes))
        self._announce("update")
        return updated

    def move_tile(self, tile_id: str, position: PositionLike) -> Optional[Tile]:
        """Set a tile's position to an already snapped and validated target."""
        current = self.get_tile(tile_id)
        if current is None:
            return None
        target = _coerce_position(position)
        if current.position == target:
            return current
        moved = current.with_position(target.x, target.y)
        self._replace(tuple(moved if tile.id == tile_id else tile for tile in self.state.tiles))
        logger.debug("Moved tile %s from %s to %s", tile_id, current.position.as_tuple(), target.as_tuple())
        self.event_bus.emit(EVENT_TILE_MOVED, tile=moved, previous=current.position)
        self._announce("move")
        return moved

    def reorder_tiles(self, new_tiles: Sequence[Tile]) -> None:
        """Replace the list wholesale; positions are taken as given."""
        ids = [tile.id for tile in new_tiles]
        if len(set(ids)) != len(ids):
            raise ValueError("Tile ids must be unique")
        self._replace(tuple(new_tiles))
        self.event_bus.emit(EVENT_TILES_REORDERED, tile_ids=ids)
        self._announce("reorder")

    def move_tile_index(self, from_index: int, to_index: int) -> None:
        """List-style reorder: move the tile at ``from_index`` to ``to_index``."""
        tiles = list(self.state.tiles)
        if not 0 <= from_index < len(tiles):
            return
        moved = tiles.pop(from_index)
        to_index = min(max(to_index, 0), len(tiles))
        tiles.insert(to_index, moved)
        self.reorder_tiles(tiles)

    def resize_tile(self, tile_id: str, size: str) -> Optional[Tile]:
        """Change a tile's size, compacting when the new footprint no longer fits."""
        current = self.get_tile(tile_id)
        if current is None:
            return None
        updated = self.update_tile(tile_id, size=size)
        span = span_of(self.config, size)
        blocked = not fits_in_bounds(self.config, updated.position, span, self.state.rows)
        if not blocked:
            blocked = bool(self.collisions_for(updated.position, size, ignore_id=tile_id))
        if blocked:
            self.compact()
        return self.get_tile(tile_id)

    def compact(self) -> Tuple[Tile, ...]:
        self._emit_compaction(self._compact())
        self._announce("compact")
        return self.state.tiles

    def load_tiles(self, tiles: Iterable[Tile]) -> Tuple[Tile, ...]:
        """Replace the board with persisted tiles, repairing layouts that break the invariants."""
        unique: List[Tile] = []
        seen: set[str] = set()
        for tile in tiles:
            if tile.id in seen:
                logger.warning("Skipping duplicate tile id %s while loading", tile.id)
                continue
            seen.add(tile.id)
            unique.append(tile)
            self._last_timestamp = max(self._last_timestamp, tile.created_at)
        rows = self.config.rows
        if self.config.dynamic_extensions:
            for tile in unique:
                rows = max(rows, tile.position.y + span_of(self.config, tile.size).row_span)
        self._replace(tuple(unique), rows=rows)
        problems = validate_layout(unique, self.config, self.state.rows)
        if not problems and rows > self.config.rows:
            packed_rows = rearrange_tiles(unique, self.config).rows
            if packed_rows < rows:
                problems = [f"stored layout needs {rows} rows but packs into {packed_rows}"]
        if problems:
            logger.warning("Stored layout is inconsistent (%s); compacting", "; ".join(problems))
            self._emit_compaction(self._compact())
        self._announce("load")
        return self.state.tiles

    def clear(self) -> None:
        self._replace((), rows=self.config.rows)
        self._announce("clear")

    # Internals -----------------------------------------------------------

    def _replace(self, tiles: Tuple[Tile, ...], rows: int | None = None) -> None:
        state = self.state
        state.tiles = tiles
        if rows is not None:
            state.rows = rows
        state.version += 1

    def _compact(self, tiles: Iterable[Tile] | None = None) -> CompactionResult:
        source = self.state.tiles if tiles is None else tiles
        result = rearrange_tiles(source, self.config)
        self._replace(result.tiles, rows=result.rows)
        return result

    def _emit_compaction(self, result: CompactionResult) -> None:
        self.event_bus.emit(EVENT_TILES_COMPACTED, tiles=result.tiles, rows=result.rows)
        if result.dropped:
            logger.warning(
                "Compaction dropped %d tile(s) that no longer fit: %s",
                len(result.dropped),
                ", ".join(tile.id for tile in result.dropped),
            )
            self.event_bus.emit(EVENT_TILES_DROPPED, tiles=result.dropped, reason="compaction")

    def _announce(self, reason: str) -> None:
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason=reason, version=self.state.version)
