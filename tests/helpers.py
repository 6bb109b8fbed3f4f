from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from esper import World

from tileboard.components.grid_config import GridConfig
from tileboard.components.tile import GridPosition, Tile
from tileboard.events.bus import EventBus
from tileboard.systems.board_store import BoardStore
from tileboard.systems.drag_system import DragSystem
from tileboard.world import create_world


@dataclass
class Board:
    bus: EventBus
    world: World
    store: BoardStore
    drag: DragSystem
    events: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> List[Dict[str, Any]]:
        return [payload for event, payload in self.events if event == name]


def make_board(config: GridConfig | None = None, *, record: Sequence[str] = ()) -> Board:
    """Real bus, world, store and drag coordinator with a deterministic clock and ids."""

    config = config or GridConfig()
    bus = EventBus()
    world = create_world(config)
    ticks = itertools.count(1)
    ids = itertools.count(1)
    store = BoardStore(
        world,
        bus,
        config,
        clock=lambda: float(next(ticks)),
        id_factory=lambda: f"t{next(ids)}",
    )
    drag = DragSystem(world, bus, store)
    board = Board(bus, world, store, drag)
    for name in record:
        bus.subscribe(name, _recorder(board, name))
    return board


def _recorder(board: Board, name: str):
    def handler(sender, **payload):
        board.events.append((name, payload))
    return handler


def positions(store: BoardStore) -> Dict[str, Tuple[int, int]]:
    return {tile.id: tile.position.as_tuple() for tile in store.tiles}


def tile(tile_id: str, x: int = 0, y: int = 0, size: str = "medium", created_at: float = 0.0, type_name: str | None = None) -> Tile:
    return Tile(id=tile_id, type=type_name or f"type-{tile_id}", position=GridPosition(x, y), size=size, created_at=created_at)
