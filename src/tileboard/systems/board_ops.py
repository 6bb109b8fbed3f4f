from __future__ import annotations

from esper import World

from tileboard.components.board_state import BoardState
from tileboard.components.drag_session import DragSession
from tileboard.components.tile_kinds import TileKindRegistry, TileKinds


def get_board_state(world: World) -> BoardState:
    for _, state in world.get_component(BoardState):
        return state
    raise RuntimeError("BoardState not found; create the world with create_world()")


def get_tile_kinds(world: World) -> TileKinds:
    for entity, _ in world.get_component(TileKindRegistry):
        return world.component_for_entity(entity, TileKinds)
    raise RuntimeError("TileKinds definitions not found")


def ensure_board_state(world: World, rows: int) -> int:
    """Return the board entity, creating the BoardState singleton if missing."""
    existing = list(world.get_component(BoardState))
    if existing:
        return existing[0][0]
    return world.create_entity(BoardState(rows=rows))


def ensure_drag_session(world: World) -> int:
    existing = list(world.get_component(DragSession))
    if existing:
        return existing[0][0]
    return world.create_entity(DragSession())
