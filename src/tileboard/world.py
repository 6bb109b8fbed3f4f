from typing import Iterable

from esper import World

from tileboard.components.grid_config import DEFAULT_GRID_CONFIG, GridConfig
from tileboard.components.tile_kinds import DEFAULT_TILE_KINDS, TileKind, TileKindRegistry, TileKinds
from tileboard.systems.board_ops import ensure_board_state, ensure_drag_session


def create_world(
    config: GridConfig = DEFAULT_GRID_CONFIG,
    *,
    kinds: Iterable[TileKind] | None = None,
) -> World:
    """Build a world holding the board, the drag session and the tile catalog."""
    world = World()
    ensure_board_state(world, config.rows)
    ensure_drag_session(world)

    # Single registry entity with the catalog definitions.
    definitions = TileKinds()
    definitions.register_many(DEFAULT_TILE_KINDS if kinds is None else kinds)
    world.create_entity(TileKindRegistry(), definitions)
    return world
