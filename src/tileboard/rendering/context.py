from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from esper import World

from tileboard.components.drag_session import DragSession
from tileboard.components.grid_config import GridConfig
from tileboard.components.tile import GridPosition, Tile
from tileboard.ui.layout import BoardGeometry

Rect = Tuple[float, float, float, float]


@dataclass(slots=True)
class RenderContext:
    """Frame-scoped rendering data shared across renderer subcomponents."""

    world: World
    window_width: int
    window_height: int
    config: GridConfig
    geometry: BoardGeometry
    tiles: Tuple[Tile, ...]
    session: DragSession
    drop_zones: List[GridPosition] = field(default_factory=list)
    dragging_size: Optional[str] = None
    tile_rects: Dict[str, Rect] = field(default_factory=dict)


def build_render_context(
    world: World,
    window_width: int,
    window_height: int,
    config: GridConfig,
    geometry: BoardGeometry,
    tiles: Tuple[Tile, ...],
    session: DragSession,
    *,
    drop_zones: List[GridPosition] | None = None,
    dragging_size: str | None = None,
) -> RenderContext:
    """Populate a RenderContext for the current frame."""
    return RenderContext(
        world=world,
        window_width=window_width,
        window_height=window_height,
        config=config,
        geometry=geometry,
        tiles=tiles,
        session=session,
        drop_zones=list(drop_zones or []),
        dragging_size=dragging_size,
    )
