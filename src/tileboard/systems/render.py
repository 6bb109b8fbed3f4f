from __future__ import annotations

from typing import Any, Dict, Optional

from esper import World

from tileboard.components.catalog_selection import CatalogSelection
from tileboard.components.tile_kinds import TileKinds
from tileboard.events.bus import EVENT_TICK, EventBus
from tileboard.rendering.board_renderer import BoardRenderer
from tileboard.rendering.catalog_renderer import CatalogRenderer
from tileboard.rendering.context import RenderContext, build_render_context
from tileboard.constants import TILE_PADDING
from tileboard.systems.board_ops import get_tile_kinds
from tileboard.systems.board_store import BoardStore
from tileboard.systems.drag_system import DragSystem
from tileboard.ui.layout import BoardGeometry, compute_board_geometry


class RenderSystem:
    def __init__(self, world: World, event_bus: EventBus, window, store: BoardStore, drag: DragSystem):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.store = store
        self.drag = drag
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self._time = 0.0
        self._render_ctx: RenderContext | None = None
        self._board_renderer = BoardRenderer(padding=TILE_PADDING)
        self._catalog_renderer = CatalogRenderer()

    def board_geometry(self) -> BoardGeometry:
        return compute_board_geometry(self.window.width, self.window.height, self.store.config.columns, self.store.rows)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get("dt", 1 / 60)
        try:
            self._time += float(dt)
        except (TypeError, ValueError):
            self._time += 1 / 60

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        # Without an active Arcade window (unit tests) skip draw calls but still build layout caches.
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        size = self.drag.dragging_size()
        ctx = build_render_context(
            world=self.world,
            window_width=self.window.width,
            window_height=self.window.height,
            config=self.store.config,
            geometry=self.board_geometry(),
            tiles=self.store.tiles,
            session=self.drag.session,
            drop_zones=list(self.drag.drop_zones()),
            dragging_size=size,
        )
        self._render_ctx = ctx
        kinds = self._kinds()
        self._catalog_renderer.render(arcade, ctx, kinds, self._selected_index(), headless=headless)
        self._board_renderer.render(arcade, ctx, kinds, headless=headless)

    def get_tile_rect(self, tile_id: str):
        """Return (left, bottom, width, height) of a tile from the last frame, or None."""
        if self._render_ctx is None:
            return None
        return self._render_ctx.tile_rects.get(tile_id)

    def get_catalog_entry_at_point(self, x: float, y: float) -> Optional[Dict[str, Any]]:
        return self._catalog_renderer.hit_test(x, y)

    def _kinds(self) -> TileKinds:
        try:
            return get_tile_kinds(self.world)
        except RuntimeError:
            return TileKinds()

    def _selected_index(self) -> int | None:
        for _, selection in self.world.get_component(CatalogSelection):
            return selection.index
        return None
