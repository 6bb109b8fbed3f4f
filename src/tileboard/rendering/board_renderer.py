from __future__ import annotations

from typing import TYPE_CHECKING

from tileboard.components.drag_session import DragKind
from tileboard.constants import (
    DRAG_GHOST_ALPHA,
    DROP_ZONE_COLOR,
    DROP_ZONE_HOVER_COLOR,
    GRID_LINE_COLOR,
    TEXT_COLOR,
)
from tileboard.utils.grid_math import span_of

if TYPE_CHECKING:
    from tileboard.components.tile_kinds import TileKinds
    from tileboard.rendering.context import RenderContext


class BoardRenderer:
    """Draws grid lines, tiles and the drop-zone overlay while a drag is active."""

    def __init__(self, padding: int = 6):
        self._padding = padding

    def render(self, arcade, ctx: RenderContext, kinds: TileKinds, headless: bool) -> None:
        geometry = ctx.geometry
        ctx.tile_rects = {}
        for tile in ctx.tiles:
            span = span_of(ctx.config, tile.size)
            ctx.tile_rects[tile.id] = geometry.cell_rect(tile.position.x, tile.position.y, span.col_span, span.row_span)
        if headless:
            return

        for row in range(geometry.rows):
            for col in range(geometry.columns):
                left, bottom, width, height = geometry.cell_rect(col, row)
                arcade.draw_lbwh_rectangle_outline(left, bottom, width, height, GRID_LINE_COLOR, 1)

        session = ctx.session
        moving_id = session.tile_id if session.kind is DragKind.MOVING_TILE else None
        pad = self._padding
        for tile in ctx.tiles:
            left, bottom, width, height = ctx.tile_rects[tile.id]
            r, g, b = kinds.color_for(tile.type)
            alpha = DRAG_GHOST_ALPHA if tile.id == moving_id else 255
            arcade.draw_lbwh_rectangle_filled(left + pad, bottom + pad, width - 2 * pad, height - 2 * pad, (r, g, b, alpha))
            arcade.draw_text(kinds.title_for(tile.type), left + 2 * pad, bottom + height / 2 - 6, TEXT_COLOR, 12)

        if session.active:
            self._render_drop_zones(arcade, ctx)

    def _render_drop_zones(self, arcade, ctx: RenderContext) -> None:
        span = span_of(ctx.config, ctx.dragging_size)
        hover = ctx.session.hover_cell
        for zone in ctx.drop_zones:
            left, bottom, width, height = ctx.geometry.cell_rect(zone.x, zone.y, span.col_span, span.row_span)
            color = DROP_ZONE_HOVER_COLOR if zone == hover else DROP_ZONE_COLOR
            arcade.draw_lbwh_rectangle_filled(left + 2, bottom + 2, width - 4, height - 4, color)
