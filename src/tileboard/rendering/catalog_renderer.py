from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from tileboard.constants import (
    CATALOG_ACTIVE_COLOR,
    CATALOG_BG_COLOR,
    CATALOG_PANEL_WIDTH,
    CATALOG_SELECTED_OUTLINE,
    TEXT_COLOR,
)
from tileboard.ui.layout import catalog_item_rect

if TYPE_CHECKING:
    from tileboard.components.tile_kinds import TileKinds
    from tileboard.rendering.context import RenderContext


class CatalogRenderer:
    """Draws the sidebar listing every tile type, highlighting the active ones."""

    def __init__(self) -> None:
        self.layout: List[Dict[str, Any]] = []

    def render(self, arcade, ctx: RenderContext, kinds: TileKinds, selected_index: int | None, headless: bool) -> None:
        active_types = {tile.type for tile in ctx.tiles}
        self.layout = []
        for index, type_name in enumerate(kinds.ordered_types()):
            left, bottom, width, height = catalog_item_rect(index, ctx.window_height)
            self.layout.append({
                "index": index,
                "type_name": type_name,
                "active": type_name in active_types,
                "x": left,
                "y": bottom,
                "width": width,
                "height": height,
            })
        if headless:
            return
        arcade.draw_lbwh_rectangle_filled(0, 0, CATALOG_PANEL_WIDTH, ctx.window_height, CATALOG_BG_COLOR)
        for entry in self.layout:
            left, bottom, width, height = entry["x"], entry["y"], entry["width"], entry["height"]
            if entry["active"]:
                arcade.draw_lbwh_rectangle_filled(left, bottom, width, height, CATALOG_ACTIVE_COLOR)
            if entry["index"] == selected_index:
                arcade.draw_lbwh_rectangle_outline(left, bottom, width, height, CATALOG_SELECTED_OUTLINE, 2)
            arcade.draw_text(kinds.title_for(entry["type_name"]), left + 8, bottom + height / 2 - 6, TEXT_COLOR, 12)

    def hit_test(self, x: float, y: float):
        for entry in self.layout:
            if entry["x"] <= x <= entry["x"] + entry["width"] and entry["y"] <= y <= entry["y"] + entry["height"]:
                return entry
        return None
