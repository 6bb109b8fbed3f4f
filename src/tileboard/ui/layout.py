from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from tileboard.constants import (
    BOARD_GAP,
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    CATALOG_ITEM_GAP,
    CATALOG_ITEM_HEIGHT,
    CATALOG_PANEL_WIDTH,
    MIN_CELL_SIZE,
    TOP_MARGIN,
)


@dataclass(frozen=True, slots=True)
class BoardGeometry:
    """Pixel placement of the grid. Row 0 is the top row; arcade's y axis points up."""
    cell_size: int
    start_x: float
    top_y: float
    columns: int
    rows: int

    @property
    def width(self) -> float:
        return self.columns * self.cell_size

    @property
    def height(self) -> float:
        return self.rows * self.cell_size

    @property
    def bottom_y(self) -> float:
        return self.top_y - self.height

    def cell_rect(self, x: int, y: int, col_span: int = 1, row_span: int = 1) -> Tuple[float, float, float, float]:
        """Return (left, bottom, width, height) for a footprint anchored at cell (x, y)."""
        left = self.start_x + x * self.cell_size
        bottom = self.top_y - (y + row_span) * self.cell_size
        return left, bottom, col_span * self.cell_size, row_span * self.cell_size


def compute_board_geometry(window_width: int, window_height: int, columns: int, rows: int) -> BoardGeometry:
    """Return the board geometry shared by rendering and input.

    The board fills the area right of the catalog panel, capped by percentage of
    that area, and is anchored to the top margin so extra rows grow downwards.
    """
    area_left = CATALOG_PANEL_WIDTH + BOARD_GAP
    area_w = max(window_width - area_left - BOARD_GAP, 0)
    area_h = max(window_height - TOP_MARGIN - BOTTOM_MARGIN, 0)
    cell_by_w = area_w * BOARD_MAX_WIDTH_PCT / max(columns, 1)
    cell_by_h = area_h * BOARD_MAX_HEIGHT_PCT / max(rows, 1)
    cell_size = int(min(cell_by_w, cell_by_h))
    if cell_size < MIN_CELL_SIZE:
        cell_size = MIN_CELL_SIZE
    start_x = area_left + (area_w - columns * cell_size) / 2
    top_y = window_height - TOP_MARGIN
    return BoardGeometry(cell_size, start_x, top_y, columns, rows)


def point_to_cell(geometry: BoardGeometry, x: float, y: float) -> Optional[Tuple[int, int]]:
    """Map a window point to its (column, row) cell, or None outside the board."""
    if x < geometry.start_x or x >= geometry.start_x + geometry.width:
        return None
    if y > geometry.top_y or y <= geometry.bottom_y:
        return None
    col = int((x - geometry.start_x) // geometry.cell_size)
    row = int((geometry.top_y - y) // geometry.cell_size)
    if 0 <= col < geometry.columns and 0 <= row < geometry.rows:
        return col, row
    return None


def catalog_item_rect(index: int, window_height: int) -> Tuple[float, float, float, float]:
    """Return (left, bottom, width, height) of the catalog entry at ``index``."""
    top = window_height - TOP_MARGIN - index * (CATALOG_ITEM_HEIGHT + CATALOG_ITEM_GAP)
    return BOARD_GAP / 2, top - CATALOG_ITEM_HEIGHT, CATALOG_PANEL_WIDTH - BOARD_GAP / 2, CATALOG_ITEM_HEIGHT


def catalog_index_at(x: float, y: float, window_height: int, count: int) -> Optional[int]:
    """Return the catalog entry index under a point, or None."""
    for index in range(count):
        left, bottom, width, height = catalog_item_rect(index, window_height)
        if left <= x <= left + width and bottom <= y <= bottom + height:
            return index
    return None
