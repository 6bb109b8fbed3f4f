from __future__ import annotations

import math
from typing import Iterator, List, Tuple

from tileboard.components.grid_config import GridConfig, TileSpan
from tileboard.components.tile import GridPosition
from tileboard.constants import FALLBACK_SIZE

Cell = Tuple[int, int]


def span_of(config: GridConfig, size: str | None) -> TileSpan:
    """Return the footprint for a size tag, falling back to the medium span."""

    if size is not None:
        span = config.tile_sizes.get(size)
        if span is not None:
            return span
    return config.tile_sizes[FALLBACK_SIZE]


def _effective_rows(config: GridConfig, rows: int | None) -> int:
    return config.rows if rows is None else max(int(rows), 1)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_to_grid(
    config: GridConfig,
    x: float,
    y: float,
    span: TileSpan,
    rows: int | None = None,
) -> GridPosition:
    """Clamp an origin so the whole footprint stays inside the grid."""

    max_x = max(config.columns - span.col_span, 0)
    max_y = max(_effective_rows(config, rows) - span.row_span, 0)
    cx = min(max(int(x), 0), max_x)
    cy = min(max(int(y), 0), max_y)
    return GridPosition(cx, cy)


def snap_to_cell_increment(
    config: GridConfig,
    x: float,
    y: float,
    span: TileSpan,
    rows: int | None = None,
) -> GridPosition:
    """Snap a raw coordinate to the nearest multiple of the span, then clamp.

    Drop targets are only offered on the lattice of the dragged tile's own span,
    so a 2x1 tile lands on even columns. Any real input is accepted.
    """

    sx = _round_half_up(float(x) / span.col_span) * span.col_span
    sy = _round_half_up(float(y) / span.row_span) * span.row_span
    return clamp_to_grid(config, sx, sy, span, rows)


def enumerate_candidate_origins(
    config: GridConfig,
    size: str | None,
    rows: int | None = None,
) -> Iterator[GridPosition]:
    """Yield every span-multiple origin that fits in bounds, row-major."""

    span = span_of(config, size)
    total_rows = _effective_rows(config, rows)
    for y in range(0, total_rows - span.row_span + 1, span.row_span):
        for x in range(0, config.columns - span.col_span + 1, span.col_span):
            yield GridPosition(x, y)


def footprint_cells(position: GridPosition, span: TileSpan) -> List[Cell]:
    return [
        (x, y)
        for y in range(position.y, position.y + span.row_span)
        for x in range(position.x, position.x + span.col_span)
    ]


def footprints_overlap(
    a_pos: GridPosition,
    a_span: TileSpan,
    b_pos: GridPosition,
    b_span: TileSpan,
) -> bool:
    return (
        a_pos.x < b_pos.x + b_span.col_span
        and b_pos.x < a_pos.x + a_span.col_span
        and a_pos.y < b_pos.y + b_span.row_span
        and b_pos.y < a_pos.y + a_span.row_span
    )


def fits_in_bounds(
    config: GridConfig,
    position: GridPosition,
    span: TileSpan,
    rows: int | None = None,
) -> bool:
    total_rows = _effective_rows(config, rows)
    return (
        position.x >= 0
        and position.y >= 0
        and position.x + span.col_span <= config.columns
        and position.y + span.row_span <= total_rows
    )
