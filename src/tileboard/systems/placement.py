"""First-fit, row-major packing of tiles onto the grid."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from tileboard.components.grid_config import GridConfig, TileSpan
from tileboard.components.tile import GridPosition, Tile
from tileboard.utils.grid_math import fits_in_bounds, footprints_overlap, span_of

Occupancy = List[List[bool]]


@dataclass(frozen=True, slots=True)
class CompactionResult:
    tiles: Tuple[Tile, ...]
    dropped: Tuple[Tile, ...]
    rows: int


def _empty_grid(rows: int, columns: int) -> Occupancy:
    return [[False for _ in range(columns)] for _ in range(rows)]


def _can_place(grid: Occupancy, x: int, y: int, span: TileSpan) -> bool:
    for row in range(y, y + span.row_span):
        cells = grid[row]
        for col in range(x, x + span.col_span):
            if cells[col]:
                return False
    return True


def _mark(grid: Occupancy, position: GridPosition, span: TileSpan) -> None:
    for row in range(max(position.y, 0), min(position.y + span.row_span, len(grid))):
        cells = grid[row]
        for col in range(max(position.x, 0), min(position.x + span.col_span, len(cells))):
            cells[col] = True


def _first_fit(grid: Occupancy, columns: int, span: TileSpan) -> Optional[GridPosition]:
    rows = len(grid)
    for y in range(0, rows - span.row_span + 1):
        for x in range(0, columns - span.col_span + 1):
            if _can_place(grid, x, y, span):
                return GridPosition(x, y)
    return None


def rearrange_tiles(
    tiles: Iterable[Tile],
    config: GridConfig,
    rows: int | None = None,
) -> CompactionResult:
    """Repack tiles into a gap-free layout ordered by ``created_at``.

    Tiles keep every field except ``position``. With ``dynamic_extensions`` the
    grid grows one row at a time so nothing is dropped; otherwise tiles that do
    not fit are returned in ``dropped``. The returned row count never falls
    below the configured rows.
    """

    # sorted() is stable, so equal timestamps keep their input order.
    ordered = sorted(tiles, key=lambda tile: tile.created_at)
    total_rows = config.rows if rows is None else max(int(rows), config.rows)
    grid = _empty_grid(total_rows, config.columns)
    placed: List[Tile] = []
    dropped: List[Tile] = []
    for tile in ordered:
        span = span_of(config, tile.size)
        position = _first_fit(grid, config.columns, span)
        while position is None and config.dynamic_extensions:
            grid.append([False] * config.columns)
            position = _first_fit(grid, config.columns, span)
        if position is None:
            dropped.append(tile)
            continue
        _mark(grid, position, span)
        placed.append(tile if tile.position == position else tile.with_position(position.x, position.y))
    used_rows = total_rows
    if config.dynamic_extensions:
        lowest = 0
        for tile in placed:
            lowest = max(lowest, tile.position.y + span_of(config, tile.size).row_span)
        used_rows = max(config.rows, lowest)
    return CompactionResult(tiles=tuple(placed), dropped=tuple(dropped), rows=used_rows)


def find_next_free_position(
    tiles: Iterable[Tile],
    config: GridConfig,
    size: str | None,
    rows: int | None = None,
) -> Optional[GridPosition]:
    """Return the first row-major origin where a tile of ``size`` fits among ``tiles``."""

    total_rows = config.rows if rows is None else max(int(rows), 1)
    grid = _empty_grid(total_rows, config.columns)
    for tile in tiles:
        _mark(grid, tile.position, span_of(config, tile.size))
    return _first_fit(grid, config.columns, span_of(config, size))


def find_collisions(
    tiles: Iterable[Tile],
    config: GridConfig,
    position: GridPosition,
    size: str | None,
    ignore_id: str | None = None,
) -> List[Tile]:
    """Tiles whose footprint intersects a candidate placement."""

    span = span_of(config, size)
    hits: List[Tile] = []
    for tile in tiles:
        if ignore_id is not None and tile.id == ignore_id:
            continue
        if footprints_overlap(position, span, tile.position, span_of(config, tile.size)):
            hits.append(tile)
    return hits


def validate_layout(
    tiles: Sequence[Tile],
    config: GridConfig,
    rows: int | None = None,
) -> List[str]:
    """Describe every invariant violation in a tile list; empty when the layout is valid."""

    problems: List[str] = []
    seen: set[str] = set()
    for tile in tiles:
        if tile.id in seen:
            problems.append(f"duplicate tile id {tile.id!r}")
        seen.add(tile.id)
        if not fits_in_bounds(config, tile.position, span_of(config, tile.size), rows):
            problems.append(f"tile {tile.id!r} at {tile.position.as_tuple()} is out of bounds")
    for index, first in enumerate(tiles):
        first_span = span_of(config, first.size)
        for second in tiles[index + 1:]:
            if footprints_overlap(first.position, first_span, second.position, span_of(config, second.size)):
                problems.append(f"tiles {first.id!r} and {second.id!r} overlap")
    return problems
