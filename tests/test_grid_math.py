import random

import pytest

from tileboard.components.grid_config import CollisionPolicy, GridConfig, TileSpan
from tileboard.components.tile import GridPosition
from tileboard.utils.grid_math import (
    clamp_to_grid,
    enumerate_candidate_origins,
    fits_in_bounds,
    footprint_cells,
    footprints_overlap,
    snap_to_cell_increment,
    span_of,
)


def test_span_of_known_and_unknown_sizes():
    config = GridConfig()
    assert span_of(config, "large") == TileSpan(4, 1)
    assert span_of(config, "small") == TileSpan(2, 1)
    # Unknown or missing tags fall back to the medium footprint.
    assert span_of(config, "gigantic") == TileSpan(2, 1)
    assert span_of(config, None) == TileSpan(2, 1)


def test_clamp_keeps_footprint_inside():
    config = GridConfig()
    large = span_of(config, "large")
    assert clamp_to_grid(config, 7, 3, large) == GridPosition(4, 3)
    assert clamp_to_grid(config, -5, -1, large) == GridPosition(0, 0)
    assert clamp_to_grid(config, 2, 40, large) == GridPosition(2, 11)


def test_snap_rounds_to_span_multiples():
    config = GridConfig()
    medium = span_of(config, "medium")
    assert snap_to_cell_increment(config, 2.9, 0, medium) == GridPosition(2, 0)
    assert snap_to_cell_increment(config, 3.0, 0, medium) == GridPosition(4, 0)
    assert snap_to_cell_increment(config, 0.4, 5.6, medium) == GridPosition(0, 6)
    large = span_of(config, "large")
    assert snap_to_cell_increment(config, 6.5, 0, large) == GridPosition(4, 0)


def test_snap_is_always_in_bounds():
    config = GridConfig()
    rng = random.Random(1234)
    for _ in range(500):
        size = rng.choice(config.size_names)
        span = span_of(config, size)
        x = rng.uniform(-50, 50)
        y = rng.uniform(-50, 50)
        snapped = snap_to_cell_increment(config, x, y, span)
        assert fits_in_bounds(config, snapped, span)


def test_candidate_origins_form_span_lattice():
    config = GridConfig()
    origins = list(enumerate_candidate_origins(config, "large"))
    assert origins[:3] == [GridPosition(0, 0), GridPosition(4, 0), GridPosition(0, 1)]
    assert len(origins) == 2 * config.rows
    assert all(o.x % 4 == 0 for o in origins)
    medium = list(enumerate_candidate_origins(config, "medium", rows=2))
    assert [o.as_tuple() for o in medium] == [(0, 0), (2, 0), (4, 0), (6, 0), (0, 1), (2, 1), (4, 1), (6, 1)]


def test_footprints_and_overlap():
    span = TileSpan(2, 1)
    assert footprint_cells(GridPosition(2, 3), span) == [(2, 3), (3, 3)]
    assert footprints_overlap(GridPosition(0, 0), span, GridPosition(1, 0), span)
    assert not footprints_overlap(GridPosition(0, 0), span, GridPosition(2, 0), span)
    assert not footprints_overlap(GridPosition(0, 0), span, GridPosition(0, 1), span)


def test_grid_config_validation():
    with pytest.raises(ValueError):
        GridConfig(columns=0)
    with pytest.raises(ValueError):
        GridConfig(tile_sizes={"small": (1, 1)})
    with pytest.raises(ValueError):
        GridConfig(columns=4, tile_sizes={"medium": (2, 1), "large": (6, 1)})


def test_grid_config_from_mapping_accepts_camel_case():
    config = GridConfig.from_mapping({
        "columns": 6,
        "rows": 4,
        "tileSizes": {"medium": {"colSpan": 2, "rowSpan": 1}, "large": [3, 2]},
        "dynamicExtensions": True,
        "allowDragOutOfBounds": True,
        "collisionPolicy": "compact",
        "somethingElse": 1,
    })
    assert config.columns == 6
    assert config.tile_sizes["large"] == TileSpan(3, 2)
    assert config.dynamic_extensions
    assert config.allow_drag_out_of_bounds
    assert config.collision_policy is CollisionPolicy.COMPACT
