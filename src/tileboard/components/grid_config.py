"""Immutable grid configuration shared by every board system."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping

from tileboard.constants import (
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
    DEFAULT_TILE_SIZES,
    FALLBACK_SIZE,
)


class CollisionPolicy(Enum):
    """What happens when a drop lands on cells already held by another tile."""
    REJECT = "reject"
    COMPACT = "compact"


@dataclass(frozen=True, slots=True)
class TileSpan:
    """Cell footprint of a tile size."""
    col_span: int
    row_span: int


@dataclass(frozen=True)
class GridConfig:
    """Grid extent, tile size spans and optional behaviour flags.

    Fields:
      columns / rows: grid extent in cells.
      tile_sizes: size tag -> TileSpan; must contain the fallback size ("medium").
      movement_enabled: tile drags are accepted.
      removable: tiles may be removed through drag-out and the catalog toggle.
      dynamic_extensions: compaction grows the row count instead of dropping tiles.
      allow_drag_out_of_bounds: releasing a tile outside the grid removes it.
      collision_policy: how drops onto occupied cells are resolved.
      allow_duplicate_types: more than one tile of the same type may be placed.
    """
    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    tile_sizes: Mapping[str, TileSpan] = field(
        default_factory=lambda: {name: TileSpan(*span) for name, span in DEFAULT_TILE_SIZES.items()}
    )
    movement_enabled: bool = True
    removable: bool = True
    dynamic_extensions: bool = False
    allow_drag_out_of_bounds: bool = False
    collision_policy: CollisionPolicy = CollisionPolicy.REJECT
    allow_duplicate_types: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.columns, int) or self.columns <= 0:
            raise ValueError(f"columns must be a positive integer, got {self.columns!r}")
        if not isinstance(self.rows, int) or self.rows <= 0:
            raise ValueError(f"rows must be a positive integer, got {self.rows!r}")
        if FALLBACK_SIZE not in self.tile_sizes:
            raise ValueError(f"tile_sizes must define the '{FALLBACK_SIZE}' size")
        normalized: Dict[str, TileSpan] = {}
        for name, span in self.tile_sizes.items():
            if not isinstance(span, TileSpan):
                span = TileSpan(*span)
            if not 1 <= span.col_span <= self.columns:
                raise ValueError(f"col_span for '{name}' must be within 1..{self.columns}")
            if not 1 <= span.row_span <= self.rows:
                raise ValueError(f"row_span for '{name}' must be within 1..{self.rows}")
            normalized[name] = span
        # Frozen dataclass: swap in the normalised mapping once.
        object.__setattr__(self, "tile_sizes", normalized)
        if not isinstance(self.collision_policy, CollisionPolicy):
            object.__setattr__(self, "collision_policy", CollisionPolicy(self.collision_policy))

    @property
    def size_names(self) -> list[str]:
        return list(self.tile_sizes.keys())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GridConfig":
        """Build a config from a plain mapping using snake_case or camelCase keys."""
        aliases = {
            "columns": "columns",
            "rows": "rows",
            "tile_sizes": "tile_sizes",
            "tileSizes": "tile_sizes",
            "movement_enabled": "movement_enabled",
            "movementEnabled": "movement_enabled",
            "removable": "removable",
            "dynamic_extensions": "dynamic_extensions",
            "dynamicExtensions": "dynamic_extensions",
            "allow_drag_out_of_bounds": "allow_drag_out_of_bounds",
            "allowDragOutOfBounds": "allow_drag_out_of_bounds",
            "collision_policy": "collision_policy",
            "collisionPolicy": "collision_policy",
            "allow_duplicate_types": "allow_duplicate_types",
            "allowDuplicateTypes": "allow_duplicate_types",
        }
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            target = aliases.get(key)
            if target is None:
                continue
            if target == "tile_sizes":
                value = {name: _coerce_span(span) for name, span in dict(value).items()}
            kwargs[target] = value
        return cls(**kwargs)


def _coerce_span(raw: Any) -> TileSpan:
    if isinstance(raw, TileSpan):
        return raw
    if isinstance(raw, Mapping):
        col = raw.get("col_span", raw.get("colSpan"))
        row = raw.get("row_span", raw.get("rowSpan"))
        return TileSpan(int(col), int(row))
    col, row = raw
    return TileSpan(int(col), int(row))


DEFAULT_GRID_CONFIG = GridConfig()
