import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping

from tileboard.constants import FALLBACK_SIZE


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Top-left cell of a tile footprint."""
    x: int
    y: int

    def as_tuple(self) -> tuple[int, int]:
        return self.x, self.y


@dataclass(frozen=True)
class Tile:
    """A placed dashboard widget.

    ``type`` selects the content widget and is opaque to the layout code.
    ``created_at`` is the only ordering key used by compaction. ``config`` belongs
    to the content widget and is carried through unchanged.
    Tiles are immutable: use ``with_changes`` to derive an updated copy.
    """
    id: str
    type: str
    position: GridPosition = GridPosition(0, 0)
    size: str = FALLBACK_SIZE
    created_at: float = 0.0
    config: Mapping[str, Any] = field(default_factory=dict)

    def with_changes(self, **changes: Any) -> "Tile":
        return replace(self, **changes)

    def with_position(self, x: int, y: int) -> "Tile":
        return replace(self, position=GridPosition(x, y))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "position": {"x": self.position.x, "y": self.position.y},
            "size": self.size,
            "config": dict(self.config),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Tile":
        """Parse the persisted shape. Raises ValueError/TypeError/KeyError on bad input."""
        tile_id = data["id"]
        tile_type = data["type"]
        if not isinstance(tile_id, str) or not tile_id:
            raise ValueError("tile id must be a non-empty string")
        if not isinstance(tile_type, str) or not tile_type:
            raise ValueError("tile type must be a non-empty string")
        raw_position = data.get("position") or {"x": 0, "y": 0}
        if not isinstance(raw_position, Mapping):
            raise TypeError("position must be an object")
        x = raw_position.get("x", 0)
        y = raw_position.get("y", 0)
        if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, int) or not isinstance(y, int):
            raise TypeError("position coordinates must be integers")
        size = data.get("size", FALLBACK_SIZE)
        if not isinstance(size, str):
            size = FALLBACK_SIZE
        created_at = data.get("createdAt", data.get("created_at", 0.0))
        if created_at is None:
            created_at = 0.0
        created_at = float(created_at)
        if not math.isfinite(created_at):
            raise ValueError("createdAt must be a finite number")
        config = data.get("config") or {}
        if not isinstance(config, Mapping):
            raise TypeError("config must be an object")
        return cls(
            id=tile_id,
            type=tile_type,
            position=GridPosition(x, y),
            size=size,
            created_at=created_at,
            config=dict(config),
        )
