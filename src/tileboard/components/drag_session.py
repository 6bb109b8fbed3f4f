"""Transient state of the active drag gesture."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

from tileboard.components.tile import GridPosition


class DragKind(Enum):
    NONE = auto()
    MOVING_TILE = auto()
    INSERTING_FROM_CATALOG = auto()


@dataclass(slots=True)
class DragSession:
    """Singleton component describing the gesture in progress.

    ``origin`` and ``offset`` are pointer coordinates used for visual feedback only.
    ``drop_target`` keeps the last snapped target after a committed drop.
    """
    kind: DragKind = DragKind.NONE
    tile_id: Optional[str] = None
    catalog_type: Optional[str] = None
    origin: Optional[Tuple[float, float]] = None
    offset: Optional[Tuple[float, float]] = None
    hover_cell: Optional[GridPosition] = None
    drop_target: Optional[GridPosition] = None

    @property
    def active(self) -> bool:
        return self.kind is not DragKind.NONE

    def reset(self, *, drop_target: Optional[GridPosition] = None) -> None:
        self.kind = DragKind.NONE
        self.tile_id = None
        self.catalog_type = None
        self.origin = None
        self.offset = None
        self.hover_cell = None
        self.drop_target = drop_target
