from dataclasses import dataclass
from typing import Tuple

from tileboard.components.tile import Tile


@dataclass(slots=True)
class BoardState:
    """Singleton component holding the authoritative tile list.

    Fields:
      tiles: current tiles; always replaced wholesale, never edited in place.
      rows: effective row count (grows past the configured rows only with dynamic extensions).
      version: bumped on every replacement so readers can detect changes cheaply.
    """
    tiles: Tuple[Tile, ...] = ()
    rows: int = 0
    version: int = 0
