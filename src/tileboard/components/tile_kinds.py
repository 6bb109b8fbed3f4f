from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from tileboard.constants import FALLBACK_SIZE


@dataclass(frozen=True, slots=True)
class TileKind:
    """Catalog entry for one tile type."""
    type_name: str
    title: str
    category: str
    color: Tuple[int, int, int]
    default_size: str = FALLBACK_SIZE


@dataclass(slots=True)
class TileKindRegistry:
    """Empty tag component marking the single entity that stores the tile catalog.

    The same entity also carries a TileKinds component with the definitions.
    """
    pass


@dataclass(slots=True)
class TileKinds:
    """Canonical tile type definitions stored on a single entity.

    The layout code never branches on a tile's type; this registry is consulted
    only at the catalog and rendering boundaries.
    """
    kinds: Dict[str, TileKind] = field(default_factory=dict)
    categories: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.categories:
            seen: List[str] = []
            for kind in self.kinds.values():
                if kind.category not in seen:
                    seen.append(kind.category)
            self.categories = seen

    def get(self, type_name: str) -> Optional[TileKind]:
        return self.kinds.get(type_name)

    def default_size_for(self, type_name: Optional[str]) -> str:
        kind = self.kinds.get(type_name) if type_name else None
        return kind.default_size if kind is not None else FALLBACK_SIZE

    def color_for(self, type_name: str) -> Tuple[int, int, int]:
        kind = self.kinds.get(type_name)
        return kind.color if kind is not None else (110, 110, 120)

    def title_for(self, type_name: str) -> str:
        kind = self.kinds.get(type_name)
        return kind.title if kind is not None else type_name

    def ordered_types(self) -> List[str]:
        """Types grouped by category order, preserving definition order inside a category."""
        ordered: List[str] = []
        for category in self.categories:
            ordered.extend(name for name, kind in self.kinds.items() if kind.category == category)
        ordered.extend(name for name in self.kinds if name not in ordered)
        return ordered

    def register(self, kind: TileKind) -> None:
        self.kinds[kind.type_name] = kind
        if kind.category not in self.categories:
            self.categories.append(kind.category)

    def register_many(self, kinds: Iterable[TileKind]) -> None:
        for kind in kinds:
            self.register(kind)


DEFAULT_TILE_KINDS: Tuple[TileKind, ...] = (
    TileKind("weather_helsinki", "Helsinki Weather", "Weather", (70, 130, 180)),
    TileKind("weather_prague", "Prague Weather", "Weather", (70, 130, 180)),
    TileKind("weather_taipei", "Taipei Weather", "Weather", (70, 130, 180)),
    TileKind("earthquake", "Earthquakes", "Weather", (150, 90, 60)),
    TileKind("typhoon", "Typhoon Tracker", "Weather", (60, 150, 160)),
    TileKind("time_helsinki", "Helsinki Time", "Time", (165, 139, 234)),
    TileKind("time_prague", "Prague Time", "Time", (165, 139, 234)),
    TileKind("time_taipei", "Taipei Time", "Time", (165, 139, 234)),
    TileKind("federal_funds_rate", "Federal Funds Rate", "Macroeconomics", (179, 18, 42)),
    TileKind("euribor_rate", "Euribor Rate", "Macroeconomics", (123, 62, 133)),
    TileKind("cryptocurrency", "Cryptocurrency", "Finance", (216, 155, 38)),
    TileKind("precious-metals", "Precious Metals", "Finance", (232, 215, 161)),
    TileKind("gdx_etf", "GDX ETF", "Finance", (63, 127, 59)),
    TileKind("uranium", "Uranium", "Finance", (64, 196, 112), default_size="large"),
)
