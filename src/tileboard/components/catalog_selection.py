from dataclasses import dataclass


@dataclass(slots=True)
class CatalogSelection:
    """Keyboard cursor over the catalog's ordered tile types."""
    index: int = 0
