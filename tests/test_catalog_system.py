from tileboard.components.grid_config import GridConfig
from tileboard.constants import KEY_DOWN, KEY_ENTER, KEY_UP
from tileboard.events.bus import EVENT_CATALOG_SELECTION_CHANGED, EVENT_CATALOG_TOGGLED, EVENT_KEY_PRESS
from tileboard.systems.catalog_system import CatalogSystem

from tests.helpers import make_board, positions


def test_toggle_adds_then_removes_type():
    board = make_board(record=(EVENT_CATALOG_TOGGLED,))
    catalog = CatalogSystem(board.world, board.bus, board.store)

    first = catalog.toggle("time_prague")
    second = catalog.toggle("uranium")
    assert first.position.as_tuple() == (0, 0)
    assert second.size == "large"
    assert second.position.as_tuple() == (2, 0)
    assert catalog.is_active("time_prague")

    assert catalog.toggle("time_prague") is None
    assert not catalog.is_active("time_prague")
    assert positions(board.store) == {second.id: (0, 0)}
    assert [p["active"] for p in board.payloads(EVENT_CATALOG_TOGGLED)] == [True, True, False]


def test_toggle_keeps_tiles_when_not_removable():
    board = make_board(GridConfig(removable=False))
    catalog = CatalogSystem(board.world, board.bus, board.store)
    catalog.toggle("typhoon")
    catalog.toggle("typhoon")
    assert board.store.is_tile_active("typhoon")


def test_entries_are_grouped_by_category():
    board = make_board()
    catalog = CatalogSystem(board.world, board.bus, board.store)
    entries = catalog.entries()
    assert entries[:5] == ["weather_helsinki", "weather_prague", "weather_taipei", "earthquake", "typhoon"]
    assert entries.index("time_helsinki") < entries.index("federal_funds_rate")
    assert len(entries) == 14


def test_keyboard_navigation_wraps_and_toggles():
    board = make_board(record=(EVENT_CATALOG_SELECTION_CHANGED,))
    catalog = CatalogSystem(board.world, board.bus, board.store)
    entries = catalog.entries()

    board.bus.emit(EVENT_KEY_PRESS, symbol=KEY_UP, modifiers=0)
    assert catalog.selected_type() == entries[-1]
    board.bus.emit(EVENT_KEY_PRESS, symbol=KEY_DOWN, modifiers=0)
    board.bus.emit(EVENT_KEY_PRESS, symbol=KEY_DOWN, modifiers=0)
    assert catalog.selected_type() == entries[1]
    assert board.payloads(EVENT_CATALOG_SELECTION_CHANGED)[-1] == {"index": 1, "tile_type": entries[1]}

    board.bus.emit(EVENT_KEY_PRESS, symbol=KEY_ENTER, modifiers=0)
    assert board.store.is_tile_active(entries[1])
    catalog.toggle_selected()
    assert not board.store.is_tile_active(entries[1])
