from typing import Any

from tileboard.components.grid_config import GridConfig
from tileboard.constants import KEY_DELETE, KEY_ESCAPE
from tileboard.events.bus import (
    EVENT_KEY_PRESS,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
)
from tileboard.systems.catalog_system import CatalogSystem
from tileboard.systems.drag_system import DragState
from tileboard.systems.input import InputSystem
from tileboard.ui.layout import catalog_item_rect, compute_board_geometry

from tests.helpers import make_board, positions


class DummyWindow:
    def __init__(self, width=1280, height=800):
        self.width = width
        self.height = height
        self.render_system: Any | None = None


def _setup(config=None):
    board = make_board(config)
    window = DummyWindow()
    catalog = CatalogSystem(board.world, board.bus, board.store)
    input_system = InputSystem(board.bus, window, board.store, board.drag, catalog)
    return board, window, catalog, input_system


def _cell_center(board, window, col, row):
    geometry = compute_board_geometry(window.width, window.height, board.store.config.columns, board.store.rows)
    return (
        geometry.start_x + (col + 0.5) * geometry.cell_size,
        geometry.top_y - (row + 0.5) * geometry.cell_size,
    )


def _catalog_center(window, index):
    left, bottom, width, height = catalog_item_rect(index, window.height)
    return left + width / 2, bottom + height / 2


def _drag(bus, start, end, button=1):
    bus.emit(EVENT_MOUSE_PRESS, x=start[0], y=start[1], button=button, modifiers=0)
    bus.emit(EVENT_MOUSE_DRAG, x=end[0], y=end[1], dx=end[0] - start[0], dy=end[1] - start[1], buttons=button)
    bus.emit(EVENT_MOUSE_RELEASE, x=end[0], y=end[1], button=button)


def test_pointer_drag_moves_tile_to_drop_zone_under_cursor():
    board, window, _, input_system = _setup()
    a = board.store.add_tile_of_type("a")
    start = _cell_center(board, window, 1, 0)
    # Any cell of the zone counts; column 5 belongs to the zone starting at 4.
    end = _cell_center(board, window, 5, 3)
    assert input_system.tile_at_point(*start) == a.id

    _drag(board.bus, start, end)

    assert positions(board.store) == {a.id: (4, 3)}
    assert board.drag.state is DragState.IDLE


def test_small_pointer_motion_is_a_click_not_a_drag():
    board, window, _, _ = _setup()
    a = board.store.add_tile_of_type("a")
    start = _cell_center(board, window, 0, 0)
    board.bus.emit(EVENT_MOUSE_PRESS, x=start[0], y=start[1], button=1, modifiers=0)
    board.bus.emit(EVENT_MOUSE_DRAG, x=start[0] + 1, y=start[1], dx=1, dy=0, buttons=1)
    assert not board.drag.is_dragging
    board.bus.emit(EVENT_MOUSE_RELEASE, x=start[0] + 1, y=start[1], button=1)
    assert positions(board.store) == {a.id: (0, 0)}


def test_drag_from_catalog_inserts_tile():
    board, window, catalog, _ = _setup()
    index = catalog.entries().index("uranium")
    _drag(board.bus, _catalog_center(window, index), _cell_center(board, window, 6, 2))
    (placed,) = board.store.tiles
    assert placed.type == "uranium"
    assert placed.position.as_tuple() == (4, 2)


def test_catalog_drag_released_off_board_adds_nothing():
    board, window, catalog, _ = _setup()
    start = _catalog_center(window, 0)
    _drag(board.bus, start, (start[0] + 40, start[1]))
    assert board.store.tiles == ()


def test_catalog_click_toggles_type():
    board, window, catalog, _ = _setup()
    x, y = _catalog_center(window, 2)
    board.bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=1, modifiers=0)
    board.bus.emit(EVENT_MOUSE_RELEASE, x=x, y=y, button=1)
    assert board.store.is_tile_active(catalog.entries()[2])


def test_hover_tracks_drop_zone_during_drag():
    board, window, _, _ = _setup()
    a = board.store.add_tile_of_type("a")
    start = _cell_center(board, window, 0, 0)
    board.bus.emit(EVENT_MOUSE_PRESS, x=start[0], y=start[1], button=1, modifiers=0)
    end = _cell_center(board, window, 3, 2)
    board.bus.emit(EVENT_MOUSE_DRAG, x=end[0], y=end[1], dx=0, dy=0, buttons=1)
    assert board.drag.session.hover_cell.as_tuple() == (2, 2)
    assert board.drag.session.offset == (end[0] - start[0], end[1] - start[1])


def test_escape_cancels_drag_without_moving():
    board, window, _, _ = _setup()
    a = board.store.add_tile_of_type("a")
    start = _cell_center(board, window, 0, 0)
    end = _cell_center(board, window, 6, 6)
    board.bus.emit(EVENT_MOUSE_PRESS, x=start[0], y=start[1], button=1, modifiers=0)
    board.bus.emit(EVENT_MOUSE_DRAG, x=end[0], y=end[1], dx=0, dy=0, buttons=1)
    board.bus.emit(EVENT_KEY_PRESS, symbol=KEY_ESCAPE, modifiers=0)
    board.bus.emit(EVENT_MOUSE_RELEASE, x=end[0], y=end[1], button=1)
    assert positions(board.store) == {a.id: (0, 0)}


def test_drag_off_board_removes_tile_when_allowed():
    board, window, _, _ = _setup(GridConfig(allow_drag_out_of_bounds=True))
    a = board.store.add_tile_of_type("a")
    b = board.store.add_tile_of_type("b")
    _drag(board.bus, _cell_center(board, window, 0, 0), (window.width - 2, 2))
    assert positions(board.store) == {b.id: (0, 0)}


def test_right_click_and_delete_remove_tiles():
    board, window, _, input_system = _setup()
    a = board.store.add_tile_of_type("a")
    b = board.store.add_tile_of_type("b")
    x, y = _cell_center(board, window, 2, 0)
    board.bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=4, modifiers=0)
    assert positions(board.store) == {a.id: (0, 0)}

    x, y = _cell_center(board, window, 0, 0)
    board.bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=1, modifiers=0)
    board.bus.emit(EVENT_MOUSE_RELEASE, x=x, y=y, button=1)
    assert input_system.focused_tile_id == a.id
    board.bus.emit(EVENT_KEY_PRESS, symbol=KEY_DELETE, modifiers=0)
    assert board.store.tiles == ()


def test_press_without_coordinates_is_ignored():
    board, _, _, _ = _setup()
    board.bus.emit(EVENT_MOUSE_PRESS, button=1)
    board.bus.emit(EVENT_MOUSE_RELEASE, button=1)
    assert not board.drag.is_dragging
