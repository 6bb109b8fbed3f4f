"""Entry point for the tileboard dashboard.

Sets up the ECS world, event bus, systems, and Arcade window.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from arcade import Window, run

from tileboard.components.grid_config import GridConfig
from tileboard.constants import (
    BACKGROUND_COLOR,
    STORAGE_FILENAME,
    STORAGE_PATH_ENV,
    WINDOW_HEIGHT,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)
from tileboard.events.bus import (
    EVENT_KEY_PRESS,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_MOVE,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EVENT_TICK,
    EventBus,
)
from tileboard.systems.board_store import BoardStore
from tileboard.systems.catalog_system import CatalogSystem
from tileboard.systems.drag_system import DragSystem
from tileboard.systems.input import InputSystem
from tileboard.systems.persistence_system import PersistenceSystem
from tileboard.systems.render import RenderSystem
from tileboard.utils.storage import JsonFileStore
from tileboard.world import create_world

logger = logging.getLogger(__name__)


def default_storage_path() -> Path:
    override = os.environ.get(STORAGE_PATH_ENV)
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[2] / "data" / STORAGE_FILENAME


class TileboardWindow(Window):
    def __init__(self, config: GridConfig | None = None, storage_path: Path | None = None):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE, resizable=True)
        self.set_update_rate(1 / 60)
        self.background_color = BACKGROUND_COLOR
        self.event_bus = EventBus()
        self.config = config or GridConfig()
        self.world = create_world(self.config)

        # Board state and interaction
        self.store = BoardStore(self.world, self.event_bus, self.config)
        self.drag_system = DragSystem(self.world, self.event_bus, self.store)
        self.catalog_system = CatalogSystem(self.world, self.event_bus, self.store)

        # Interface systems
        self.render_system = RenderSystem(self.world, self.event_bus, self, self.store, self.drag_system)
        self.input_system = InputSystem(self.event_bus, self, self.store, self.drag_system, self.catalog_system)

        # Persistence loads the saved board on construction, so it comes last.
        path = storage_path or default_storage_path()
        logger.info("Using board storage at %s", path)
        self.persistence_system = PersistenceSystem(self.event_bus, self.store, JsonFileStore(path))

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button, modifiers=modifiers)

    def on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_DRAG, x=x, y=y, dx=dx, dy=dy, buttons=buttons)

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_RELEASE, x=x, y=y, button=button)

    def on_mouse_motion(self, x: float, y: float, dx: float, dy: float):
        self.event_bus.emit(EVENT_MOUSE_MOVE, x=x, y=y, dx=dx, dy=dy)

    def on_key_press(self, symbol: int, modifiers: int):
        self.event_bus.emit(EVENT_KEY_PRESS, symbol=symbol, modifiers=modifiers)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    TileboardWindow()
    run()


if __name__ == "__main__":
    main()
