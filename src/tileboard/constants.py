DEFAULT_COLUMNS = 8
DEFAULT_ROWS = 12

# Size tag -> (col_span, row_span). Unknown tags fall back to FALLBACK_SIZE.
DEFAULT_TILE_SIZES = {
    "small": (2, 1),
    "medium": (2, 1),
    "large": (4, 1),
}
FALLBACK_SIZE = "medium"

# Persistence
STORAGE_KEY = "dashboard-tiles"
STORAGE_FILENAME = "dashboard_storage.json"
STORAGE_PATH_ENV = "TILEBOARD_STORAGE_PATH"

# Window layout (pixels). The board sits right of the catalog panel.
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800
WINDOW_TITLE = "Tileboard"
BOTTOM_MARGIN = 20
TOP_MARGIN = 20
CATALOG_PANEL_WIDTH = 240
CATALOG_ITEM_HEIGHT = 36
CATALOG_ITEM_GAP = 6
BOARD_GAP = 24
MIN_CELL_SIZE = 24
TILE_PADDING = 6

# Board maximum footprint relative to the space right of the catalog panel.
BOARD_MAX_WIDTH_PCT = 0.95
BOARD_MAX_HEIGHT_PCT = 0.95

# Pointer travel (pixels) before a press on a tile turns into a drag.
DRAG_START_THRESHOLD = 4.0

# Colours
BACKGROUND_COLOR = (18, 22, 30)
GRID_LINE_COLOR = (48, 56, 70)
DROP_ZONE_COLOR = (250, 204, 21, 40)
DROP_ZONE_HOVER_COLOR = (250, 204, 21, 140)
DRAG_GHOST_ALPHA = 150
CATALOG_BG_COLOR = (28, 34, 46)
CATALOG_ACTIVE_COLOR = (63, 127, 59)
CATALOG_SELECTED_OUTLINE = (250, 204, 21)
TEXT_COLOR = (235, 235, 235)

# Keyboard symbols (mirror arcade.key values without importing arcade here).
KEY_ESCAPE = 65307
KEY_ENTER = 65293
KEY_UP = 65362
KEY_DOWN = 65364
KEY_DELETE = 65535
