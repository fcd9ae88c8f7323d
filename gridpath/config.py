# Screen settings
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
FPS = 60
# Height in pixels reserved below the grid for the statistics panel
STATUS_PANEL_HEIGHT = 110
# Font size of the statistics panel
STATUS_FONT_SIZE = 20

# Grid settings
# Default grid dimensions (rows x cols)
GRID_ROWS = 10
GRID_COLS = 10
# Probability that a generated cell is an obstacle
OBSTACLE_CHANCE = 0.3
# Gap in pixels between drawn cells
CELL_SPACING = 2
# Optional grid file: JSON with "obstacles", "start" and "end" (relative to the package)
GRID_FILE = 'grids/default.json'

# Search settings
# Allow the four diagonal moves (also switches the metric to Euclidean)
ALLOW_DIAGONAL = False
# Animate the search one expansion at a time instead of solving instantly
SHOW_SEARCH_PROCESS = True
# Seconds between two visualized expansions
VISUALIZATION_DELAY = 0.1
# Bounds and increment for adjusting the delay at runtime
MIN_VISUALIZATION_DELAY = 0.01
MAX_VISUALIZATION_DELAY = 1.0
VISUALIZATION_DELAY_STEP = 0.05

# Colors
BACKGROUND_COLOR = (40, 40, 40)
WALKABLE_COLOR = (255, 255, 255)
OBSTACLE_COLOR = (0, 0, 0)
START_COLOR = (0, 200, 0)
END_COLOR = (220, 0, 0)
PATH_COLOR = (255, 235, 4)
# Frontier cells of the running search
OPEN_SET_COLOR = (0, 255, 255)
# Finalized cells of the running search
CLOSED_SET_COLOR = (255, 0, 255)
TEXT_COLOR = (230, 230, 230)
