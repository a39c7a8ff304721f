# slopedash/game/config.py
# --- Display ---
WIDTH = 1200                # default desktop viewport
HEIGHT = 800
MOBILE_WIDTH = 420
MOBILE_HEIGHT = 780
MOBILE_BREAKPOINT = 768     # width < breakpoint -> mobile constants
FPS = 60

# --- World ---
# Speeds are in px per frame (60 Hz), times in ms.
BASE_SCROLL_SPEED = 5.0
MAX_SCROLL_SPEED = 15.0
SCROLL_SCORE_DIVISOR = 80.0
SCORE_TICK_MS = 1000        # score grows once per second
SEED_DEFAULT = 12345

# --- Player ---
PLAYER_W = 48               # sprite size before scaling
PLAYER_H = 64
PLAYER_SCALE_MOBILE = 0.8
PLAYER_SCALE_DESKTOP = 1.5
PLAYER_Y_FRAC = 0.2         # player rides at 20% of the screen height
MOVE_DISTANCE = 55.0
MOVE_DELAY_MS = 90
MOVE_SMOOTHING = 0.35
TILT_ANGLE = 20.0
TILT_SPEED = 0.3
TILT_RELAX_FACTOR = 1.2
EDGE_MARGIN = 15.0
SWIPE_THRESHOLD = 50.0

# --- Obstacles ---
OBSTACLE_W = 48
OBSTACLE_H = 48
OBSTACLE_SCALE_MOBILE = 0.7
OBSTACLE_SCALE_DESKTOP = 1.2
HITBOX_FACTOR = 0.5         # collision box is half the drawn sprite
REAP_Y = -50.0
SKIER_CLAMP_MARGIN = 50.0
DIRECTION_CHANGE_MIN_MS = 500
DIRECTION_CHANGE_MAX_MS = 2000
HORIZONTAL_RESAMPLE = 3     # skiers resample horizontal speed in [-3, 3]
STATIC_SPRITES = ("rock", "tree")
MOVING_SPRITE = "skier"

# --- Spawning ---
CELL_SIZE = 50
HORIZONTAL_RADIUS = 1
LANE_MARGIN = 15.0
LANE_INSET = 10.0
ROW_START_OFFSET = 50
LOOKAHEAD_MOBILE = 800
LOOKAHEAD_DESKTOP = 1200
LANES_MOBILE = 5
LANES_DESKTOP = 7
EXTRA_PLACEMENT_ATTEMPTS = 3

# --- Path guarantor ---
PATH_ROW_HEIGHT = 50
DENSE_ROW_COUNT = 4
MIN_PASSABLE_GAP = 80.0

# --- High scores ---
HIGHSCORES_KEY = "highScores"
HIGHSCORES_CAP = 10
NAME_MAX_LEN = 15
DEFAULT_NAME = "Anonymous"
HIGHSCORES_FILE_DEFAULT = "slopedash_scores.json"

# --- Colors (RGB) ---
COLOR_BG = (232, 240, 250)
COLOR_FG = (44, 62, 80)
COLOR_ACCENT = (52, 152, 219)
COLOR_DANGER = (231, 76, 60)
COLOR_ROCK = (120, 126, 138)
COLOR_TREE = (39, 124, 74)
COLOR_SKIER = (241, 196, 15)
COLOR_PANEL = (44, 62, 80)

# --- Debug ---
DEBUG_SPAWN_LOGS = False    # print a line per spawner run / path repair
DEBUG_HUD = False           # draw lane guides and live counts
