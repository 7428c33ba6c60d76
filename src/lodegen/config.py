"""Shared constants for level generation and validation."""

import os

# Level dimensions - Apple II / Arduboy format (28x16)
LEVEL_WIDTH = 28
LEVEL_HEIGHT = 16

# Generation request defaults
DEFAULT_GOLD_COUNT = 5
DEFAULT_ENEMY_COUNT = 2
# Counts used by the game when it asks for a fresh level
GAME_GOLD_COUNT = 6
GAME_ENEMY_COUNT = 3

DEFAULT_MAX_ATTEMPTS = 50

# Search limits
REACHABILITY_MAX_ITERATIONS = 50000
SOLVER_MAX_ITERATIONS = 100000
MAX_GOLD_FOR_FULL_SOLVE = 16

# Dug holes further than this (in tiles) from the player are treated as refilled.
DIG_MEMORY_RADIUS = 2

# Fallback prior for contexts the trained table has never seen
FALLBACK_TILE_WEIGHTS = (
    (".", 0.60),
    ("b", 0.20),
    ("#", 0.10),
    ("B", 0.05),
    ("-", 0.05),
)

# Preview rendering
TILE = 24
BG = (12, 12, 20)
TILE_COLORS = {
    ".": None,
    "b": (170, 84, 42),
    "B": (120, 120, 132),
    "#": (230, 200, 90),
    "-": (200, 200, 200),
    "G": (255, 215, 0),
    "E": (220, 60, 60),
    "M": (80, 200, 255),
}

# Checkout root (src/lodegen/config.py -> two levels up from the package)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "generation_config.json")
