"""Structure repair pass.

Independent per-cell sampling leaves local artifacts the training corpus
never shows: ladders hanging over empty space and ropes lying directly on
ground. This pass fixes them with randomized choices.

Decisions read the input grid, so a ladder extended here is not examined
again in the same call. Repeated calls do not converge to a fixed point;
anything left over is caught by the solvability check later.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Optional, Sequence

from lodegen.tiles.tile_types import TileType
from .level_grid import LevelGrid, clone_level, level_dimensions

logger = logging.getLogger(__name__)

LADDER_EXTEND_CHANCE = 0.7
ROPE_TO_EMPTY_CHANCE = 0.5


def repair_structure(level: Sequence[Sequence[TileType]],
                     rng: Optional[Callable[[], float]] = None) -> LevelGrid:
    """Return a repaired copy of a structure grid."""
    rng = rng or random.random
    width, height = level_dimensions(level)
    repaired = clone_level(level)
    ladders_extended = 0
    ladders_removed = 0
    ropes_replaced = 0

    for y in range(height):
        for x in range(width):
            tile = level[y][x]
            below = level[y + 1][x] if y + 1 < height else None

            # Floating ladder: extend it down or drop it
            if tile == TileType.LADDER and y < height - 2 and below == TileType.EMPTY:
                if rng() < LADDER_EXTEND_CHANCE:
                    repaired[y + 1][x] = TileType.LADDER
                    ladders_extended += 1
                else:
                    repaired[y][x] = TileType.EMPTY
                    ladders_removed += 1

            # Rope resting on ground
            elif tile == TileType.ROPE and below in (TileType.BRICK, TileType.SOLID):
                repaired[y][x] = TileType.EMPTY if rng() < ROPE_TO_EMPTY_CHANCE else TileType.LADDER
                ropes_replaced += 1

    logger.debug("Repair: %d ladders extended, %d removed, %d ropes replaced",
                 ladders_extended, ladders_removed, ropes_replaced)
    return repaired
