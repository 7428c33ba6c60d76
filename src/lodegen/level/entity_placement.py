"""Place spawn, gold and enemies on a repaired structure grid."""

import logging
import random
from typing import List, MutableSequence, Optional, Sequence, TypeVar

from lodegen.config import DEFAULT_ENEMY_COUNT, DEFAULT_GOLD_COUNT
from lodegen.tiles.tile_types import TileType
from .level_grid import LevelGrid, Position, clone_level, get_tile, level_dimensions
from .markov_model import RandomFn
from .reachability import get_reachable_positions

logger = logging.getLogger(__name__)

T = TypeVar("T")

# How many of the lowest candidates the spawn is drawn from
SPAWN_CANDIDATE_POOL = 5

_STANDABLE = (TileType.EMPTY, TileType.LADDER, TileType.ROPE)
_SUPPORT = (TileType.BRICK, TileType.SOLID, TileType.LADDER)


def find_valid_positions(level: Sequence[Sequence[TileType]]) -> List[Position]:
    """Cells an entity may occupy: open tiles resting on support, or ladders.

    The bottom row is never included.
    """
    width, height = level_dimensions(level)
    positions: List[Position] = []
    for y in range(height - 1):
        for x in range(width):
            tile = level[y][x]
            if tile not in _STANDABLE:
                continue
            if get_tile(level, x, y + 1) in _SUPPORT or tile == TileType.LADDER:
                positions.append(Position(x, y))
    return positions


def choose_spawn(level: Sequence[Sequence[TileType]], valid_positions: Sequence[Position],
                 rng: RandomFn) -> Optional[Position]:
    """Pick a spawn near the floor.

    Draws uniformly among the lowest few valid positions. With no valid
    positions, takes the first empty cell of the second-to-last row.
    """
    if valid_positions:
        lowest_first = sorted(valid_positions, key=lambda p: p.y, reverse=True)
        pool = min(SPAWN_CANDIDATE_POOL, len(lowest_first))
        return lowest_first[int(rng() * pool)]

    width, height = level_dimensions(level)
    if height < 2:
        return None
    for x in range(width):
        if level[height - 2][x] == TileType.EMPTY:
            return Position(x, height - 2)
    return None


def shuffle(items: MutableSequence[T], rng: RandomFn) -> MutableSequence[T]:
    """In-place Fisher-Yates shuffle driven by a () -> float RNG."""
    for i in range(len(items) - 1, 0, -1):
        j = int(rng() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def place_entities(structure: Sequence[Sequence[TileType]],
                   gold_count: int = DEFAULT_GOLD_COUNT,
                   enemy_count: int = DEFAULT_ENEMY_COUNT,
                   rng: Optional[RandomFn] = None) -> LevelGrid:
    """Return a copy of ``structure`` with a spawn, gold and enemies placed.

    Gold and enemies only go on empty cells reachable from the spawn, so
    fewer than requested may be placed. If no spawn can be chosen the copy
    is returned without entities.
    """
    rng = rng or random.random
    level = clone_level(structure)

    valid_positions = find_valid_positions(level)
    spawn = choose_spawn(level, valid_positions, rng)
    if spawn is None:
        logger.debug("No spawn position available, leaving level without entities")
        return level

    level[spawn.y][spawn.x] = TileType.SPAWN
    reachable = get_reachable_positions(level, spawn.x, spawn.y)

    candidates = [
        pos for pos in valid_positions
        if pos != spawn and level[pos.y][pos.x] == TileType.EMPTY and pos in reachable
    ]
    shuffle(candidates, rng)

    gold = candidates[:gold_count]
    enemies = candidates[len(gold):len(gold) + enemy_count]
    for pos in gold:
        level[pos.y][pos.x] = TileType.GOLD
    for pos in enemies:
        level[pos.y][pos.x] = TileType.ENEMY

    if len(gold) < gold_count or len(enemies) < enemy_count:
        logger.debug("Placed %d/%d gold and %d/%d enemies (%d reachable candidates)",
                     len(gold), gold_count, len(enemies), enemy_count, len(candidates))
    return level
