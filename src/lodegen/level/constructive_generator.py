"""Rule-based level generator: floor, platforms, ladders and ropes."""

import logging
import random
from typing import Optional

from lodegen.tiles.tile_types import TileType
from .entity_placement import shuffle
from .generation_config import GenerationConfig
from .level_grid import LevelGrid, Position, create_empty_level
from .markov_model import RandomFn
from .reachability import get_reachable_positions

logger = logging.getLogger(__name__)

BRICK_PLATFORM_CHANCE = 0.8


def _randint(rng: RandomFn, low: int, span: int) -> int:
    """low + a uniform integer in [0, span). A non-positive span gives low."""
    return low + int(rng() * span) if span > 0 else low


class ConstructiveLevelGenerator:
    """Builds levels directly from placement rules instead of a trained model"""

    def generate(self, config: Optional[GenerationConfig] = None,
                 rng: Optional[RandomFn] = None) -> LevelGrid:
        config = config or GenerationConfig()
        if rng is None:
            rng = random.Random(config.seed).random if config.seed is not None else random.random
        width, height = config.width, config.height

        level = create_empty_level(width, height)
        for x in range(width):
            level[height - 1][x] = TileType.SOLID

        self._add_platforms(level, rng)
        self._add_ladders(level, rng)
        self._add_ropes(level, rng)

        spawn = self._place_spawn(level)
        if spawn is None:
            logger.debug("No room for a spawn on the bottom walkway")
            return level

        reachable = get_reachable_positions(level, spawn.x, spawn.y)
        candidates = sorted(
            pos for pos in reachable
            if pos.y < height - 1 and pos != spawn and level[pos.y][pos.x] == TileType.EMPTY
        )
        shuffle(candidates, rng)

        gold = candidates[:config.gold_count]
        enemies = candidates[len(gold):len(gold) + config.enemy_count]
        for pos in gold:
            level[pos.y][pos.x] = TileType.GOLD
        for pos in enemies:
            level[pos.y][pos.x] = TileType.ENEMY
        return level

    def _add_platforms(self, level: LevelGrid, rng: RandomFn) -> None:
        height, width = len(level), len(level[0])
        for _ in range(_randint(rng, 3, 4)):
            y = _randint(rng, 2, height - 6)
            start_x = _randint(rng, 0, width - 10)
            platform_width = _randint(rng, 5, 15)
            for x in range(start_x, min(start_x + platform_width, width)):
                if y < height - 1:
                    level[y][x] = TileType.BRICK if rng() < BRICK_PLATFORM_CHANCE else TileType.SOLID

    def _add_ladders(self, level: LevelGrid, rng: RandomFn) -> None:
        height, width = len(level), len(level[0])
        for _ in range(_randint(rng, 3, 3)):
            x = min(_randint(rng, 2, width - 4), width - 1)
            start_y = _randint(rng, 1, height - 8)
            ladder_height = _randint(rng, 4, 8)
            for y in range(start_y, min(start_y + ladder_height, height - 1)):
                if level[y][x] == TileType.EMPTY:
                    level[y][x] = TileType.LADDER

    def _add_ropes(self, level: LevelGrid, rng: RandomFn) -> None:
        height, width = len(level), len(level[0])
        for _ in range(_randint(rng, 0, 3)):
            y = _randint(rng, 1, height // 2)
            if y >= height - 1:
                continue
            start_x = _randint(rng, 0, width - 8)
            rope_width = _randint(rng, 4, 10)
            for x in range(start_x, min(start_x + rope_width, width)):
                if level[y][x] == TileType.EMPTY:
                    level[y][x] = TileType.ROPE

    def _place_spawn(self, level: LevelGrid) -> Optional[Position]:
        """First open cell of the walkway above the floor"""
        height, width = len(level), len(level[0])
        if height < 2:
            return None
        y = height - 2
        for x in range(1, width - 1):
            if level[y][x] in (TileType.EMPTY, TileType.LADDER):
                level[y][x] = TileType.SPAWN
                return Position(x, y)
        return None
