"""
Level Generator - orchestrates structure generation, repair, entity
placement and validation with a bounded retry loop.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from lodegen.tiles.tile_types import TileType
from .corpus import get_sample_levels
from .entity_placement import place_entities
from .generation_config import GenerationConfig
from .level_grid import LevelGrid
from .markov_model import RandomFn, TransitionTable, generate_structure, train_transition_table
from .reachability import ValidationResult, can_solve_level, validate_level
from .seed_manager import SeedManager
from .structure_repair import repair_structure

logger = logging.getLogger(__name__)

FULL_SOLVE_BONUS = 50
UNREACHABLE_GOLD_PENALTY = 10


@dataclass
class GenerationResult:
    level: LevelGrid
    validation: ValidationResult
    attempts: int
    fully_solvable: bool = False
    generation_time_ms: float = 0.0


def score_candidate(validation: ValidationResult, fully_solvable: bool) -> int:
    """Higher is better: reachable gold, minus penalties, plus a full-solve bonus."""
    score = (len(validation.reachable_gold)
             - UNREACHABLE_GOLD_PENALTY * len(validation.unreachable_gold)
             - len(validation.issues))
    if fully_solvable:
        score += FULL_SOLVE_BONUS
    return score


def _resolve_rng(config: GenerationConfig, rng: Optional[RandomFn]) -> RandomFn:
    if rng is not None:
        return rng
    if config.seed is not None:
        return random.Random(config.seed).random
    return random.random


class LevelGenerator:
    """Markov-based level generator with validation and retries"""

    def __init__(self, table: Optional[TransitionTable] = None):
        self.table = table if table is not None else TransitionTable()
        self._trained = table is not None

    @classmethod
    def from_samples(cls, augment: bool = True) -> "LevelGenerator":
        """Generator trained on the embedded sample levels"""
        generator = cls()
        generator.train(get_sample_levels(), augment=augment)
        return generator

    def train(self, corpus: Iterable[Sequence[Sequence[TileType]]], augment: bool = True) -> TransitionTable:
        self.table = train_transition_table(corpus, augment=augment)
        self._trained = True
        return self.table

    def load_model(self, table: TransitionTable) -> None:
        self.table = table
        self._trained = True

    @property
    def is_trained(self) -> bool:
        return self._trained

    def generate_raw(self, config: Optional[GenerationConfig] = None,
                     rng: Optional[RandomFn] = None) -> LevelGrid:
        """One pass of structure, repair and placement. No validation."""
        config = config or GenerationConfig()
        rng = _resolve_rng(config, rng)

        structure = generate_structure(self.table, config.width, config.height, rng)
        structure = repair_structure(structure, rng)
        return place_entities(structure, config.gold_count, config.enemy_count, rng)

    def generate(self, config: Optional[GenerationConfig] = None,
                 max_attempts: Optional[int] = None,
                 rng: Optional[RandomFn] = None,
                 require_full_solve: Optional[bool] = None) -> GenerationResult:
        """
        Generate until a candidate passes validation or attempts run out.

        With ``require_full_solve`` a candidate must also be completable
        (all gold collected, then escape). When no candidate succeeds the
        best-scoring one is returned with its failing validation.
        ``max_attempts`` and ``require_full_solve`` default to the config's.
        """
        config = config or GenerationConfig()
        if max_attempts is None:
            max_attempts = config.max_attempts
        if require_full_solve is None:
            require_full_solve = config.require_full_solve
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        rng = _resolve_rng(config, rng)

        if not self._trained:
            logger.warning("Generating from an untrained model, all tiles use the fallback prior")

        start = time.perf_counter()
        best: Optional[GenerationResult] = None
        best_score = None

        for attempt in range(1, max_attempts + 1):
            level = self.generate_raw(config, rng)
            validation = validate_level(level)

            fully_solvable = False
            if validation.valid:
                fully_solvable = can_solve_level(level, validation=validation).solvable

            score = score_candidate(validation, fully_solvable)
            logger.debug("Attempt %d: valid=%s fully_solvable=%s score=%d issues=%s",
                         attempt, validation.valid, fully_solvable, score, validation.issues)

            if best_score is None or score > best_score:
                best_score = score
                best = GenerationResult(level, validation, attempt, fully_solvable)

            if validation.valid and (fully_solvable or not require_full_solve):
                elapsed = (time.perf_counter() - start) * 1000
                logger.info("Generated level in %d attempt(s), %.1f ms", attempt, elapsed)
                return GenerationResult(level, validation, attempt, fully_solvable, elapsed)

        elapsed = (time.perf_counter() - start) * 1000
        logger.warning("No acceptable level after %d attempts, returning best candidate (score %d)",
                       max_attempts, best_score)
        return GenerationResult(best.level, best.validation, max_attempts,
                                best.fully_solvable, elapsed)

    def generate_batch(self, count: int, config: Optional[GenerationConfig] = None,
                       max_attempts_per_level: Optional[int] = None,
                       world_seed: Optional[int] = None) -> List[GenerationResult]:
        """Generate ``count`` levels, each from its own seed derived from ``world_seed``"""
        config = config or GenerationConfig()
        if world_seed is None:
            world_seed = config.seed
        seeds = SeedManager(world_seed)
        logger.info("Generating %d levels with world seed %d", count, seeds.get_world_seed())

        results = []
        for index in range(count):
            rng = seeds.level_rng(index).random
            results.append(self.generate(config, max_attempts_per_level, rng))
        return results
