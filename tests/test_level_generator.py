"""
Tests for the generation orchestrator and the constructive generator.
"""

import random

import pytest

from lodegen.level.constructive_generator import ConstructiveLevelGenerator
from lodegen.level.generation_config import GenerationConfig
from lodegen.level.level_generator import GenerationResult, LevelGenerator, score_candidate
from lodegen.level.level_grid import (
    find_tiles,
    get_gold_positions,
    level_dimensions,
    level_to_string,
)
from lodegen.level.markov_model import TransitionTable
from lodegen.level.reachability import ValidationResult, is_fully_solvable, validate_level
from lodegen.tiles.tile_types import TileType


@pytest.fixture(scope="module")
def generator():
    return LevelGenerator.from_samples()


class TestLevelGenerator:

    def test_training_state(self, generator):
        assert generator.is_trained
        assert len(generator.table) > 0
        assert not LevelGenerator().is_trained
        assert LevelGenerator(TransitionTable()).is_trained

    def test_load_model(self, generator):
        other = LevelGenerator()
        other.load_model(generator.table)
        assert other.is_trained
        assert other.table is generator.table

    def test_generate_raw(self, generator):
        level = generator.generate_raw(GenerationConfig(gold_count=4, enemy_count=1),
                                       random.Random(0).random)
        assert level_dimensions(level) == (28, 16)
        assert all(tile is TileType.SOLID for tile in level[-1])
        assert len(find_tiles(level, TileType.SPAWN)) <= 1

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_generate_returns_valid_level(self, generator, seed):
        result = generator.generate(GenerationConfig(), rng=random.Random(seed).random)
        assert isinstance(result, GenerationResult)
        assert result.validation.valid
        assert 1 <= result.attempts <= 50
        assert result.generation_time_ms >= 0
        assert len(find_tiles(result.level, TileType.SPAWN)) == 1
        assert result.validation == validate_level(result.level)

    def test_single_attempt_always_returns_level(self, generator):
        result = generator.generate(max_attempts=1, rng=random.Random(7).random)
        assert result.level is not None
        assert result.attempts == 1

    def test_untrained_generator_still_returns_level(self):
        result = LevelGenerator().generate(GenerationConfig(width=12, height=8),
                                           max_attempts=3, rng=random.Random(0).random)
        assert level_dimensions(result.level) == (12, 8)

    def test_best_candidate_returned_when_nothing_succeeds(self):
        # Zero gold can never validate
        config = GenerationConfig(gold_count=0, max_attempts=4)
        result = LevelGenerator.from_samples().generate(config, rng=random.Random(2).random)
        assert not result.validation.valid
        assert result.attempts == 4
        assert "No gold (G) found in level" in result.validation.issues

    def test_full_solve_requirement(self, generator):
        config = GenerationConfig(require_full_solve=True, max_attempts=30)
        result = generator.generate(config, rng=random.Random(5).random)
        assert result.fully_solvable
        assert result.attempts <= 30
        assert result.validation.valid
        assert is_fully_solvable(result.level)

    def test_same_seed_same_level(self, generator):
        a = generator.generate(GenerationConfig(seed=99))
        b = generator.generate(GenerationConfig(seed=99))
        assert level_to_string(a.level) == level_to_string(b.level)

    def test_rejects_zero_attempts(self, generator):
        with pytest.raises(ValueError):
            generator.generate(max_attempts=0)

    def test_generate_batch_is_reproducible(self, generator):
        config = GenerationConfig(width=20, height=12)
        first = generator.generate_batch(3, config, max_attempts_per_level=5, world_seed=42)
        second = generator.generate_batch(3, config, max_attempts_per_level=5, world_seed=42)
        assert len(first) == 3
        assert [level_to_string(r.level) for r in first] == [level_to_string(r.level) for r in second]
        # Each level gets its own seed
        assert len({level_to_string(r.level) for r in first}) > 1


def test_score_candidate():
    validation = ValidationResult(valid=False, reachable_gold=[(0, 0)] * 4,
                                  unreachable_gold=[(1, 1)], issues=["a", "b"])
    assert score_candidate(validation, False) == 4 - 10 - 2
    assert score_candidate(validation, True) == 4 - 10 - 2 + 50


class TestConstructiveGenerator:

    @pytest.mark.parametrize("seed", range(5))
    def test_constructive_level(self, seed):
        level = ConstructiveLevelGenerator().generate(GenerationConfig(), random.Random(seed).random)
        assert level_dimensions(level) == (28, 16)
        assert all(tile is TileType.SOLID for tile in level[-1])
        assert len(find_tiles(level, TileType.SPAWN)) == 1
        result = validate_level(level)
        assert result.unreachable_gold == []
        assert len(get_gold_positions(level)) <= 5

    def test_seed_from_config(self):
        config = GenerationConfig(seed=3)
        a = ConstructiveLevelGenerator().generate(config)
        b = ConstructiveLevelGenerator().generate(config)
        assert a == b
