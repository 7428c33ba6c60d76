"""Lode Runner level generation and validation."""

from .level import (
    ConstructiveLevelGenerator,
    GenerationConfig,
    GenerationResult,
    LevelGenerator,
    parse_level,
    level_to_string,
    validate_level,
    validate_level_full,
    can_solve_level,
)

__version__ = "0.1.0"

__all__ = [
    'ConstructiveLevelGenerator',
    'GenerationConfig',
    'GenerationResult',
    'LevelGenerator',
    'parse_level',
    'level_to_string',
    'validate_level',
    'validate_level_full',
    'can_solve_level',
]
