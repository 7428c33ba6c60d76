from .level_grid import LevelGrid, Position, parse_level, level_to_string
from .corpus import get_sample_levels, load_level_file, load_levels_from_dir, save_level_file
from .markov_model import ContextKey, TransitionTable, train_transition_table, generate_structure
from .structure_repair import repair_structure
from .entity_placement import place_entities
from .reachability import (
    SolveResult,
    ValidationResult,
    FullValidationResult,
    get_reachable_positions,
    validate_level,
    validate_level_full,
    can_solve_level,
    is_solvable,
    is_fully_solvable,
)
from .generation_config import GenerationConfig, load_generation_config
from .seed_manager import SeedManager
from .level_generator import GenerationResult, LevelGenerator
from .constructive_generator import ConstructiveLevelGenerator

__all__ = [
    'LevelGrid',
    'Position',
    'parse_level',
    'level_to_string',
    'get_sample_levels',
    'load_level_file',
    'load_levels_from_dir',
    'save_level_file',
    'ContextKey',
    'TransitionTable',
    'train_transition_table',
    'generate_structure',
    'repair_structure',
    'place_entities',
    'SolveResult',
    'ValidationResult',
    'FullValidationResult',
    'get_reachable_positions',
    'validate_level',
    'validate_level_full',
    'can_solve_level',
    'is_solvable',
    'is_fully_solvable',
    'GenerationConfig',
    'load_generation_config',
    'SeedManager',
    'GenerationResult',
    'LevelGenerator',
    'ConstructiveLevelGenerator',
]
