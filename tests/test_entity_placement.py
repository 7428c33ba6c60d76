import random

import pytest

from lodegen.level.corpus import get_sample_levels
from lodegen.level.entity_placement import choose_spawn, find_valid_positions, place_entities, shuffle
from lodegen.level.level_grid import (
    Position,
    find_tiles,
    get_enemy_positions,
    get_gold_positions,
    get_spawn_position,
    parse_level,
)
from lodegen.level.markov_model import generate_structure, train_transition_table
from lodegen.level.reachability import get_reachable_positions
from lodegen.level.structure_repair import repair_structure
from lodegen.tiles.tile_types import TileType

STRUCTURE = """\
..........
.bbbb#....
.....#....
.....#....
BBBBBBBBBB"""


@pytest.fixture(scope="module")
def table():
    return train_transition_table(get_sample_levels())


def test_find_valid_positions():
    level = parse_level(STRUCTURE)
    valid = set(find_valid_positions(level))
    # On top of the brick ledge and the ladder
    assert Position(1, 0) in valid
    assert Position(5, 0) in valid
    # Ladder cells themselves
    assert Position(5, 2) in valid
    # Floor walkway
    assert Position(0, 3) in valid
    # Mid-air
    assert Position(8, 1) not in valid
    # Bottom row never
    assert not any(p.y == 4 for p in valid)


def test_choose_spawn_prefers_lowest_rows():
    level = parse_level(STRUCTURE)
    valid = find_valid_positions(level)
    for r in (0.0, 0.5, 0.99):
        spawn = choose_spawn(level, valid, lambda: r)
        assert spawn.y == 3


def test_choose_spawn_fallback_row():
    # Nothing stands on a rope, so there are no valid positions
    assert find_valid_positions(parse_level("...\n---")) == []
    assert choose_spawn(parse_level("...\n-..\nBBB"), [], lambda: 0.0) == Position(1, 1)


def test_choose_spawn_nothing_available():
    assert choose_spawn(parse_level("---\nBBB"), [], lambda: 0.0) is None


def test_shuffle_is_permutation():
    items = list(range(20))
    shuffled = shuffle(list(items), random.Random(1).random)
    assert sorted(shuffled) == items
    assert shuffled == shuffle(list(items), random.Random(1).random)


def test_place_entities_counts():
    level = place_entities(parse_level(STRUCTURE), 3, 2, random.Random(4).random)
    assert len(find_tiles(level, TileType.SPAWN)) == 1
    assert len(get_gold_positions(level)) == 3
    assert len(get_enemy_positions(level)) == 2


def test_place_entities_underfills():
    level = place_entities(parse_level("....\nBBBB"), 10, 10, random.Random(0).random)
    assert len(find_tiles(level, TileType.SPAWN)) == 1
    # Three cells left after the spawn
    assert len(get_gold_positions(level)) == 3
    assert get_enemy_positions(level) == []


def test_place_entities_leaves_input_alone():
    structure = parse_level(STRUCTURE)
    place_entities(structure, 3, 2, random.Random(0).random)
    assert get_spawn_position(structure) is None


def test_entities_only_on_empty_cells():
    structure = parse_level(STRUCTURE)
    level = place_entities(structure, 20, 20, random.Random(2).random)
    for pos in get_gold_positions(level) + get_enemy_positions(level):
        assert structure[pos.y][pos.x] is TileType.EMPTY


@pytest.mark.parametrize("seed", range(8))
def test_placed_gold_is_reachable(table, seed):
    rng = random.Random(seed).random
    structure = repair_structure(generate_structure(table, rng=rng), rng)
    level = place_entities(structure, 6, 3, rng)
    spawn = get_spawn_position(level)
    if spawn is None:
        assert get_gold_positions(level) == []
        return
    reachable = get_reachable_positions(level, spawn.x, spawn.y)
    for gold in get_gold_positions(level):
        assert gold in reachable
