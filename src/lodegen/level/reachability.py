"""Reachability and solvability checks for Lode Runner levels.

Movement rules:
 - A position has ground support when it holds a ladder or rope, or the
   tile below is a ground tile (brick, solid block or ladder). A rope below
   is not ground.
 - Without support the player falls straight down until the next tile is
   not passable (landing on top of it) or is a ladder/rope (grabbing it).
   Nothing else is possible while falling.
 - With support the player can step left/right into passable tiles, climb
   up a ladder, climb down onto a ladder or into a dug hole, step down off
   a ladder into any passable tile, and dig the brick diagonally below-left
   or below-right while stepping sideways over it.
 - A dug brick is passable for the rest of the search path while it stays
   within the dig memory window around the player; holes left further
   behind are treated as refilled.

Two searches are built on these rules:
 - basic reachability (BFS over position + dug holes), used to check that
   every gold piece can be reached from the spawn;
 - full solvability (A* over position + dug holes + collected gold), used to
   check that all gold can be collected and the player can then escape
   through the top row.

Neither search raises for bad levels; problems come back as issues or a
reason string.
"""
from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Sequence, Set, Tuple

from lodegen.config import (
    DIG_MEMORY_RADIUS,
    MAX_GOLD_FOR_FULL_SOLVE,
    REACHABILITY_MAX_ITERATIONS,
    SOLVER_MAX_ITERATIONS,
)
from lodegen.tiles.tile_registry import CLIMBABLE_TILES, DIGGABLE_TILES, GROUND_TILES, PASSABLE_TILES
from lodegen.tiles.tile_types import TileType
from .level_grid import (
    Position,
    find_tiles,
    get_gold_positions,
    get_spawn_position,
    get_tile,
    level_dimensions,
)

logger = logging.getLogger(__name__)

Level = Sequence[Sequence[TileType]]
DugSet = FrozenSet[Tuple[int, int]]

NO_DUG: DugSet = frozenset()


class Move(NamedTuple):
    x: int
    y: int
    dig: Optional[Position] = None


@dataclass
class ValidationResult:
    valid: bool
    reachable_gold: List[Position] = field(default_factory=list)
    unreachable_gold: List[Position] = field(default_factory=list)
    spawn_position: Optional[Position] = None
    issues: List[str] = field(default_factory=list)


@dataclass
class FullValidationResult(ValidationResult):
    can_escape: bool = False
    escape_positions: List[Position] = field(default_factory=list)


@dataclass(frozen=True)
class SolveResult:
    solvable: bool
    reason: Optional[str] = None
    iterations: int = 0


# ----- Movement model -----

def has_ground_support(level: Level, x: int, y: int) -> bool:
    """Return True if the player can stand at (x, y) without falling."""
    if get_tile(level, x, y) in CLIMBABLE_TILES:
        return True
    return get_tile(level, x, y + 1) in GROUND_TILES


def is_passable(level: Level, x: int, y: int, dug: DugSet = NO_DUG) -> bool:
    tile = get_tile(level, x, y)
    if tile is None:
        return False
    if (x, y) in dug:
        return True
    return tile in PASSABLE_TILES


def can_dig(level: Level, x: int, y: int, dug: DugSet = NO_DUG) -> bool:
    return get_tile(level, x, y) in DIGGABLE_TILES and (x, y) not in dug


def get_valid_moves(level: Level, x: int, y: int, dug: DugSet = NO_DUG) -> List[Move]:
    """List every move available from (x, y) given the holes dug so far."""
    moves: List[Move] = []
    width, height = level_dimensions(level)
    current = get_tile(level, x, y)
    on_climbable = current in CLIMBABLE_TILES
    supported = has_ground_support(level, x, y)

    if not supported and not on_climbable:
        land_y = y + 1
        while land_y < height:
            if not is_passable(level, x, land_y, dug):
                moves.append(Move(x, land_y - 1))
                break
            if get_tile(level, x, land_y) in CLIMBABLE_TILES:
                moves.append(Move(x, land_y))
                break
            land_y += 1
        return moves

    # Left / right
    for nx in (x - 1, x + 1):
        if is_passable(level, nx, y, dug):
            moves.append(Move(nx, y))

    # Climb up (ladder only)
    if current == TileType.LADDER and is_passable(level, x, y - 1, dug):
        moves.append(Move(x, y - 1))

    # Climb down onto a ladder or into a hole; step off a ladder
    if y < height - 1:
        below = get_tile(level, x, y + 1)
        if below == TileType.LADDER or (x, y + 1) in dug:
            moves.append(Move(x, y + 1))
        elif current == TileType.LADDER and is_passable(level, x, y + 1, dug):
            moves.append(Move(x, y + 1))

    # Dig diagonally below while stepping over the hole
    dig_y = y + 1
    if dig_y < height:
        for nx in (x - 1, x + 1):
            if 0 <= nx < width and can_dig(level, nx, dig_y, dug) and is_passable(level, nx, y, dug):
                moves.append(Move(nx, y, Position(nx, dig_y)))

    return moves


def _remember_dug(dug: DugSet, move: Move, radius: Optional[int]) -> DugSet:
    """Add a move's dig to the dug set and forget holes outside the window."""
    if move.dig is not None:
        dug = dug | {(move.dig.x, move.dig.y)}
    if radius is None or not dug:
        return dug
    kept = frozenset(
        (dx, dy) for dx, dy in dug
        if abs(dx - move.x) <= radius and abs(dy - move.y) <= radius
    )
    return kept if len(kept) != len(dug) else dug


# ----- Basic reachability -----

def _search_reachable(
    level: Level,
    start_x: int,
    start_y: int,
    max_iterations: int,
    dig_memory_radius: Optional[int],
) -> Tuple[Set[Position], bool]:
    """BFS over (position, dug holes) states.

    Returns the reached positions and whether the search stopped at the
    iteration cap with states still queued.
    """
    reachable: Set[Position] = set()
    start = (start_x, start_y, NO_DUG)
    queue = deque([start])
    visited = {start}
    iterations = 0

    while queue and iterations < max_iterations:
        iterations += 1
        x, y, dug = queue.popleft()
        reachable.add(Position(x, y))

        for move in get_valid_moves(level, x, y, dug):
            state = (move.x, move.y, _remember_dug(dug, move, dig_memory_radius))
            if state not in visited:
                visited.add(state)
                queue.append(state)

    if queue:
        logger.debug("Reachability search stopped at %d iterations with %d states queued",
                     iterations, len(queue))
    return reachable, bool(queue)


def get_reachable_positions(
    level: Level,
    start_x: int,
    start_y: int,
    max_iterations: int = REACHABILITY_MAX_ITERATIONS,
    dig_memory_radius: Optional[int] = DIG_MEMORY_RADIUS,
) -> Set[Position]:
    """Every position reached from the start under some dig history."""
    reachable, _ = _search_reachable(level, start_x, start_y, max_iterations, dig_memory_radius)
    return reachable


def validate_level(
    level: Level,
    max_iterations: int = REACHABILITY_MAX_ITERATIONS,
    dig_memory_radius: Optional[int] = DIG_MEMORY_RADIUS,
) -> ValidationResult:
    """Check that every gold piece is reachable from the spawn."""
    issues: List[str] = []
    spawn = get_spawn_position(level)
    gold_positions = get_gold_positions(level)

    if spawn is None:
        return ValidationResult(
            valid=False,
            reachable_gold=[],
            unreachable_gold=gold_positions,
            spawn_position=None,
            issues=["No spawn position (M) found in level"],
        )

    spawn_count = len(find_tiles(level, TileType.SPAWN))
    if spawn_count > 1:
        issues.append(f"Level has {spawn_count} spawn positions, expected 1")

    if not has_ground_support(level, spawn.x, spawn.y):
        issues.append(f"Spawn position {spawn} has no ground support")

    if not gold_positions:
        issues.append("No gold (G) found in level")

    reachable, exhausted = _search_reachable(level, spawn.x, spawn.y, max_iterations, dig_memory_radius)
    reachable_gold = [gold for gold in gold_positions if gold in reachable]
    unreachable_gold = [gold for gold in gold_positions if gold not in reachable]

    # A cut-off search only matters when it left gold unfound
    if exhausted and unreachable_gold:
        issues.append(f"Reachability search exceeded {max_iterations} iterations")
    for gold in unreachable_gold:
        if exhausted:
            issues.append(f"Gold at {gold} was not reached before the search limit")
        else:
            issues.append(f"Gold at {gold} is unreachable")

    return ValidationResult(
        valid=not unreachable_gold and not issues,
        reachable_gold=reachable_gold,
        unreachable_gold=unreachable_gold,
        spawn_position=spawn,
        issues=issues,
    )


def is_solvable(level: Level) -> bool:
    """Quick check: all gold reachable and no other issues."""
    return validate_level(level).valid


# ----- Full solvability -----

def find_escape_positions(level: Level, allow_fallback: bool = True) -> List[Position]:
    """Top-row cells usable as the level exit.

    A ladder in the top row, or an empty top-row cell above a ladder. When
    there are none and ``allow_fallback`` is set, any empty, rope or ladder
    cell in the top row is accepted instead.
    """
    width, _ = level_dimensions(level)
    escapes: List[Position] = []

    for x in range(width):
        top = get_tile(level, x, 0)
        if top == TileType.LADDER:
            escapes.append(Position(x, 0))
        elif top == TileType.EMPTY and get_tile(level, x, 1) == TileType.LADDER:
            escapes.append(Position(x, 0))

    if not escapes and allow_fallback:
        for x in range(width):
            if get_tile(level, x, 0) in (TileType.EMPTY, TileType.ROPE, TileType.LADDER):
                escapes.append(Position(x, 0))
        if escapes:
            logger.debug("No escape ladder in top row, accepting %d open top-row cells", len(escapes))

    return escapes


def _manhattan(ax: int, ay: int, bx: int, by: int) -> int:
    return abs(ax - bx) + abs(ay - by)


def can_solve_level(
    level: Level,
    max_iterations: int = SOLVER_MAX_ITERATIONS,
    dig_memory_radius: Optional[int] = DIG_MEMORY_RADIUS,
    validation: Optional[ValidationResult] = None,
) -> SolveResult:
    """A* search for a route that collects every gold piece and escapes.

    State is (position, dug holes, collected-gold bitmask). Levels with more
    than MAX_GOLD_FOR_FULL_SOLVE gold pieces fall back to basic validation.
    A precomputed ``validation`` for the same level may be passed in.
    """
    spawn = get_spawn_position(level)
    if spawn is None:
        return SolveResult(False, "No spawn position")

    gold_positions = get_gold_positions(level)
    if not gold_positions:
        return SolveResult(False, "No gold in level")

    if len(gold_positions) > MAX_GOLD_FOR_FULL_SOLVE:
        result = validation if validation is not None else validate_level(
            level, dig_memory_radius=dig_memory_radius)
        if result.valid:
            return SolveResult(True)
        return SolveResult(False, "Too many gold pieces for full solve check")

    escape_positions = find_escape_positions(level)
    if not escape_positions:
        return SolveResult(False, "No escape positions at top of level")

    # Collecting all gold requires reaching all gold
    if validation is None:
        validation = validate_level(level, dig_memory_radius=dig_memory_radius)
    if not validation.valid:
        return SolveResult(False, validation.issues[0] if validation.issues else "Level is not valid")

    all_gold = (1 << len(gold_positions)) - 1
    gold_index: Dict[Tuple[int, int], int] = {
        (pos.x, pos.y): idx for idx, pos in enumerate(gold_positions)
    }
    escape_set = {(pos.x, pos.y) for pos in escape_positions}
    escape_bound: Dict[int, int] = {}

    def remaining_to_escape(collected: int) -> int:
        # Cheapest hop from any remaining gold to any exit
        if collected not in escape_bound:
            escape_bound[collected] = min(
                _manhattan(gold.x, gold.y, e.x, e.y)
                for i, gold in enumerate(gold_positions) if not collected & (1 << i)
                for e in escape_positions
            )
        return escape_bound[collected]

    def heuristic(x: int, y: int, collected: int) -> int:
        if collected == all_gold:
            return min(_manhattan(x, y, e.x, e.y) for e in escape_positions)
        nearest = min(
            _manhattan(x, y, gold.x, gold.y)
            for i, gold in enumerate(gold_positions) if not collected & (1 << i)
        )
        return nearest + remaining_to_escape(collected)

    start_collected = 0
    counter = itertools.count()
    open_heap = [(heuristic(spawn.x, spawn.y, start_collected), next(counter), 0,
                  spawn.x, spawn.y, NO_DUG, start_collected)]
    visited = set()
    iterations = 0

    while open_heap and iterations < max_iterations:
        iterations += 1
        _, _, g, x, y, dug, collected = heapq.heappop(open_heap)

        if collected == all_gold and (x, y) in escape_set:
            logger.debug("Level solved in %d iterations (path length %d)", iterations, g)
            return SolveResult(True, iterations=iterations)

        key = (x, y, dug, collected)
        if key in visited:
            continue
        visited.add(key)

        for move in get_valid_moves(level, x, y, dug):
            new_collected = collected
            idx = gold_index.get((move.x, move.y))
            if idx is not None:
                new_collected |= 1 << idx
            new_dug = _remember_dug(dug, move, dig_memory_radius)
            if (move.x, move.y, new_dug, new_collected) in visited:
                continue
            h = heuristic(move.x, move.y, new_collected)
            heapq.heappush(open_heap, (g + 1 + h, next(counter), g + 1,
                                       move.x, move.y, new_dug, new_collected))

    if iterations >= max_iterations:
        return SolveResult(False, f"Search exceeded {max_iterations} iterations", iterations)
    return SolveResult(False, "No path found to collect all gold and escape", iterations)


def is_fully_solvable(level: Level) -> bool:
    return can_solve_level(level).solvable


def validate_level_full(level: Level) -> FullValidationResult:
    """Basic validation plus the collect-everything-and-escape check."""
    basic = validate_level(level)
    escape_positions = find_escape_positions(level)

    if not basic.valid:
        return FullValidationResult(
            valid=False,
            reachable_gold=basic.reachable_gold,
            unreachable_gold=basic.unreachable_gold,
            spawn_position=basic.spawn_position,
            issues=basic.issues,
            can_escape=False,
            escape_positions=escape_positions,
        )

    solve = can_solve_level(level, validation=basic)
    issues = list(basic.issues)
    if not solve.solvable:
        issues.append(solve.reason or "Cannot complete level")

    return FullValidationResult(
        valid=solve.solvable,
        reachable_gold=basic.reachable_gold,
        unreachable_gold=basic.unreachable_gold,
        spawn_position=basic.spawn_position,
        issues=issues,
        can_escape=solve.solvable,
        escape_positions=escape_positions,
    )
