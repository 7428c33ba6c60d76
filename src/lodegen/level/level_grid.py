"""
Level grid helpers.

A level is a row-major list of rows of TileType, origin top-left. These
helpers convert to and from the one-character-per-tile text format and
answer simple lookups. Grids are plain lists so every stage can copy and
mutate them cheaply.
"""

from typing import List, NamedTuple, Optional, Sequence, Tuple

from lodegen.config import LEVEL_HEIGHT, LEVEL_WIDTH
from lodegen.tiles.tile_types import TileType

LevelGrid = List[List[TileType]]


class Position(NamedTuple):
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def parse_level(level_string: str) -> LevelGrid:
    """Parse newline-separated rows of tile symbols into a grid.

    Raises:
        ValueError: if the text is empty, rows differ in length, or a
            symbol is outside the tile alphabet.
    """
    lines = [line.rstrip("\r") for line in level_string.strip().split("\n")]
    if not lines or not lines[0]:
        raise ValueError("Level text is empty")

    grid: LevelGrid = []
    for y, line in enumerate(lines):
        try:
            grid.append([TileType.from_symbol(ch) for ch in line])
        except ValueError as e:
            raise ValueError(f"Row {y}: {e}") from None
    check_rectangular(grid)
    return grid


def check_rectangular(level: Sequence[Sequence[TileType]]) -> None:
    """Raise ValueError unless every row has the same, non-zero length."""
    if not level or not level[0]:
        raise ValueError("Level grid is empty")
    width = len(level[0])
    for y, row in enumerate(level):
        if len(row) != width:
            raise ValueError(f"Row {y} has length {len(row)}, expected {width}")


def level_to_string(level: Sequence[Sequence[TileType]]) -> str:
    """Convert a level back to its text format."""
    return "\n".join("".join(tile.value for tile in row) for row in level)


def create_empty_level(width: int = LEVEL_WIDTH, height: int = LEVEL_HEIGHT,
                       fill_tile: TileType = TileType.EMPTY) -> LevelGrid:
    return [[fill_tile] * width for _ in range(height)]


def clone_level(level: Sequence[Sequence[TileType]]) -> LevelGrid:
    return [list(row) for row in level]


def level_dimensions(level: Sequence[Sequence[TileType]]) -> Tuple[int, int]:
    """Return (width, height)."""
    height = len(level)
    width = len(level[0]) if height > 0 else 0
    return width, height


def get_tile(level: Sequence[Sequence[TileType]], x: int, y: int) -> Optional[TileType]:
    """Get tile at position, or None when out of bounds."""
    if y < 0 or y >= len(level) or x < 0 or x >= len(level[y]):
        return None
    return level[y][x]


def set_tile(level: LevelGrid, x: int, y: int, tile: TileType) -> bool:
    """Set tile in place. Returns False when the position is out of bounds."""
    if 0 <= y < len(level) and 0 <= x < len(level[y]):
        level[y][x] = tile
        return True
    return False


def find_tiles(level: Sequence[Sequence[TileType]], tile: TileType) -> List[Position]:
    """Find all positions of a tile type in row-major order."""
    positions: List[Position] = []
    for y, row in enumerate(level):
        for x, t in enumerate(row):
            if t == tile:
                positions.append(Position(x, y))
    return positions


def get_spawn_position(level: Sequence[Sequence[TileType]]) -> Optional[Position]:
    spawns = find_tiles(level, TileType.SPAWN)
    return spawns[0] if spawns else None


def get_gold_positions(level: Sequence[Sequence[TileType]]) -> List[Position]:
    return find_tiles(level, TileType.GOLD)


def get_enemy_positions(level: Sequence[Sequence[TileType]]) -> List[Position]:
    return find_tiles(level, TileType.ENEMY)


def normalize_level(level: Sequence[Sequence[TileType]]) -> LevelGrid:
    """Strip entities (gold, enemies, spawn) to get the bare structure."""
    return [
        [TileType.EMPTY if tile.is_entity else tile for tile in row]
        for row in level
    ]


def mirror_level(level: Sequence[Sequence[TileType]]) -> LevelGrid:
    """Horizontally flip a level."""
    return [list(reversed(row)) for row in level]
