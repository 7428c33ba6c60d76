"""Training corpus sources: embedded sample levels and level text files."""

import logging
import os
from pathlib import Path
from typing import List, Sequence

from .level_grid import LevelGrid, level_to_string, parse_level

logger = logging.getLogger(__name__)

# First VGLC Lode Runner levels (32x22), for offline training and tests
SAMPLE_LEVELS: List[str] = [
    """\
................................
..E.G...........................
bBBbBBbBBBb#bbbbbbB.............
...........#-----------.........
...........#....bb#.............
...........#..E.bb#......G......
...........#....bb#...bbbbb#bbbb
...........#....bb#........#....
...........#....bb#........#....
...........#....bb#.......G#....
bbb#bbbbbbbb....bbbbbbbb#bbbbbbb
...#....................#.......
...#....................#.......
...#....................#.......
bbbbbbbbbbbbbb#bbbbbbbbb#.......
..............#.........#.......
..............#.........#.......
..........E.G.#---------#..G.E..
......#bbbbbbbbb........bbbbbbb#
......#........................#
......#..........M..G..........#
bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb
""",

    """\
...G...........................#
#BBbBB#........................#
#.....#...............G........#
#.....#......#bbbbbbbbbbb#.....#
#.G.E.#......#...........#.G...#
#bBbBb#......#...........#bbbbb#
#.....#---...#...........#......
#.....#......#...........#......
#.....#------#-------...E#......
#.....#......#......#bbbbBBBBBB#
#.....#......#......#..........#
#.....#......#..G...#..........#
#...E.#.G....#bbbbbb#..........#
BBbbbBbBBbbBB#.................#
BbbbBB.......#..........#bbbb#bb
B...BB.......#..........#....#..
BG..BB.......#...-------#....#.G
bbbbbbbbb#bbbbBBBB......#...bbbb
.........#..............#.......
.........#..............#.......
.........#......M.......#.......
bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb
""",

    """\
................................
.......G...G....................
bbbbbbbbbbbbbbbbbbbbbbb#bbbbbbbb
......................E#........
......................b#........
......................b#........
.......G..............b#..G.....
#bbbbbbbbbbbbbbbbbbbbbbb........
#...........................E...
#...............................
#bbbbb#..........E......#bbbbbb#
.....b#.................#b......
.....b#.................#b......
.....b#.......G.........#b......
#bbbbbbbbbbbbbbbbbbbbbbbbbbbbb..
#...............................
#.......E.......................
#...........G...................
bbbbbbb#bbbbbbbbbbbbbbbbbbbbbbbb
.......#........................
....M..#........................
bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb
""",
]


def get_sample_levels() -> List[LevelGrid]:
    """Get the embedded sample levels as parsed grids."""
    return [parse_level(text) for text in SAMPLE_LEVELS]


def load_level_file(path: str) -> LevelGrid:
    """Load a single level from a text file."""
    with open(path, "r", encoding="utf-8") as f:
        return parse_level(f.read())


def load_levels_from_dir(directory: str, pattern: str = "*.txt") -> List[LevelGrid]:
    """Load every matching level file in a directory, sorted by name.

    Files that cannot be read or parsed are logged and skipped.
    """
    levels: List[LevelGrid] = []
    for path in sorted(Path(directory).glob(pattern)):
        try:
            levels.append(load_level_file(str(path)))
        except (OSError, ValueError) as e:
            logger.warning("Skipping level file %s: %s", path, e)
    logger.info("Loaded %d levels from %s", len(levels), directory)
    return levels


def save_level_file(level: Sequence[Sequence], path: str) -> None:
    """Write a level in text format, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(level_to_string(level) + "\n")
