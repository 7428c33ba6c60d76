"""2D Markov structure model.

Learns, for every context of (above, left, above-left) tiles, how often each
structure tile follows, then samples new terrain cell by cell in row-major
order so the context of a cell is always already decided.

The trained TransitionTable is an immutable value: it can be shared between
generator calls and persisted as JSON in the
``"above|left|aboveLeft" -> {tile: probability}`` shape.
"""

from __future__ import annotations

import json
import logging
import os
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from lodegen.config import FALLBACK_TILE_WEIGHTS, LEVEL_HEIGHT, LEVEL_WIDTH
from lodegen.tiles.tile_types import TileType
from .level_grid import LevelGrid, create_empty_level, get_tile, mirror_level, normalize_level

logger = logging.getLogger(__name__)

RandomFn = Callable[[], float]
Distribution = Tuple[Tuple[TileType, float], ...]

OUT_OF_BOUNDS_SYMBOL = "X"

FALLBACK_DISTRIBUTION: Distribution = tuple(
    (TileType(symbol), weight) for symbol, weight in FALLBACK_TILE_WEIGHTS
)


class ContextKey(NamedTuple):
    """Neighbour tiles of a cell; None marks a neighbour outside the grid."""
    above: Optional[TileType]
    left: Optional[TileType]
    above_left: Optional[TileType]

    @classmethod
    def at(cls, level: Sequence[Sequence[TileType]], x: int, y: int) -> "ContextKey":
        return cls(
            above=get_tile(level, x, y - 1),
            left=get_tile(level, x - 1, y),
            above_left=get_tile(level, x - 1, y - 1),
        )

    def encode(self) -> str:
        return "|".join(
            OUT_OF_BOUNDS_SYMBOL if t is None else t.value
            for t in (self.above, self.left, self.above_left)
        )

    @classmethod
    def decode(cls, text: str) -> "ContextKey":
        parts = text.split("|")
        if len(parts) != 3:
            raise ValueError(f"Malformed context key: {text!r}")
        tiles = [None if p == OUT_OF_BOUNDS_SYMBOL else TileType.from_symbol(p) for p in parts]
        return cls(*tiles)


@dataclass(frozen=True)
class TransitionTable:
    """Trained mapping of ContextKey to an ordered tile distribution."""
    transitions: Mapping[ContextKey, Distribution] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze whatever mapping was passed in
        object.__setattr__(self, "transitions", MappingProxyType(dict(self.transitions)))

    def __len__(self) -> int:
        return len(self.transitions)

    def __contains__(self, key: object) -> bool:
        return key in self.transitions

    def distribution(self, key: ContextKey) -> Optional[Distribution]:
        return self.transitions.get(key)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            key.encode(): {tile.value: prob for tile, prob in dist}
            for key, dist in self.transitions.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, float]]) -> "TransitionTable":
        transitions: Dict[ContextKey, Distribution] = {}
        for key_text, probs in data.items():
            transitions[ContextKey.decode(key_text)] = tuple(
                (TileType.from_symbol(symbol), float(prob)) for symbol, prob in probs.items()
            )
        return cls(transitions)

    def save_to_json(self, filepath: str) -> None:
        parent = os.path.dirname(filepath)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info("Saved transition table with %d contexts to %s", len(self), filepath)

    @classmethod
    def load_from_json(cls, filepath: str) -> "TransitionTable":
        with open(filepath, "r") as f:
            data = json.load(f)
        table = cls.from_dict(data)
        logger.info("Loaded transition table with %d contexts from %s", len(table), filepath)
        return table

    def most_common_patterns(self, limit: int = 10) -> List[Tuple[str, str]]:
        """Describe the most peaked contexts as (context, "tile:pct, ...") pairs."""
        described = []
        for key, dist in self.transitions.items():
            top = max(prob for _, prob in dist) if dist else 0.0
            tiles = ", ".join(f"{tile.value}:{prob * 100:.1f}%" for tile, prob in dist)
            described.append((top, key.encode(), tiles))
        described.sort(key=lambda d: d[0], reverse=True)
        return [(context, tiles) for _, context, tiles in described[:limit]]


def train_transition_table(corpus: Iterable[Sequence[Sequence[TileType]]],
                           augment: bool = True) -> TransitionTable:
    """Count tile frequencies per context over a corpus and normalize.

    Entities are stripped before counting. With ``augment`` each level also
    contributes its horizontal mirror. An empty corpus gives an empty table.
    """
    counts: Dict[ContextKey, Dict[TileType, int]] = {}
    level_count = 0
    tile_count = 0

    for level in corpus:
        normalized = normalize_level(level)
        variants = [normalized, mirror_level(normalized)] if augment else [normalized]
        for grid in variants:
            level_count += 1
            for y, row in enumerate(grid):
                for x, tile in enumerate(row):
                    tile_counts = counts.setdefault(ContextKey.at(grid, x, y), {})
                    tile_counts[tile] = tile_counts.get(tile, 0) + 1
                    tile_count += 1

    transitions: Dict[ContextKey, Distribution] = {}
    for key, tile_counts in counts.items():
        total = sum(tile_counts.values())
        transitions[key] = tuple((tile, count / total) for tile, count in tile_counts.items())

    logger.info("Trained on %d levels (%d tiles), learned %d contexts",
                level_count, tile_count, len(transitions))
    return TransitionTable(transitions)


def _sample_from(distribution: Distribution, r: float) -> TileType:
    cumulative = 0.0
    for tile, prob in distribution:
        cumulative += prob
        if r <= cumulative:
            return tile
    # Rounding left r just above the total
    return distribution[0][0]


def sample_tile(table: TransitionTable, key: ContextKey, rng: RandomFn) -> TileType:
    """Draw a tile for a context, using the fixed prior for unseen contexts."""
    distribution = table.distribution(key)
    if not distribution:
        distribution = FALLBACK_DISTRIBUTION
    return _sample_from(distribution, rng())


def generate_structure(table: TransitionTable, width: int = LEVEL_WIDTH,
                       height: int = LEVEL_HEIGHT, rng: Optional[RandomFn] = None) -> LevelGrid:
    """Sample a new structure grid. The bottom row is always solid."""
    rng = rng or random.random

    level = create_empty_level(width, height)
    for x in range(width):
        level[height - 1][x] = TileType.SOLID

    for y in range(height - 1):
        for x in range(width):
            level[y][x] = sample_tile(table, ContextKey.at(level, x, y), rng)

    return level
