from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping

from .tile_types import TileType


@dataclass(frozen=True)
class TileCapabilities:
    """Fixed movement capabilities of a tile kind."""
    tile_type: TileType
    name: str
    solid: bool = False
    passable: bool = False
    climbable: bool = False
    diggable: bool = False
    ground: bool = False


class TileRegistry:
    """Read-only table of tile capabilities."""

    def __init__(self):
        tiles: Dict[TileType, TileCapabilities] = {}
        for caps in self._default_tiles():
            tiles[caps.tile_type] = caps
        self._tiles: Mapping[TileType, TileCapabilities] = MappingProxyType(tiles)

    @staticmethod
    def _default_tiles() -> List[TileCapabilities]:
        return [
            TileCapabilities(TileType.EMPTY, "Empty", passable=True),
            TileCapabilities(TileType.BRICK, "Brick", solid=True, diggable=True, ground=True),
            TileCapabilities(TileType.SOLID, "Solid", solid=True, ground=True),
            # Standing on top of a ladder is allowed
            TileCapabilities(TileType.LADDER, "Ladder", passable=True, climbable=True, ground=True),
            # Ropes are hung from, never stood on
            TileCapabilities(TileType.ROPE, "Rope", passable=True, climbable=True),
            TileCapabilities(TileType.GOLD, "Gold", passable=True),
            TileCapabilities(TileType.ENEMY, "Enemy", passable=True),
            TileCapabilities(TileType.SPAWN, "Spawn", passable=True),
        ]

    def get_tile(self, tile_type: TileType) -> TileCapabilities:
        """Get capabilities by tile type."""
        return self._tiles[tile_type]

    def get_all_tiles(self) -> Mapping[TileType, TileCapabilities]:
        return self._tiles

    def tiles_with_property(self, property_name: str, value: bool = True) -> FrozenSet[TileType]:
        """Get all tile types whose capability flag equals value."""
        return frozenset(
            caps.tile_type for caps in self._tiles.values()
            if getattr(caps, property_name) == value
        )


# Global tile registry instance
tile_registry = TileRegistry()

# Precomputed lookups for the search hot path
SOLID_TILES = tile_registry.tiles_with_property("solid")
PASSABLE_TILES = tile_registry.tiles_with_property("passable")
CLIMBABLE_TILES = tile_registry.tiles_with_property("climbable")
DIGGABLE_TILES = tile_registry.tiles_with_property("diggable")
GROUND_TILES = tile_registry.tiles_with_property("ground")
