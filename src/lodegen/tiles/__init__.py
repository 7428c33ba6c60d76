from .tile_types import TileType, STRUCTURE_TILES, ENTITY_TILES
from .tile_registry import TileCapabilities, TileRegistry, tile_registry
from .tile_renderer import TileRenderer

__all__ = [
    'TileType',
    'STRUCTURE_TILES',
    'ENTITY_TILES',
    'TileCapabilities',
    'TileRegistry',
    'tile_registry',
    'TileRenderer',
]
