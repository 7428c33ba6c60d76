import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from lodegen.config import BG, TILE, TILE_COLORS
from .tile_types import TileType

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class TileRenderer:
    """Draws level grids as flat-coloured previews."""

    def __init__(self, tile_size: Optional[int] = None,
                 colors: Optional[Dict[str, Optional[Color]]] = None,
                 background: Color = BG):
        self.tile_size = tile_size if tile_size is not None else TILE
        self.colors = dict(TILE_COLORS if colors is None else colors)
        self.background = background

    def get_tile_color(self, tile_type: TileType) -> Optional[Color]:
        return self.colors.get(tile_type.value)

    def get_tile_rect(self, grid_x: int, grid_y: int) -> pygame.Rect:
        """Convert grid coordinates to pixel rectangle."""
        return pygame.Rect(grid_x * self.tile_size, grid_y * self.tile_size,
                           self.tile_size, self.tile_size)

    def render_tile(self, surface: pygame.Surface, tile_type: TileType, x: int, y: int) -> None:
        """Render a single tile at grid position (x, y)."""
        color = self.get_tile_color(tile_type)
        if color is None:
            return
        rect = self.get_tile_rect(x, y)
        ts = self.tile_size

        if tile_type == TileType.LADDER:
            rail = max(1, ts // 8)
            pygame.draw.rect(surface, color, (rect.x + ts // 6, rect.y, rail, ts))
            pygame.draw.rect(surface, color, (rect.right - ts // 6 - rail, rect.y, rail, ts))
            for rung_y in range(rect.y + ts // 4, rect.bottom, ts // 2 or 1):
                pygame.draw.rect(surface, color, (rect.x + ts // 6, rung_y, ts - 2 * (ts // 6), rail))
        elif tile_type == TileType.ROPE:
            pygame.draw.rect(surface, color, (rect.x, rect.y + ts // 6, ts, max(1, ts // 10)))
        elif tile_type.is_entity:
            inset = ts // 4
            pygame.draw.rect(surface, color, rect.inflate(-2 * inset, -2 * inset))
        else:
            pygame.draw.rect(surface, color, rect)

    def render_level(self, level: Sequence[Sequence[TileType]]) -> pygame.Surface:
        """Render a whole level grid to a new surface."""
        height = len(level)
        width = len(level[0]) if height > 0 else 0
        surface = pygame.Surface((max(1, width * self.tile_size), max(1, height * self.tile_size)))
        surface.fill(self.background)
        for y, row in enumerate(level):
            for x, tile in enumerate(row):
                self.render_tile(surface, tile, x, y)
        return surface

    def save_preview(self, level: List[List[TileType]], path: str) -> None:
        """Render a level and write it as an image file."""
        surface = self.render_level(level)
        pygame.image.save(surface, path)
        logger.debug("Saved level preview to %s", path)
