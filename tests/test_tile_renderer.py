import pygame
import pytest

from lodegen.config import BG, TILE, TILE_COLORS
from lodegen.level.level_grid import parse_level
from lodegen.tiles.tile_renderer import TileRenderer
from lodegen.tiles.tile_types import TileType


@pytest.fixture
def renderer():
    return TileRenderer(tile_size=8)


def test_default_tile_size():
    assert TileRenderer().tile_size == TILE


def test_tile_rect(renderer):
    assert renderer.get_tile_rect(2, 3) == pygame.Rect(16, 24, 8, 8)


def test_empty_has_no_color(renderer):
    assert renderer.get_tile_color(TileType.EMPTY) is None
    assert renderer.get_tile_color(TileType.BRICK) == TILE_COLORS["b"]


def test_render_level(renderer):
    surface = renderer.render_level(parse_level(".G\nbB"))
    assert surface.get_size() == (16, 16)
    assert tuple(surface.get_at((1, 1)))[:3] == BG
    assert tuple(surface.get_at((4, 12)))[:3] == TILE_COLORS["b"]
    assert tuple(surface.get_at((12, 12)))[:3] == TILE_COLORS["B"]
    # Entities are drawn inset
    assert tuple(surface.get_at((12, 4)))[:3] == TILE_COLORS["G"]
    assert tuple(surface.get_at((8, 0)))[:3] == BG


def test_save_preview(renderer, tmp_path):
    path = tmp_path / "preview.png"
    renderer.save_preview(parse_level("M#\nBB"), str(path))
    assert path.exists()
    assert pygame.image.load(str(path)).get_size() == (16, 16)
