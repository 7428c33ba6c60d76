from enum import Enum


class TileType(str, Enum):
    """Enumeration of all tile symbols in a level grid."""

    # Structure tiles
    EMPTY = "."
    BRICK = "b"   # diggable
    SOLID = "B"   # not diggable
    LADDER = "#"
    ROPE = "-"

    # Entity tiles
    GOLD = "G"
    ENEMY = "E"
    SPAWN = "M"

    def __str__(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        """Return the one-character wire symbol."""
        return self.value

    @property
    def is_entity(self) -> bool:
        return self in (TileType.GOLD, TileType.ENEMY, TileType.SPAWN)

    @property
    def is_structure(self) -> bool:
        return not self.is_entity

    @classmethod
    def from_symbol(cls, symbol: str) -> "TileType":
        """Parse a wire symbol, raising ValueError for unknown characters."""
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown tile symbol: {symbol!r}") from None


STRUCTURE_TILES = (
    TileType.EMPTY,
    TileType.BRICK,
    TileType.SOLID,
    TileType.LADDER,
    TileType.ROPE,
)

ENTITY_TILES = (TileType.GOLD, TileType.ENEMY, TileType.SPAWN)
