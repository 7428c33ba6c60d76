"""
Seed Manager - deterministic seeds for batch level generation
"""

import hashlib
import random
from typing import Optional


def _derive_seed(seed_string: str) -> int:
    return int(hashlib.md5(seed_string.encode()).hexdigest()[:8], 16)


class SeedManager:
    """Derives one seed and RNG per level from a world seed"""

    def __init__(self, world_seed: Optional[int] = None):
        """
        Args:
            world_seed: Master seed for a batch. If None, a random seed is drawn.
        """
        self.world_seed = world_seed if world_seed is not None else random.randint(0, 2**31 - 1)

    def generate_level_seed(self, level_index: int) -> int:
        """Deterministic seed for the level at ``level_index``"""
        return _derive_seed(f"{self.world_seed}_level_{level_index}")

    def level_rng(self, level_index: int) -> random.Random:
        """Fresh RNG driving the whole pipeline for one level"""
        return random.Random(self.generate_level_seed(level_index))

    def get_world_seed(self) -> int:
        return self.world_seed
