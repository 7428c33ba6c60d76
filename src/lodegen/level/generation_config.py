"""Generation request settings and their JSON file."""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from lodegen.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_ENEMY_COUNT,
    DEFAULT_GOLD_COUNT,
    DEFAULT_MAX_ATTEMPTS,
    LEVEL_HEIGHT,
    LEVEL_WIDTH,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationConfig:
    """Configuration for a level generation request."""
    width: int = LEVEL_WIDTH
    height: int = LEVEL_HEIGHT
    gold_count: int = DEFAULT_GOLD_COUNT
    enemy_count: int = DEFAULT_ENEMY_COUNT

    # Orchestrator options
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    require_full_solve: bool = False
    seed: Optional[int] = None

    # Training option: also learn from mirrored corpus levels
    augment: bool = True

    def __post_init__(self):
        if self.width < 1 or self.height < 2:
            raise ValueError(f"Level size must be at least 1x2, got {self.width}x{self.height}")
        if self.gold_count < 0 or self.enemy_count < 0:
            raise ValueError("Gold and enemy counts cannot be negative")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationConfig":
        """Build from a dict, ignoring keys that are not config fields."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown generation config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})


def load_generation_config(path: str = DEFAULT_CONFIG_PATH) -> GenerationConfig:
    """Load a GenerationConfig from JSON. A missing file gives the defaults."""
    if not os.path.exists(path):
        logger.info("No generation config at %s, using defaults", path)
        return GenerationConfig()
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Generation config {path} must hold a JSON object")
    config = GenerationConfig.from_dict(data)
    logger.debug("Loaded generation config from %s: %s", path, config)
    return config


def save_generation_config(config: GenerationConfig, path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
