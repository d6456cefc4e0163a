from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from functools import lru_cache
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from jsonschema import Draft202012Validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

VARIANT_NAMES = ("easy", "normal", "hard", "elite", "boss")

DIFFICULTY_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["tiers"],
    "properties": {
        "default": {"type": "string"},
        "tiers": {
            "type": "object",
            "minProperties": 1,
            "additionalProperties": {
                "type": "object",
                "required": ["variant_weights"],
                "properties": {
                    "mob_count_multiplier": {"type": "number", "exclusiveMinimum": 0, "default": 1.0},
                    "mob_count_bonus": {"type": "integer", "default": 0},
                    "item_count_bonus": {"type": "integer", "default": 0},
                    "variant_weights": {
                        "type": "object",
                        "minProperties": 1,
                        "propertyNames": {"enum": list(VARIANT_NAMES)},
                        "additionalProperties": {"type": "number", "minimum": 0},
                    },
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class PlacementTier:
    """One parameter set for a room-placement pass."""

    min_size: int
    max_size: int
    min_separation: int
    max_attempts: int

    def __post_init__(self) -> None:
        if self.min_size < 1 or self.max_size < self.min_size:
            raise ValueError("PlacementTier requires 1 <= min_size <= max_size")
        if self.min_separation < 0:
            raise ValueError("min_separation must be >= 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")


DEFAULT_PLACEMENT_TIERS: Tuple[PlacementTier, ...] = (
    PlacementTier(min_size=6, max_size=12, min_separation=2, max_attempts=30),
    PlacementTier(min_size=4, max_size=10, min_separation=1, max_attempts=60),
)


@dataclass
class GenerationSettings:
    """Tunables for the floor-generation pipeline.

    Usage:
      settings = GenerationSettings.from_env()
      floor = generate_floor(level, settings.width, settings.height, settings.difficulty,
                             seed, total_floors, settings=settings)
    """

    width: int = 80
    height: int = 50
    base_max_rooms: int = 10
    max_rooms_per_level: int = 1
    max_rooms_cap: int = 20
    min_rooms: int = 3
    placement_tiers: Tuple[PlacementTier, ...] = field(default_factory=lambda: DEFAULT_PLACEMENT_TIERS)
    base_mob_count: int = 3
    base_item_count: int = 2
    population_retries: int = 20
    vision_radius: int = 8
    difficulty: str = "normal"

    def __post_init__(self) -> None:
        if not self.placement_tiers:
            raise ValueError("at least one placement tier is required")
        if self.min_rooms < 1:
            raise ValueError("min_rooms must be >= 1")
        if self.population_retries < 1:
            raise ValueError("population_retries must be >= 1")
        if self.vision_radius < 0:
            raise ValueError("vision_radius must be >= 0")

    def max_rooms_for(self, level: int) -> int:
        return min(self.base_max_rooms + self.max_rooms_per_level * level, self.max_rooms_cap)

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        """Build settings from DEEPS_* environment variables, defaulting the rest."""
        settings = cls()
        settings.width = int(os.getenv("DEEPS_WIDTH", settings.width))
        settings.height = int(os.getenv("DEEPS_HEIGHT", settings.height))
        settings.difficulty = os.getenv("DEEPS_DIFFICULTY", settings.difficulty).strip().lower()
        settings.vision_radius = int(os.getenv("DEEPS_VISION_RADIUS", settings.vision_radius))
        settings.base_max_rooms = int(os.getenv("DEEPS_MAX_ROOMS", settings.base_max_rooms))
        logger.debug("GenerationSettings from env: %s", settings)
        return settings


@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    mob_count_multiplier: float = 1.0
    mob_count_bonus: int = 0
    item_count_bonus: int = 0
    variant_weights: Mapping[str, float] = field(default_factory=lambda: {"normal": 1.0})

    def mob_count(self, base_mob_count: int, level: int) -> int:
        return max(0, math.floor((base_mob_count + level) * self.mob_count_multiplier) + self.mob_count_bonus)

    def item_count(self, base_item_count: int, level: int) -> int:
        return max(0, base_item_count + level // 2 + self.item_count_bonus)


class DifficultyTable:
    """Named difficulty tiers consulted by the population stage."""

    def __init__(self, profiles: Mapping[str, DifficultyProfile], default: str = "normal") -> None:
        if default not in profiles:
            raise ConfigError(f"default difficulty '{default}' is not a configured tier")
        self._profiles = dict(profiles)
        self.default = default

    def names(self) -> list[str]:
        return sorted(self._profiles)

    def resolve(self, name: Optional[str]) -> DifficultyProfile:
        """Return the tier for ``name``; unknown names fall back to the default tier."""
        key = (name or "").strip().lower()
        profile = self._profiles.get(key)
        if profile is None:
            logger.warning("Unknown difficulty '%s', falling back to '%s'", name, self.default)
            return self._profiles[self.default]
        return profile

    @classmethod
    def from_mapping(cls, raw: Any, source: str = "<mapping>") -> "DifficultyTable":
        if not isinstance(raw, dict):
            raise ConfigError(f"Difficulty table in {source} must be a mapping")
        validator = Draft202012Validator(DIFFICULTY_SCHEMA)
        errors = sorted(validator.iter_errors(raw), key=lambda e: list(e.path))
        if errors:
            lines = [f"Schema validation failed for {source}:"]
            for err in errors:
                where = ".".join(str(p) for p in err.absolute_path) or "$"
                lines.append(f" - At {where}: {err.message}")
            raise ConfigError("\n".join(lines))

        profiles: Dict[str, DifficultyProfile] = {}
        for name, tier in raw["tiers"].items():
            weights = {str(k): float(v) for k, v in tier["variant_weights"].items()}
            if sum(weights.values()) <= 0:
                raise ConfigError(f"Difficulty '{name}' in {source} has all-zero variant weights")
            profiles[str(name).lower()] = DifficultyProfile(
                name=str(name).lower(),
                mob_count_multiplier=float(tier.get("mob_count_multiplier", 1.0)),
                mob_count_bonus=int(tier.get("mob_count_bonus", 0)),
                item_count_bonus=int(tier.get("item_count_bonus", 0)),
                variant_weights=weights,
            )
        table = cls(profiles, default=str(raw.get("default", "normal")).lower())
        logger.debug("Loaded difficulty table from %s: %s", source, table.names())
        return table

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DifficultyTable":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Difficulty table not found: {p}")
        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML at {p}: {e}") from e
        return cls.from_mapping(raw, source=str(p))


@lru_cache(maxsize=1)
def default_difficulty_table() -> DifficultyTable:
    """Difficulty table bundled at deeps/data/difficulty.yaml."""
    text = resource_files("deeps.data").joinpath("difficulty.yaml").read_text(encoding="utf-8")
    logger.debug("Loaded embedded difficulty table resource")
    return DifficultyTable.from_mapping(yaml.safe_load(text), source="deeps/data/difficulty.yaml")
