from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from ..dungeon.tiles import Position
from ..rng import make_id

logger = logging.getLogger(__name__)


class MobType(str, Enum):
    SKELETON = "skeleton"
    GOBLIN = "goblin"
    RATMAN = "ratman"
    ORC = "orc"
    OOZE = "ooze"
    TROLL = "troll"
    OGRE = "ogre"
    WRAITH = "wraith"
    ELEMENTAL = "elemental"
    DRAKE = "drake"
    LICH = "lich"
    DRAGON = "dragon"


class MobVariant(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    ELITE = "elite"
    BOSS = "boss"


@dataclass(frozen=True)
class MobDefinition:
    type: MobType
    name: str
    description: str
    min_level: int
    base_health: int
    base_damage: int
    base_defense: int
    base_speed: int
    gold_range: Tuple[int, int]


MOB_DEFINITIONS: Dict[MobType, MobDefinition] = {
    d.type: d
    for d in (
        MobDefinition(MobType.SKELETON, "Skeleton", "A reanimated skeleton wielding rusty weapons", 1, 20, 5, 2, 3, (2, 8)),
        MobDefinition(MobType.GOBLIN, "Goblin", "A small, cunning creature with a love for shiny things", 1, 15, 4, 1, 5, (5, 12)),
        MobDefinition(MobType.RATMAN, "Ratman", "A humanoid rat with disease-carrying weapons", 1, 18, 6, 2, 6, (4, 10)),
        MobDefinition(MobType.ORC, "Orc", "A fierce warrior with a thirst for battle", 2, 30, 8, 3, 3, (8, 15)),
        MobDefinition(MobType.OOZE, "Ooze", "A corrosive slime that dissolves everything it touches", 2, 25, 7, 8, 1, (5, 15)),
        MobDefinition(MobType.TROLL, "Troll", "A large, regenerating brute with immense strength", 3, 50, 10, 5, 2, (10, 25)),
        MobDefinition(MobType.OGRE, "Ogre", "A massive, dim-witted creature with devastating strength", 4, 70, 15, 7, 1, (15, 30)),
        MobDefinition(MobType.WRAITH, "Wraith", "A spectral entity that drains life force", 5, 35, 12, 4, 4, (12, 20)),
        MobDefinition(MobType.ELEMENTAL, "Elemental", "A being of pure elemental energy", 5, 45, 16, 10, 3, (15, 25)),
        MobDefinition(MobType.DRAKE, "Drake", "A smaller cousin of dragons with elemental breath", 6, 65, 14, 9, 5, (18, 35)),
        MobDefinition(MobType.LICH, "Lich", "An undead sorcerer with powerful magic", 7, 60, 18, 6, 3, (20, 40)),
        MobDefinition(MobType.DRAGON, "Dragon", "An ancient, powerful dragon with devastating attacks", 8, 100, 25, 15, 4, (50, 100)),
    )
}

# (stat multiplier, gold multiplier)
VARIANT_MULTIPLIERS: Dict[MobVariant, Tuple[float, float]] = {
    MobVariant.EASY: (0.75, 0.5),
    MobVariant.NORMAL: (1.0, 1.0),
    MobVariant.HARD: (1.5, 2.0),
    MobVariant.ELITE: (2.5, 3.0),
    MobVariant.BOSS: (5.0, 5.0),
}

LEVEL_SCALE_PER_FLOOR = 0.2


@dataclass
class Mob:
    id: str
    type: MobType
    variant: MobVariant
    name: str
    health: int
    max_health: int
    damage: int
    defense: int
    speed: int
    gold_drop: int
    position: Position
    status: List[str] = field(default_factory=list)

    @property
    def alive(self) -> bool:
        return self.health > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "variant": self.variant.value,
            "name": self.name,
            "health": self.health,
            "maxHealth": self.max_health,
            "damage": self.damage,
            "defense": self.defense,
            "speed": self.speed,
            "goldDrop": self.gold_drop,
            "position": self.position.to_dict(),
            "status": list(self.status),
        }


def mobs_for_level(level: int) -> List[MobType]:
    """Depth-appropriate mob pool, in catalogue order."""
    pool = [d.type for d in MOB_DEFINITIONS.values() if d.min_level <= level]
    if not pool:
        pool = [MobType.SKELETON, MobType.GOBLIN, MobType.RATMAN]
    return pool


def boss_type_for_level(level: int) -> MobType:
    return MobType.DRAGON if level >= MOB_DEFINITIONS[MobType.DRAGON].min_level else MobType.OGRE


def level_scale(level: int) -> float:
    return 1.0 + max(0, level - 1) * LEVEL_SCALE_PER_FLOOR


def create_mob(
    mob_type: MobType,
    variant: MobVariant,
    level: int,
    position: Position,
    rng: random.Random,
) -> Mob:
    """Instantiate a mob with stats scaled by variant and floor depth."""
    definition = MOB_DEFINITIONS[mob_type]
    stat_mult, gold_mult = VARIANT_MULTIPLIERS[variant]
    scale = level_scale(level)

    health = int(definition.base_health * stat_mult * scale)
    lo, hi = definition.gold_range
    gold = int(rng.randint(lo, hi) * gold_mult * scale)

    name = definition.name if variant is MobVariant.NORMAL else f"{variant.value.capitalize()} {definition.name}"
    mob = Mob(
        id=make_id(rng),
        type=mob_type,
        variant=variant,
        name=name,
        health=health,
        max_health=health,
        damage=int(definition.base_damage * stat_mult * scale),
        defense=int(definition.base_defense * stat_mult * scale),
        speed=int(definition.base_speed * stat_mult * scale),
        gold_drop=gold,
        position=position,
    )
    logger.debug("Created mob %s (%s) at %s", mob.name, mob.id, position)
    return mob
