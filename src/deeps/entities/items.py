from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple

from ..dungeon.tiles import Position
from ..rng import make_id


class ItemType(str, Enum):
    POTION = "potion"
    SCROLL = "scroll"
    GOLD = "gold"
    WEAPON = "weapon"
    ARMOR = "armor"
    KEY = "key"
    ARTIFACT = "artifact"


@dataclass(frozen=True)
class ItemTemplate:
    type: ItemType
    names: Tuple[str, ...]
    min_level: int
    base_power: int
    power_per_level: int
    base_value: int
    value_per_level: int
    symbol: str


ITEM_TEMPLATES: Dict[ItemType, ItemTemplate] = {
    t.type: t
    for t in (
        ItemTemplate(ItemType.POTION, ("Healing Potion", "Mana Potion"), 1, 10, 5, 15, 5, "!"),
        ItemTemplate(ItemType.SCROLL, ("Scroll of Light", "Scroll of Teleport"), 1, 5, 2, 20, 8, "?"),
        ItemTemplate(ItemType.GOLD, ("Gold Coins",), 1, 0, 0, 10, 10, "$"),
        ItemTemplate(ItemType.WEAPON, ("Dagger", "Sword", "Battle Axe"), 3, 5, 1, 30, 10, "/"),
        ItemTemplate(ItemType.ARMOR, ("Leather Armor", "Chain Mail", "Shield"), 3, 3, 1, 30, 10, "["),
        ItemTemplate(ItemType.KEY, ("Iron Key",), 6, 0, 0, 5, 0, "-"),
        ItemTemplate(ItemType.ARTIFACT, ("Ancient Amulet", "Runed Idol"), 6, 15, 3, 200, 40, "*"),
    )
}


@dataclass
class Item:
    id: str
    type: ItemType
    name: str
    power: int
    value: int
    position: Position

    @property
    def symbol(self) -> str:
        return ITEM_TEMPLATES[self.type].symbol

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "power": self.power,
            "value": self.value,
            "symbol": self.symbol,
            "position": self.position.to_dict(),
        }


def items_for_level(level: int) -> List[ItemType]:
    return [t.type for t in ITEM_TEMPLATES.values() if t.min_level <= level]


def create_random_item(level: int, position: Position, rng: random.Random) -> Item:
    """Roll an item type from the depth pool and scale its power/value with depth."""
    template = ITEM_TEMPLATES[rng.choice(items_for_level(level))]
    depth = max(0, level - 1)
    return Item(
        id=make_id(rng),
        type=template.type,
        name=rng.choice(template.names),
        power=template.base_power + template.power_per_level * depth,
        value=template.base_value + template.value_per_level * depth,
        position=position,
    )
