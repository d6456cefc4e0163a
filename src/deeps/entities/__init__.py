from .items import Item, ItemType, create_random_item, items_for_level
from .mobs import Mob, MobType, MobVariant, create_mob, mobs_for_level

__all__ = [
    "Item",
    "ItemType",
    "create_random_item",
    "items_for_level",
    "Mob",
    "MobType",
    "MobVariant",
    "create_mob",
    "mobs_for_level",
]
