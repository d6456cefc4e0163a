from .corridors import carve_l_corridor, connect_rooms
from .population import populate_items, populate_mobs
from .rooms import assign_room_types, place_rooms, place_rooms_with_fallback
from .stairs import place_stairs

__all__ = [
    "assign_room_types",
    "carve_l_corridor",
    "connect_rooms",
    "place_rooms",
    "place_rooms_with_fallback",
    "place_stairs",
    "populate_items",
    "populate_mobs",
]
