from .rooms import Room, RoomType
from .tiles import Position, Tile, TileType

__all__ = ["Position", "Room", "RoomType", "Tile", "TileType"]
