import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from deeps.dungeon.floor import Floor  # noqa: E402
from deeps.dungeon.rooms import Room, RoomType  # noqa: E402


@pytest.fixture
def room_floor():
    """Factory for a hand-built floor: an all-wall grid with the given rooms carved in order."""

    def build(width=20, height=12, rooms=((1, 1, 6, 4),), level=1):
        floor = Floor.blank(level, width, height)
        for i, (x, y, w, h) in enumerate(rooms):
            room = Room(id=f"room-{i}", type=RoomType.STANDARD, x=x, y=y, width=w, height=h)
            floor.grid.carve_room(room)
            floor.rooms.append(room)
        return floor

    return build
