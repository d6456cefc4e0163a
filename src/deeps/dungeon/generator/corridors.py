from __future__ import annotations

import logging
import random
from typing import List, Sequence, Tuple

from ..grid import TileGrid
from ..rooms import Room

logger = logging.getLogger(__name__)

MIN_ROOMS_FOR_EXTRA_LINKS = 3


def carve_l_corridor(grid: TileGrid, a: Room, b: Room, rng: random.Random) -> None:
    """Join two room centers with a 1-tile L-shaped corridor, bend order chosen at random."""
    x1, y1 = a.center().x, a.center().y
    x2, y2 = b.center().x, b.center().y
    if rng.random() < 0.5:
        grid.carve_h_corridor(x1, x2, y1)
        grid.carve_v_corridor(y1, y2, x2)
    else:
        grid.carve_v_corridor(y1, y2, x1)
        grid.carve_h_corridor(x1, x2, y2)


def connect_rooms(grid: TileGrid, rooms: Sequence[Room], rng: random.Random) -> List[Tuple[int, int]]:
    """Connect every room into a single walkable graph.

    Consecutive rooms in placement order are chained first, which already yields a
    spanning path. With three or more rooms, ``len(rooms) // 3 + 1`` extra links
    between random distinct pairs add loops and alternative exits.

    Returns the (index, index) pairs that were linked, chain first.
    """
    links: List[Tuple[int, int]] = []
    for i in range(len(rooms) - 1):
        carve_l_corridor(grid, rooms[i], rooms[i + 1], rng)
        links.append((i, i + 1))

    if len(rooms) >= MIN_ROOMS_FOR_EXTRA_LINKS:
        for _ in range(len(rooms) // 3 + 1):
            a = rng.randrange(len(rooms))
            b = rng.randrange(len(rooms))
            while b == a:
                b = rng.randrange(len(rooms))
            carve_l_corridor(grid, rooms[a], rooms[b], rng)
            links.append((a, b))

    logger.debug("Carved %d corridors between %d rooms", len(links), len(rooms))
    return links
