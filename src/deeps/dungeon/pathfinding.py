from __future__ import annotations

from collections import deque
from typing import Optional, Set

from .grid import TileGrid
from .tiles import Position


def reachable_from(grid: TileGrid, start: Position) -> Set[Position]:
    """Every walkable position reachable from ``start`` with 4-directional steps."""
    if not grid.is_walkable(start.x, start.y):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        p = q.popleft()
        for n in grid.neighbors_4(p.x, p.y):
            if n not in seen and grid.is_walkable(n.x, n.y):
                seen.add(n)
                q.append(n)
    return seen


def find_path_bfs(grid: TileGrid, start: Position, goal: Position) -> Optional[int]:
    """Breadth-first search shortest path length over walkable tiles; returns number of steps or None.

    Uses 4-directional movement.
    """
    if not grid.is_walkable(start.x, start.y) or not grid.is_walkable(goal.x, goal.y):
        return None

    q = deque([(start, 0)])
    seen = {start}
    while q:
        p, d = q.popleft()
        if p == goal:
            return d
        for n in grid.neighbors_4(p.x, p.y):
            if n not in seen and grid.is_walkable(n.x, n.y):
                seen.add(n)
                q.append((n, d + 1))
    return None


def walkable_regions(grid: TileGrid) -> int:
    """Number of 4-connected walkable components; a valid floor has exactly one."""
    visited: Set[Position] = set()
    count = 0
    for y in range(grid.height):
        for x in range(grid.width):
            p = Position(x, y)
            if p in visited or not grid.is_walkable(x, y):
                continue
            count += 1
            visited |= reachable_from(grid, p)
    return count
