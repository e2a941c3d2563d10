"""Breadth-first reachability helpers shared by generation and diagnostics.

All searches are 4-connected. Traversable tiles are FLOOR, traps, KEY and
STAIRS_DOWN. A LOCKED_DOOR is passable only when its coordinate is listed in
``open_doors``; any coordinate in ``blocked`` is treated as solid regardless
of its tile. The start cell is always part of the search.
"""

from __future__ import annotations

from collections import deque
from typing import Collection, Dict, List, Optional, Set, Tuple

from .tiles import LOCKED_DOOR, ORTHOGONAL, TRAVERSABLE, Coord, Grid, in_bounds


def _passable(grid: Grid, pos: Coord, open_doors: Collection[Coord], blocked: Collection[Coord]) -> bool:
    if pos in blocked:
        return False
    tile = grid[pos[0]][pos[1]]
    if tile in TRAVERSABLE:
        return True
    return tile == LOCKED_DOOR and pos in open_doors


def _bfs(grid: Grid, start: Coord, open_doors, blocked, goal: Optional[Coord] = None) -> Dict[Coord, Optional[Coord]]:
    parent: Dict[Coord, Optional[Coord]] = {start: None}
    q = deque([start])
    while q:
        x, y = q.popleft()
        if (x, y) == goal:
            break
        for dx, dy in ORTHOGONAL:
            nxt = (x + dx, y + dy)
            if nxt in parent or not in_bounds(grid, nxt[0], nxt[1]):
                continue
            if _passable(grid, nxt, open_doors, blocked):
                parent[nxt] = (x, y)
                q.append(nxt)
    return parent


def shortest_path(
    grid: Grid, start: Coord, goal: Coord, open_doors: Collection[Coord] = (), blocked: Collection[Coord] = ()
) -> Optional[List[Coord]]:
    """Ordered tile list from ``start`` to ``goal`` inclusive, or None when unreachable."""
    parent = _bfs(grid, start, set(open_doors), set(blocked), goal=goal)
    if goal not in parent:
        return None
    path = []
    cur: Optional[Coord] = goal
    while cur is not None:
        path.append(cur)
        cur = parent[cur]
    path.reverse()
    return path


def farthest_point(grid: Grid, start: Coord) -> Tuple[Coord, int]:
    """Tile with the greatest BFS distance from ``start`` (first found wins ties)."""
    dist = {start: 0}
    best, best_d = start, 0
    q = deque([start])
    while q:
        x, y = q.popleft()
        d = dist[(x, y)]
        if d > best_d:
            best, best_d = (x, y), d
        for dx, dy in ORTHOGONAL:
            nxt = (x + dx, y + dy)
            if nxt in dist or not in_bounds(grid, nxt[0], nxt[1]):
                continue
            if _passable(grid, nxt, (), ()):
                dist[nxt] = d + 1
                q.append(nxt)
    return best, best_d


def flood_fill(
    grid: Grid, start: Coord, open_doors: Collection[Coord] = (), blocked: Collection[Coord] = ()
) -> Set[Coord]:
    return set(_bfs(grid, start, set(open_doors), set(blocked)))


def is_reachable(
    grid: Grid, start: Coord, goal: Coord, open_doors: Collection[Coord] = (), blocked: Collection[Coord] = ()
) -> bool:
    if start == goal:
        return True
    return goal in _bfs(grid, start, set(open_doors), set(blocked), goal=goal)


def navigable_neighbors(grid: Grid, pos: Coord) -> int:
    """Count orthogonal neighbors a walker could use (doors included)."""
    x, y = pos
    count = 0
    for dx, dy in ORTHOGONAL:
        nx, ny = x + dx, y + dy
        if in_bounds(grid, nx, ny) and (grid[nx][ny] in TRAVERSABLE or grid[nx][ny] == LOCKED_DOOR):
            count += 1
    return count


__all__ = ["shortest_path", "farthest_point", "flood_fill", "is_reachable", "navigable_neighbors"]
