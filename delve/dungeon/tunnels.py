from typing import List, Tuple

from .config import DungeonConfig
from .rooms import Room
from .tiles import FLOOR, VOID, WALL, Coord, Grid


def connect_rooms(grid: Grid, rooms: List[Room], rng, config: DungeonConfig) -> List[Tuple[int, int]]:
    """Join every room into one connected structure, then add a few loops.

    Greedy nearest-neighbor growth: starting from room 0, repeatedly link the
    (connected, unconnected) pair with the smallest squared center distance.
    Afterwards ``len(rooms) // 4`` random room pairs get an extra corridor;
    those only create traversal loops and are not needed for solvability.
    Returns the carved links as index pairs.
    """
    links: List[Tuple[int, int]] = []
    if len(rooms) < 2:
        return links
    centers = [r.center for r in rooms]
    connected = [0]
    pending = set(range(1, len(rooms)))
    while pending:
        _, a, b = min(
            (_dist2(centers[a], centers[b]), a, b) for a in connected for b in sorted(pending)
        )
        carve_corridor(grid, centers[a], centers[b], rng, config)
        links.append((a, b))
        connected.append(b)
        pending.remove(b)
    for _ in range(len(rooms) // 4):
        a = rng.randrange(len(rooms))
        b = rng.randrange(len(rooms))
        if a == b:
            continue
        carve_corridor(grid, centers[a], centers[b], rng, config)
        links.append((a, b))
    return links


def carve_corridor(grid: Grid, a: Coord, b: Coord, rng, config: DungeonConfig):
    """L-shaped corridor between two centers, randomly horizontal- or vertical-first.

    The corridor is widened by ``corridor_half_width`` on each side so no
    generated corridor is a one-tile dead strip. The outer border ring stays WALL.
    """
    (x1, y1), (x2, y2) = a, b
    hw = config.corridor_half_width
    if rng.random() < 0.5:
        _carve_horizontal(grid, x1, x2, y1, hw)
        _carve_vertical(grid, y1, y2, x2, hw)
    else:
        _carve_vertical(grid, y1, y2, x1, hw)
        _carve_horizontal(grid, x1, x2, y2, hw)


def _carve_horizontal(grid: Grid, x1: int, x2: int, y: int, hw: int):
    for x in range(min(x1, x2), max(x1, x2) + 1):
        for off in range(-hw, hw + 1):
            _open(grid, x, y + off)


def _carve_vertical(grid: Grid, y1: int, y2: int, x: int, hw: int):
    for y in range(min(y1, y2), max(y1, y2) + 1):
        for off in range(-hw, hw + 1):
            _open(grid, x + off, y)


def _open(grid: Grid, x: int, y: int):
    if 1 <= x < len(grid) - 1 and 1 <= y < len(grid[0]) - 1 and grid[x][y] in (WALL, VOID):
        grid[x][y] = FLOOR


def _dist2(a: Coord, b: Coord) -> int:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


__all__ = ["connect_rooms", "carve_corridor"]
