# Tile constants centralized for modular imports
from typing import Iterable, List, Tuple

VOID = " "
FLOOR = "."
WALL = "#"
LOCKED_DOOR = "+"
SECRET_DOOR = "S"  # legacy scatter only; reveals to FLOOR when bumped
TRAP_HIDDEN = "^"
TRAP_TRIGGERED = "x"
STAIRS_DOWN = ">"
KEY = "k"

ALL_TILES = frozenset({VOID, FLOOR, WALL, LOCKED_DOOR, SECRET_DOOR, TRAP_HIDDEN, TRAP_TRIGGERED, STAIRS_DOWN, KEY})

# Tiles a walker may stand on. Locked doors are passable only when explicitly opened.
TRAVERSABLE = frozenset({FLOOR, TRAP_HIDDEN, TRAP_TRIGGERED, KEY, STAIRS_DOWN})
OPAQUE = frozenset({VOID, WALL, LOCKED_DOOR, SECRET_DOOR})
BLOCKING = frozenset({VOID, WALL})

Grid = List[List[str]]
Coord = Tuple[int, int]

ORTHOGONAL = ((1, 0), (-1, 0), (0, 1), (0, -1))


def blank_grid(width: int, height: int, fill: str = WALL) -> Grid:
    """Column-major grid (``grid[x][y]``) filled with ``fill``."""
    return [[fill for _ in range(height)] for _ in range(width)]


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    return 0 <= x < len(grid) and 0 <= y < len(grid[0])


def grid_rows(grid: Grid) -> List[str]:
    """Render the grid as row strings (y major) for JSON and terminals."""
    width = len(grid)
    height = len(grid[0]) if width else 0
    return ["".join(grid[x][y] for x in range(width)) for y in range(height)]


def grid_from_rows(rows: Iterable[str]) -> Grid:
    """Inverse of ``grid_rows``; rows must share one width."""
    rows = list(rows)
    if not rows:
        return []
    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise ValueError("rows must all have the same width")
    return [[rows[y][x] for y in range(len(rows))] for x in range(width)]


def count_tiles(grid: Grid, tile: str) -> int:
    return sum(column.count(tile) for column in grid)


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


__all__ = [
    "VOID",
    "FLOOR",
    "WALL",
    "LOCKED_DOOR",
    "SECRET_DOOR",
    "TRAP_HIDDEN",
    "TRAP_TRIGGERED",
    "STAIRS_DOWN",
    "KEY",
    "ALL_TILES",
    "TRAVERSABLE",
    "OPAQUE",
    "BLOCKING",
    "ORTHOGONAL",
    "Grid",
    "Coord",
    "blank_grid",
    "in_bounds",
    "grid_rows",
    "grid_from_rows",
    "count_tiles",
    "manhattan",
]
