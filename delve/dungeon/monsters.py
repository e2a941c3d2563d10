"""Monster placement and depth scaling.

Stats are a smooth function of depth plus a tiny per-attempt jitter
(``level = depth + attempt * 0.01``), so deeper floors and later samples are
marginally tougher. Ids are drawn from an iterator owned by the caller; the
engine keeps one for the whole session so ids are never reused.
"""

from __future__ import annotations

import itertools
from typing import Iterator, List, Optional, Set

from delve.models.entities import Monster
from delve.models.xp import round_half_up

from .config import DungeonConfig
from .tiles import FLOOR, Coord, Grid, manhattan


def monster_count(depth: int, config: DungeonConfig) -> int:
    return min(config.max_monsters, config.base_monsters + depth // config.depths_per_extra_monster)


def monster_stats(level: float):
    """Return ``(hp, damage, xp)`` for an effective level."""
    hp = round_half_up(4 + level * 0.4)
    damage = round_half_up(2 + level * 0.35)
    xp = round_half_up(6 + level * 0.6)
    return hp, damage, xp


def place_monsters(
    grid: Grid,
    spawn: Coord,
    exit_pos: Coord,
    depth: int,
    rng,
    config: DungeonConfig,
    ids: Optional[Iterator[int]] = None,
) -> List[Monster]:
    """Sample FLOOR cells for monsters until the depth quota or the attempt budget runs out."""
    if ids is None:
        ids = itertools.count(1)
    floor_cells = [(x, y) for x in range(len(grid)) for y in range(len(grid[0])) if grid[x][y] == FLOOR]
    if not floor_cells:
        return []
    wanted = monster_count(depth, config)
    occupied: Set[Coord] = set()
    monsters: List[Monster] = []
    for attempt in range(config.monster_attempts):
        if len(monsters) >= wanted:
            break
        pos = rng.choice(floor_cells)
        if manhattan(pos, spawn) < config.monster_spawn_clearance or pos == exit_pos or pos in occupied:
            continue
        hp, damage, xp = monster_stats(depth + attempt * 0.01)
        monsters.append(Monster(id=next(ids), x=pos[0], y=pos[1], hp=hp, hp_max=hp, damage=damage, xp=xp))
        occupied.add(pos)
    return monsters


__all__ = ["monster_count", "monster_stats", "place_monsters"]
