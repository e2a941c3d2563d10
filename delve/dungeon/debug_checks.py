"""Structural checks for a generated floor.

Used by ``scripts/diagnose_seeds.py`` and the structure tests. ``analyze``
never raises on a bad floor; it reports every violation it finds and sets
``ok`` to False.
"""

from __future__ import annotations

from typing import Any, Dict

from .connectivity import flood_fill, is_reachable
from .doors import verify_solvable
from .pipeline import Floor
from .tiles import FLOOR, KEY, LOCKED_DOOR, SECRET_DOOR, STAIRS_DOWN, count_tiles, manhattan


def analyze(floor: Floor, spawn_clearance: int = 4) -> Dict[str, Any]:
    grid = floor.grid
    door_tiles = [d.door for d in floor.doors]
    report: Dict[str, Any] = {
        "seed": floor.seed,
        "depth": floor.depth,
        "stairs": count_tiles(grid, STAIRS_DOWN),
        "reachable_from_spawn": len(flood_fill(grid, floor.spawn)),
        "doors": len(floor.doors),
        "solvable": _solvable(floor),
        "ungated_doors": [],
        "misplaced_keys": [],
        "bad_tiles": [],
        "monster_overlaps": [],
        "monsters_off_floor": [],
        "monsters_near_spawn": [],
    }

    opened = []
    for placement in floor.doors:
        dx, dy = placement.door
        if grid[dx][dy] != LOCKED_DOOR:
            report["bad_tiles"].append({"pos": placement.door, "expected": LOCKED_DOOR})
        kx, ky = placement.key
        if grid[kx][ky] != KEY:
            report["bad_tiles"].append({"pos": placement.key, "expected": KEY})
        if is_reachable(grid, floor.spawn, floor.exit, open_doors=opened):
            report["ungated_doors"].append(placement.door)
        if not is_reachable(grid, floor.spawn, placement.key, open_doors=opened):
            report["misplaced_keys"].append(placement.key)
        if placement.key_index >= placement.door_index:
            report["misplaced_keys"].append(placement.key)
        opened.append(placement.door)

    seen = set()
    for monster in floor.monsters:
        pos = monster.pos
        if pos in seen:
            report["monster_overlaps"].append(pos)
        seen.add(pos)
        if grid[pos[0]][pos[1]] != FLOOR or pos in door_tiles:
            report["monsters_off_floor"].append(pos)
        if manhattan(pos, floor.spawn) < spawn_clearance:
            report["monsters_near_spawn"].append(pos)

    report["ok"] = (
        report["stairs"] == 1
        and report["reachable_from_spawn"] > 0
        and report["solvable"]
        and not report["ungated_doors"]
        and not report["misplaced_keys"]
        and not report["bad_tiles"]
        and not report["monster_overlaps"]
        and not report["monsters_off_floor"]
        and not report["monsters_near_spawn"]
    )
    return report


def _solvable(floor: Floor) -> bool:
    if floor.doors:
        return verify_solvable(floor.grid, floor.spawn, floor.exit, floor.doors)
    # Legacy floors: scattered doors open with bonus keys, secret doors open on bump.
    relaxed = [[FLOOR if t in (LOCKED_DOOR, SECRET_DOOR) else t for t in column] for column in floor.grid]
    return is_reachable(relaxed, floor.spawn, floor.exit)


__all__ = ["analyze"]
