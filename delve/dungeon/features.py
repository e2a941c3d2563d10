"""Feature scatter: hidden traps, plus the legacy secret/locked door sprinkle.

Candidates are shuffled once and popped from the end, so no cell is picked
twice and each placement is O(1). The legacy variant reuses the same shuffled
pool for secret doors and ungated locked doors; the lock-and-key pass in
``doors.py`` supersedes that for the default key economy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .config import DungeonConfig
from .tiles import FLOOR, LOCKED_DOOR, SECRET_DOOR, TRAP_HIDDEN, Coord, Grid, manhattan


@dataclass
class FeatureReport:
    traps: List[Coord] = field(default_factory=list)
    secret_doors: List[Coord] = field(default_factory=list)
    locked_doors: List[Coord] = field(default_factory=list)


def trap_count(depth: int, config: DungeonConfig) -> int:
    return min(config.max_traps, config.base_traps + depth // config.depths_per_extra_trap)


def scatter_features(grid: Grid, spawn: Coord, depth: int, rng, config: DungeonConfig) -> FeatureReport:
    width, height = len(grid), len(grid[0])
    candidates = [
        (x, y)
        for x in range(1, width - 1)
        for y in range(1, height - 1)
        if grid[x][y] == FLOOR and manhattan((x, y), spawn) > config.trap_spawn_clearance
    ]
    rng.shuffle(candidates)
    report = FeatureReport()
    report.traps = _pop_into(grid, candidates, trap_count(depth, config), TRAP_HIDDEN)
    if config.legacy_layout:
        report.secret_doors = _pop_into(grid, candidates, config.legacy_secret_doors, SECRET_DOOR)
        report.locked_doors = _pop_into(grid, candidates, 1 + depth // 20, LOCKED_DOOR)
    return report


def _pop_into(grid: Grid, candidates: List[Coord], count: int, tile: str) -> List[Coord]:
    placed = []
    for _ in range(count):
        if not candidates:
            break
        x, y = candidates.pop()
        grid[x][y] = tile
        placed.append((x, y))
    return placed


__all__ = ["FeatureReport", "trap_count", "scatter_features"]
