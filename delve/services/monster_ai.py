"""Monster AI: wake on sight, then chase.

Dormant monsters wake when they have a clear Bresenham line to the player
within ``monster_view_range`` (Manhattan). Alerted monsters step one tile
toward the player per turn, trying the major axis first and the minor axis
second; blocked steps are skipped rather than pathed around.
"""

from __future__ import annotations

from typing import List, Tuple

from delve.dungeon.config import DungeonConfig
from delve.dungeon.tiles import OPAQUE, TRAVERSABLE, Grid
from delve.models.entities import Monster
from delve.models.run_state import RunState

from .combat_service import resolve_combat


def has_line_of_sight(grid: Grid, a: Tuple[int, int], b: Tuple[int, int], max_range: int) -> bool:
    """True when no opaque tile lies strictly between ``a`` and ``b``.

    Neither endpoint is tested, so a monster standing in a doorway still sees
    out and the player's own tile never blocks.
    """
    ax, ay = a
    bx, by = b
    dx = abs(bx - ax)
    dy = abs(by - ay)
    if dx + dy > max_range:
        return False
    sx = 1 if ax < bx else -1
    sy = 1 if ay < by else -1
    err = dx - dy
    x, y = ax, ay
    while (x, y) != (bx, by):
        if (x, y) != (ax, ay) and grid[x][y] in OPAQUE:
            return False
        e2 = err * 2
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
    return True


def step_candidates(monster: Monster, target: Tuple[int, int]) -> List[Tuple[int, int]]:
    """Unit steps toward ``target`` in preference order (horizontal wins ties)."""
    dx = target[0] - monster.x
    dy = target[1] - monster.y
    step_x = (dx > 0) - (dx < 0)
    step_y = (dy > 0) - (dy < 0)
    prefer_horizontal = abs(dx) >= abs(dy)
    steps = []
    if prefer_horizontal and step_x:
        steps.append((step_x, 0))
    if step_y:
        steps.append((0, step_y))
    if not prefer_horizontal and step_x:
        steps.append((step_x, 0))
    return steps


def step_toward(state: RunState, monster: Monster, target: Tuple[int, int]) -> bool:
    """Move ``monster`` one tile toward ``target``; returns False when every step is blocked."""
    for sx, sy in step_candidates(monster, target):
        nx, ny = monster.x + sx, monster.y + sy
        if not state.in_bounds(nx, ny) or state.tile(nx, ny) not in TRAVERSABLE:
            continue
        if any(other.id != monster.id and other.x == nx and other.y == ny for other in state.monsters):
            continue
        monster.x, monster.y = nx, ny
        return True
    return False


def monster_turn(state: RunState, config: DungeonConfig, rng):
    """Give every living monster one action. Stops as soon as the run ends."""
    if not state.running:
        return
    player = state.player
    for monster in list(state.monsters):
        if not monster.alive or monster not in state.monsters:
            continue
        if not monster.alerted:
            if not has_line_of_sight(state.tiles, monster.pos, player.pos, config.monster_view_range):
                continue
            monster.alerted = True
        if not state.running:
            break
        if monster.pos == player.pos:
            resolve_combat(state, monster, config, rng)
            if not state.running:
                break
            continue
        step_toward(state, monster, player.pos)
        if monster.pos == player.pos and state.running:
            resolve_combat(state, monster, config, rng)
            if not state.running:
                break


__all__ = ["has_line_of_sight", "step_candidates", "step_toward", "monster_turn"]
