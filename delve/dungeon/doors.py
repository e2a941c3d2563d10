"""Door logic: lock-and-key gating along the critical path.

Doors are placed on the shortest spawn-to-exit path. Each door is sealed by a
wall barrier built perpendicular to the path, and its key is placed earlier on
the path, in the region that is reachable before the door. Every grid write
goes through an ``UndoLog`` so a rejected candidate leaves no trace.

Functions mutate ``grid`` in place; rejected candidates are counted per reason
on the returned ``LockPlan``.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .connectivity import flood_fill, is_reachable, navigable_neighbors, shortest_path
from .tiles import BLOCKING, FLOOR, KEY, LOCKED_DOOR, STAIRS_DOWN, WALL, Coord, Grid, in_bounds

log = get_logger("delve.dungeon.doors")

_BARRIER_STOPPERS = frozenset({LOCKED_DOOR, STAIRS_DOWN, KEY})


@dataclass(frozen=True)
class DoorPlacement:
    door: Coord
    key: Coord
    door_index: int
    key_index: int
    forced: bool = False


@dataclass
class LockPlan:
    doors: List[DoorPlacement] = field(default_factory=list)
    path_length: int = 0
    target: int = 0
    forced: bool = False
    rejections: Dict[str, int] = field(default_factory=dict)


class UndoLog:
    """Records ``(pos, previous_tile)`` for every write so it can be replayed backwards."""

    def __init__(self, grid: Grid):
        self.grid = grid
        self.entries: List[Tuple[Coord, str]] = []

    def write(self, pos: Coord, tile: str):
        x, y = pos
        self.entries.append((pos, self.grid[x][y]))
        self.grid[x][y] = tile

    def revert(self):
        while self.entries:
            (x, y), previous = self.entries.pop()
            self.grid[x][y] = previous

    def __len__(self):
        return len(self.entries)


def build_barrier(
    grid: Grid,
    pos: Coord,
    direction: Coord,
    forbidden: Set[Coord],
    undo: UndoLog,
    max_span: int,
) -> bool:
    """Wall off both sides of ``pos`` perpendicular to ``direction``.

    Each arm walks outward until it meets WALL/VOID or the grid edge. Returns
    False (leaving the written tiles in ``undo`` for the caller to revert) when
    an arm touches a forbidden coordinate, a door, the stairs or a key, or runs
    longer than ``max_span`` without closing.
    """
    dx, dy = direction
    for px, py in ((dy, dx), (-dy, -dx)):
        for step in range(1, max_span + 1):
            cx, cy = pos[0] + px * step, pos[1] + py * step
            if not in_bounds(grid, cx, cy) or grid[cx][cy] in BLOCKING:
                break
            if (cx, cy) in forbidden or grid[cx][cy] in _BARRIER_STOPPERS:
                return False
            undo.write((cx, cy), WALL)
        else:
            return False
    return True


def verify_solvable(grid: Grid, spawn: Coord, exit_pos: Coord, doors: Sequence[DoorPlacement]) -> bool:
    """Walk the door chain in order: key, then door, with earlier doors open; then the exit."""
    opened: List[Coord] = []
    for placement in doors:
        if not is_reachable(grid, spawn, placement.key, open_doors=opened):
            return False
        if not is_reachable(grid, spawn, placement.door, open_doors=opened + [placement.door]):
            return False
        opened.append(placement.door)
    return is_reachable(grid, spawn, exit_pos, open_doors=opened)


def door_target(path_length: int, candidates: int, config: DungeonConfig) -> int:
    target = max(1, min(config.max_doors, path_length // config.path_steps_per_door + 1))
    return min(target, candidates)


def place_locks_and_keys(grid: Grid, spawn: Coord, exit_pos: Coord, rng, config: DungeonConfig) -> LockPlan:
    """Gate the critical path with up to ``config.max_doors`` locked doors and their keys.

    Zero doors is a valid outcome (short path, or every candidate bypassable).
    When the chokepoint pass places nothing, a forced pass walks every candidate
    in path order without the chokepoint requirement, building the chain up to
    the same target.
    """
    plan = LockPlan()
    path = shortest_path(grid, spawn, exit_pos)
    if path is None or len(path) < 3:
        return plan
    plan.path_length = len(path)
    index = {pos: i for i, pos in enumerate(path)}
    candidates = [pos for pos in path[1:-1] if grid[pos[0]][pos[1]] == FLOOR]
    plan.target = door_target(len(path), len(candidates), config)
    if plan.target == 0:
        return plan

    rng.shuffle(candidates)
    pool = sorted(candidates[: plan.target * config.door_candidate_pool], key=index.get)
    rejections: Counter = Counter()
    placer = _ChainPlacer(grid, spawn, exit_pos, path, index, rng, config, rejections)

    for candidate in pool:
        if len(placer.placed) >= plan.target:
            break
        placer.try_candidate(candidate, require_chokepoint=True)

    if not placer.placed:
        plan.forced = True
        for candidate in sorted(candidates, key=index.get):
            if len(placer.placed) >= plan.target:
                break
            placer.try_candidate(candidate, require_chokepoint=False, forced=True)

    plan.doors = list(placer.placed)
    plan.rejections = dict(rejections)
    return plan


class _ChainPlacer:
    """Mutable state of one placement run: committed doors, keys and the approach point."""

    def __init__(self, grid, spawn, exit_pos, path, index, rng, config, rejections):
        self.grid = grid
        self.spawn = spawn
        self.exit_pos = exit_pos
        self.path = path
        self.index = index
        self.rng = rng
        self.config = config
        self.rejections = rejections
        self.placed: List[DoorPlacement] = []
        self.used_keys: Set[Coord] = set()
        self.last_index: Optional[int] = None
        self.approach: Coord = spawn

    def _reject(self, reason: str, candidate: Coord) -> bool:
        self.rejections[reason] += 1
        log.debug(event="door_rejected", reason=reason, x=candidate[0], y=candidate[1])
        return False

    def try_candidate(self, candidate: Coord, *, require_chokepoint: bool, forced: bool = False) -> bool:
        grid, cfg = self.grid, self.config
        i = self.index[candidate]
        end = len(self.path) - 1
        if grid[candidate[0]][candidate[1]] != FLOOR:
            return self._reject("not_floor", candidate)
        if self.last_index is not None and i - self.last_index < cfg.min_door_spacing:
            return self._reject("spacing", candidate)
        if i <= cfg.door_end_margin or end - i <= cfg.door_end_margin:
            return self._reject("end_margin", candidate)
        if require_chokepoint and navigable_neighbors(grid, candidate) >= 3:
            return self._reject("not_chokepoint", candidate)

        prev_pos, next_pos = self.path[i - 1], self.path[i + 1]
        direction = (candidate[0] - prev_pos[0], candidate[1] - prev_pos[1])
        forbidden = {self.spawn, self.exit_pos, self.approach, prev_pos, next_pos} | self.used_keys
        undo = UndoLog(grid)
        if not build_barrier(grid, candidate, direction, forbidden, undo, cfg.max_barrier_span):
            undo.revert()
            return self._reject("barrier", candidate)

        opened = [p.door for p in self.placed]
        if is_reachable(grid, self.spawn, self.exit_pos, open_doors=opened, blocked=(candidate,)):
            undo.revert()
            return self._reject("bypass", candidate)
        if not is_reachable(grid, self.spawn, self.exit_pos, open_doors=opened):
            undo.revert()
            return self._reject("severed", candidate)

        key = self._choose_key(candidate, i, opened)
        if key is None:
            undo.revert()
            return self._reject("no_key", candidate)

        undo.write(candidate, LOCKED_DOOR)
        undo.write(key, KEY)
        placement = DoorPlacement(candidate, key, i, self.index[key], forced)
        if not verify_solvable(grid, self.spawn, self.exit_pos, self.placed + [placement]):
            undo.revert()
            return self._reject("unsolvable", candidate)

        self.placed.append(placement)
        self.used_keys.add(key)
        self.last_index = i
        self.approach = next_pos
        log.debug(event="door_placed", x=candidate[0], y=candidate[1], key=key, index=i, forced=forced)
        return True

    def _choose_key(self, candidate: Coord, i: int, opened: List[Coord]) -> Optional[Coord]:
        reach = flood_fill(self.grid, self.approach, open_doors=opened, blocked=(candidate,))
        low = self.last_index if self.last_index is not None else 0
        options = [
            pos
            for pos in self.path[low + 1 : i]
            if pos in reach
            and self.grid[pos[0]][pos[1]] == FLOOR
            and pos not in (self.spawn, self.exit_pos)
            and pos not in self.used_keys
        ]
        if not options:
            return None
        return self.rng.choice(options)


__all__ = [
    "DoorPlacement",
    "LockPlan",
    "UndoLog",
    "build_barrier",
    "door_target",
    "place_locks_and_keys",
    "verify_solvable",
]
