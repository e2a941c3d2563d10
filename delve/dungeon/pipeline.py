"""Pipeline orchestration for floor generation.

``generate_floor`` is a pure function of ``(seed, depth, config)``: every
random decision draws from one ``random.Random`` seeded up front, so the same
inputs always yield the same grid, doors and monster layout. Monster ids are
the only thing taken from outside, via the ``ids`` iterator.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from delve.logging_utils import get_logger
from delve.models.entities import Monster

from .config import DungeonConfig
from .connectivity import farthest_point
from .doors import DoorPlacement, LockPlan, place_locks_and_keys
from .features import scatter_features
from .metrics import init_metrics
from .monsters import place_monsters
from .rng import make_rng
from .rooms import Room, fallback_room, place_rooms, room_target
from .tiles import SECRET_DOOR, STAIRS_DOWN, TRAP_HIDDEN, Coord, Grid, blank_grid, count_tiles
from .tunnels import connect_rooms

log = get_logger("delve.dungeon.pipeline")


@dataclass
class Floor:
    seed: int
    depth: int
    grid: Grid
    rooms: List[Room]
    spawn: Coord
    exit: Coord
    doors: List[DoorPlacement] = field(default_factory=list)
    monsters: List[Monster] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return len(self.grid)

    @property
    def height(self) -> int:
        return len(self.grid[0])


def generate_floor(
    seed: int,
    depth: int,
    config: Optional[DungeonConfig] = None,
    ids: Optional[Iterator[int]] = None,
    rng=None,
) -> Floor:
    """Build one floor: rooms, corridors, traps, stairs, lock-and-key chain, monsters.

    Adds ``phase_ms`` (phase name -> duration in ms) to the metrics when
    ``config.enable_metrics`` is set.
    """
    config = config or DungeonConfig()
    if rng is None:
        rng = make_rng(seed)
    metrics = init_metrics(seed, depth)
    phase_times: Dict[str, int] = {}

    if config.enable_metrics:
        start = time.perf_counter()

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

    else:

        def _phase(label, fn, *a, **k):
            return fn(*a, **k)

    grid = blank_grid(config.width, config.height)
    target = room_target(depth, config)
    rooms = _phase("rooms", place_rooms, grid, config, target, rng)
    metrics["rooms_target"] = target
    metrics["rooms_placed"] = len(rooms)
    if not rooms:
        rooms = [fallback_room(grid, config)]
        metrics["room_fallback"] = True

    links = _phase("corridors", connect_rooms, grid, rooms, rng, config)
    metrics["corridors"] = len(links)

    spawn = rooms[0].center
    _phase("features", scatter_features, grid, spawn, depth, rng, config)

    exit_pos, distance = _phase("stairs", farthest_point, grid, spawn)
    grid[exit_pos[0]][exit_pos[1]] = STAIRS_DOWN
    metrics["stairs_distance"] = distance

    plan = LockPlan()
    if not config.legacy_layout:
        plan = _phase("locks", place_locks_and_keys, grid, spawn, exit_pos, rng, config)
    metrics["path_length"] = plan.path_length
    metrics["doors_target"] = plan.target
    metrics["doors_placed"] = len(plan.doors)
    metrics["doors_forced"] = plan.forced
    metrics["door_rejections"] = dict(plan.rejections)

    monsters = _phase("monsters", place_monsters, grid, spawn, exit_pos, depth, rng, config, ids)
    metrics["monsters"] = len(monsters)
    metrics["traps"] = count_tiles(grid, TRAP_HIDDEN)
    metrics["secret_doors"] = count_tiles(grid, SECRET_DOOR)

    if config.enable_metrics:
        metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
        metrics["phase_ms"] = phase_times

    log.debug(
        event="floor_generated",
        seed=seed,
        depth=depth,
        rooms=len(rooms),
        doors=len(plan.doors),
        monsters=len(monsters),
        stairs_distance=distance,
    )
    return Floor(
        seed=seed,
        depth=depth,
        grid=grid,
        rooms=rooms,
        spawn=spawn,
        exit=exit_pos,
        doors=list(plan.doors),
        monsters=monsters,
        metrics=metrics,
    )


__all__ = ["Floor", "generate_floor"]
