import random
from dataclasses import dataclass
from typing import List, Tuple

from .config import DungeonConfig
from .tiles import FLOOR, Grid


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)


def room_target(depth: int, config: DungeonConfig) -> int:
    """Requested room count for ``depth``: grows every few floors, capped."""
    return min(config.max_rooms, config.base_rooms + (depth - 1) // config.depths_per_extra_room)


def place_rooms(grid: Grid, config: DungeonConfig, target: int, rng=None) -> List[Room]:
    """Scatter up to ``target`` non-overlapping rooms and carve them as FLOOR.

    Each sample is rejected if it overlaps an accepted room (plus padding). The
    attempt budget is ``target * room_attempts_per_room``; the returned list may
    therefore be shorter than requested, or empty.
    """
    if rng is None:
        rng = random
    attempts = target * config.room_attempts_per_room
    rooms: List[Room] = []
    while len(rooms) < target and attempts > 0:
        attempts -= 1
        w = rng.randint(config.min_room_size, config.max_room_size)
        h = rng.randint(config.min_room_size, config.max_room_size)
        x = rng.randint(1, max(1, config.width - w - 2))
        y = rng.randint(1, max(1, config.height - h - 2))
        new_room = Room(x, y, w, h)
        if _room_overlaps(new_room, rooms, config.room_padding):
            continue
        _carve(grid, new_room)
        rooms.append(new_room)
    return rooms


def fallback_room(grid: Grid, config: DungeonConfig) -> Room:
    """Fixed room used when placement produced nothing."""
    size = min(config.max_room_size, config.width - 3, config.height - 3)
    room = Room(1, 1, size, size)
    _carve(grid, room)
    return room


def _carve(grid: Grid, room: Room):
    for ix, iy in room.cells():
        grid[ix][iy] = FLOOR


def _room_overlaps(room: Room, existing: List[Room], pad: int) -> bool:
    for r in existing:
        if (
            room.x - pad < r.x + r.w
            and room.x + room.w + pad > r.x
            and room.y - pad < r.y + r.h
            and room.y + room.h + pad > r.y
        ):
            return True
    return False


__all__ = ["Room", "room_target", "place_rooms", "fallback_room"]
