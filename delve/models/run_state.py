"""Mutable state of a single run, owned by ``Game``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from delve.dungeon.tiles import Grid

from .entities import Monster, Player
from .events import Event
from .snapshot import Snapshot


@dataclass
class RunState:
    depth: int
    tiles: Grid
    player: Player
    monsters: List[Monster] = field(default_factory=list)
    running: bool = True
    events: List[Event] = field(default_factory=list)
    last_action: Optional[Event] = None
    seed: int = 0

    def tile(self, x: int, y: int) -> str:
        return self.tiles[x][y]

    def set_tile(self, x: int, y: int, tile: str):
        self.tiles[x][y] = tile

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < len(self.tiles) and 0 <= y < len(self.tiles[0])

    def monster_at(self, x: int, y: int) -> Optional[Monster]:
        for monster in self.monsters:
            if monster.x == x and monster.y == y and monster.alive:
                return monster
        return None

    def remove_monster(self, monster: Monster):
        self.monsters = [m for m in self.monsters if m.id != monster.id]

    def emit(self, event: Event):
        self.events.append(event)

    def snapshot(self, best_score: int) -> Snapshot:
        return Snapshot(
            depth=self.depth,
            tiles=tuple(tuple(column) for column in self.tiles),
            player=self.player.view(),
            monsters=tuple(m.view() for m in self.monsters),
            running=self.running,
            last_action=self.last_action,
            best_score=best_score,
        )


__all__ = ["RunState"]
