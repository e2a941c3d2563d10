"""Read-only view of a run, handed to presentation layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .entities import MonsterView, PlayerView
from .events import Event


@dataclass(frozen=True)
class Snapshot:
    depth: int
    tiles: Tuple[Tuple[str, ...], ...]
    player: PlayerView
    monsters: Tuple[MonsterView, ...]
    running: bool
    last_action: Optional[Event]
    best_score: int

    @property
    def width(self) -> int:
        return len(self.tiles)

    @property
    def height(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    def tile_at(self, x: int, y: int) -> str:
        return self.tiles[x][y]

    def rows(self):
        return ["".join(self.tiles[x][y] for x in range(self.width)) for y in range(self.height)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "depth": self.depth,
            "width": self.width,
            "height": self.height,
            "tiles": self.rows(),
            "player": self.player.to_dict(),
            "monsters": [m.to_dict() for m in self.monsters],
            "running": self.running,
            "last_action": self.last_action.to_dict() if self.last_action is not None else None,
            "best_score": self.best_score,
        }


__all__ = ["Snapshot"]
