"""In-run entities: the player and monsters.

These are plain mutable dataclasses owned by ``RunState``; callers outside the
engine only ever see the frozen ``PlayerView`` / ``MonsterView`` copies
produced by ``view()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from delve.dungeon.config import DungeonConfig


@dataclass(frozen=True)
class PlayerView:
    x: int
    y: int
    hp: int
    hp_max: int
    xp: int
    xp_max: int
    level: int
    keys: int

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "hp": self.hp,
            "hp_max": self.hp_max,
            "xp": self.xp,
            "xp_max": self.xp_max,
            "level": self.level,
            "keys": self.keys,
        }


@dataclass(frozen=True)
class MonsterView:
    id: int
    x: int
    y: int
    hp: int
    hp_max: int
    damage: int
    xp: int
    alerted: bool

    def to_dict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "hp": self.hp,
            "hp_max": self.hp_max,
            "damage": self.damage,
            "xp": self.xp,
            "alerted": self.alerted,
        }


@dataclass
class Player:
    x: int = 0
    y: int = 0
    hp: int = 18
    hp_max: int = 18
    xp: int = 0
    xp_max: int = 15
    level: int = 1
    keys: int = 0

    @classmethod
    def new(cls, config: DungeonConfig) -> "Player":
        return cls(hp=config.player_hp, hp_max=config.player_hp, xp_max=config.player_xp_max)

    @property
    def pos(self):
        return (self.x, self.y)

    def place(self, pos):
        self.x, self.y = pos

    def view(self) -> PlayerView:
        return PlayerView(self.x, self.y, self.hp, self.hp_max, self.xp, self.xp_max, self.level, self.keys)


@dataclass
class Monster:
    id: int
    x: int
    y: int
    hp: int
    hp_max: int
    damage: int
    xp: int
    alerted: bool = False

    @property
    def pos(self):
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def view(self) -> MonsterView:
        return MonsterView(self.id, self.x, self.y, self.hp, self.hp_max, self.damage, self.xp, self.alerted)


__all__ = ["Player", "Monster", "PlayerView", "MonsterView"]
