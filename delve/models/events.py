"""Turn events emitted by the engine.

A closed family of frozen dataclasses. Each carries only its own fields plus a
``kind`` tag used on the wire (``to_dict()`` -> ``{"type": kind, ...}``).
Presentation layers map kinds to sounds, log lines and flashes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import ClassVar, Union


class _EventMixin:
    kind: ClassVar[str] = ""

    def to_dict(self):
        data = {"type": self.kind}
        data.update(asdict(self))
        return data


@dataclass(frozen=True)
class SecretRevealed(_EventMixin):
    kind: ClassVar[str] = "secret-revealed"
    x: int
    y: int


@dataclass(frozen=True)
class DoorLocked(_EventMixin):
    kind: ClassVar[str] = "door-locked"
    x: int
    y: int


@dataclass(frozen=True)
class DoorUnlocked(_EventMixin):
    kind: ClassVar[str] = "door-unlocked"
    x: int
    y: int


@dataclass(frozen=True)
class KeyFound(_EventMixin):
    kind: ClassVar[str] = "key-found"
    x: int
    y: int


@dataclass(frozen=True)
class Trap(_EventMixin):
    kind: ClassVar[str] = "trap"
    amount: int
    x: int
    y: int


@dataclass(frozen=True)
class Combat(_EventMixin):
    kind: ClassVar[str] = "combat"
    monster_id: int
    player_damage: int
    monster_damage: int
    monster_hp: int


@dataclass(frozen=True)
class MonsterDefeated(_EventMixin):
    kind: ClassVar[str] = "monster-defeated"
    monster_id: int


@dataclass(frozen=True)
class XpGained(_EventMixin):
    kind: ClassVar[str] = "xp"
    amount: int


@dataclass(frozen=True)
class LevelUp(_EventMixin):
    kind: ClassVar[str] = "level-up"
    level: int
    full_heal: bool = True


@dataclass(frozen=True)
class KeyDrop(_EventMixin):
    kind: ClassVar[str] = "key-drop"


@dataclass(frozen=True)
class PlayerDefeated(_EventMixin):
    kind: ClassVar[str] = "player-defeated"


@dataclass(frozen=True)
class DepthChanged(_EventMixin):
    kind: ClassVar[str] = "depth"
    depth: int


Event = Union[
    SecretRevealed,
    DoorLocked,
    DoorUnlocked,
    KeyFound,
    Trap,
    Combat,
    MonsterDefeated,
    XpGained,
    LevelUp,
    KeyDrop,
    PlayerDefeated,
    DepthChanged,
]

EVENT_KINDS = {
    cls.kind: cls
    for cls in (
        SecretRevealed,
        DoorLocked,
        DoorUnlocked,
        KeyFound,
        Trap,
        Combat,
        MonsterDefeated,
        XpGained,
        LevelUp,
        KeyDrop,
        PlayerDefeated,
        DepthChanged,
    )
}


__all__ = [
    "Event",
    "EVENT_KINDS",
    "SecretRevealed",
    "DoorLocked",
    "DoorUnlocked",
    "KeyFound",
    "Trap",
    "Combat",
    "MonsterDefeated",
    "XpGained",
    "LevelUp",
    "KeyDrop",
    "PlayerDefeated",
    "DepthChanged",
]
