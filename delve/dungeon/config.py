from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping

KEY_ECONOMIES = ("placed", "legacy")
ENV_PREFIX = "DELVE_"


@dataclass
class DungeonConfig:
    # Map
    width: int = 31
    height: int = 31
    # Rooms
    base_rooms: int = 6
    max_rooms: int = 10
    depths_per_extra_room: int = 4
    min_room_size: int = 4
    max_room_size: int = 7
    room_padding: int = 1
    room_attempts_per_room: int = 30
    corridor_half_width: int = 1
    # Traps / legacy scatter
    base_traps: int = 2
    max_traps: int = 6
    depths_per_extra_trap: int = 5
    trap_spawn_clearance: int = 2
    legacy_secret_doors: int = 2
    # Monsters
    base_monsters: int = 8
    max_monsters: int = 20
    depths_per_extra_monster: int = 3
    monster_attempts: int = 200
    monster_spawn_clearance: int = 4
    monster_view_range: int = 9
    # Lock-and-key puzzle
    max_doors: int = 3
    path_steps_per_door: int = 12
    min_door_spacing: int = 4
    door_end_margin: int = 2
    door_candidate_pool: int = 4
    max_barrier_span: int = 10
    # Run rules
    max_depth: int = 100
    player_hp: int = 18
    player_xp_max: int = 15
    trap_min_damage: int = 4
    trap_damage_ratio: float = 0.15
    key_economy: str = "placed"
    key_drop_chance: float = 0.0
    floor_bonus_keys: int = 0
    enable_metrics: bool = True

    def __post_init__(self):
        if self.key_economy not in KEY_ECONOMIES:
            raise ValueError(f"key_economy must be one of {KEY_ECONOMIES}, got {self.key_economy!r}")
        if self.min_room_size < 1 or self.max_room_size < self.min_room_size:
            raise ValueError("room size bounds are inverted")
        if self.max_room_size > min(self.width, self.height) - 4:
            raise ValueError("max_room_size does not fit inside the map border")
        if not 0.0 <= self.key_drop_chance <= 1.0:
            raise ValueError("key_drop_chance must be within [0, 1]")
        if self.max_depth < 1:
            raise ValueError("max_depth must be >= 1")

    @property
    def legacy_layout(self) -> bool:
        return self.key_economy == "legacy"

    @classmethod
    def legacy(cls, **overrides) -> "DungeonConfig":
        """Earlier rule set: scattered secret/locked doors, 15% key drops, one key per floor."""
        base = dict(
            width=21,
            height=21,
            min_room_size=4,
            max_room_size=6,
            key_economy="legacy",
            key_drop_chance=0.15,
            floor_bonus_keys=1,
        )
        base.update(overrides)
        return cls(**base)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DungeonConfig":
        """Build a config from ``DELVE_<FIELD>`` environment overrides."""
        env = os.environ if environ is None else environ
        economy = env.get(ENV_PREFIX + "KEY_ECONOMY", "").strip().lower()
        config = cls.legacy() if economy == "legacy" else cls()
        overrides = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or f.name == "key_economy":
                continue
            overrides[f.name] = _coerce(raw, getattr(config, f.name))
        return replace(config, **overrides) if overrides else config


def _coerce(raw: str, current):
    # bool before int: bool is an int subclass
    if isinstance(current, bool):
        return raw.strip().lower() not in {"0", "false", "no", ""}
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    return raw


__all__ = ["DungeonConfig", "KEY_ECONOMIES"]
