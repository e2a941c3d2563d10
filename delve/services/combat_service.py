"""Melee combat, XP and trap resolution.

Responsibilities:
    * Resolve one exchange between the player and a monster (player hits first,
      the monster retaliates in the same call).
    * Grant XP with cascading level-ups.
    * Roll the optional key drop on a kill.
    * Spring hidden traps.

Every helper mutates the given ``RunState`` and appends events to
``state.events``; none of them raise for game situations.
"""

from __future__ import annotations

import math

from delve.dungeon.config import DungeonConfig
from delve.dungeon.tiles import TRAP_TRIGGERED
from delve.logging_utils import get_logger
from delve.models.entities import Monster
from delve.models.events import (
    Combat,
    KeyDrop,
    LevelUp,
    MonsterDefeated,
    PlayerDefeated,
    Trap,
    XpGained,
)
from delve.models.run_state import RunState
from delve.models.xp import next_hp_max, next_xp_max

log = get_logger("delve.combat")


def player_damage(level: int, depth: int) -> int:
    return max(3, math.floor(level * 2 + depth * 0.3))


def trap_damage(hp_max: int, config: DungeonConfig) -> int:
    return max(config.trap_min_damage, math.floor(hp_max * config.trap_damage_ratio))


def end_run(state: RunState, reason: str):
    state.running = False
    log.info(event="run_ended", reason=reason, depth=state.depth, level=state.player.level)


def resolve_combat(state: RunState, monster: Monster, config: DungeonConfig, rng):
    """Player strikes ``monster``; a surviving monster hits back in full, a dying one for half."""
    player = state.player
    dealt = player_damage(player.level, state.depth)
    monster.alerted = True
    monster.hp = max(0, monster.hp - dealt)
    taken = monster.damage if monster.hp > 0 else monster.damage // 2
    player.hp = max(0, player.hp - taken)
    state.emit(Combat(monster.id, dealt, taken, monster.hp))

    if monster.hp <= 0:
        state.remove_monster(monster)
        state.emit(MonsterDefeated(monster.id))
        grant_xp(state, monster.xp)
        if config.key_drop_chance > 0 and rng.random() < config.key_drop_chance:
            player.keys += 1
            state.emit(KeyDrop())

    if player.hp <= 0:
        end_run(state, "slain")
        state.emit(PlayerDefeated())


def grant_xp(state: RunState, amount: int):
    """Add XP, levelling up as many times as the total allows (each level fully heals)."""
    player = state.player
    player.xp += amount
    state.emit(XpGained(amount))
    while player.xp >= player.xp_max:
        player.xp -= player.xp_max
        player.level += 1
        player.hp_max = next_hp_max(player.hp_max)
        player.hp = player.hp_max
        player.xp_max = next_xp_max(player.xp_max)
        state.emit(LevelUp(player.level, True))


def trigger_trap(state: RunState, x: int, y: int, config: DungeonConfig):
    player = state.player
    amount = trap_damage(player.hp_max, config)
    player.hp = max(0, player.hp - amount)
    state.set_tile(x, y, TRAP_TRIGGERED)
    state.emit(Trap(amount, x, y))
    if player.hp <= 0:
        end_run(state, "trap")
        state.emit(PlayerDefeated())


__all__ = ["player_damage", "trap_damage", "resolve_combat", "grant_xp", "trigger_trap", "end_run"]
