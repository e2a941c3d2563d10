"""Turn engine: owns one run and resolves player intent into state changes.

A ``Game`` holds the mutable ``RunState`` and exposes it only through
immutable ``Snapshot`` copies and a drainable event queue. Floors are built
by the pure ``generate_floor`` pipeline from a seed minted by ``seed_source``
(wall clock by default; tests and the ``--seed`` flag inject a fixed source).

Move resolution order for one player step:
    1. Reject silently when the run is over, the target is off-map, WALL or VOID.
    2. SECRET_DOOR: reveal it, turn ends.
    3. LOCKED_DOOR: spend a key and keep going, or report it locked and end.
    4. Move; pick up a KEY; spring a hidden trap.
    5. Fight a monster on the destination tile.
    6. STAIRS_DOWN: descend (no monster turn).
    7. Otherwise every monster acts once.
"""

from __future__ import annotations

import itertools
from typing import Dict, List, Optional, Sequence, Tuple, Union

from delve.dungeon.config import DungeonConfig
from delve.dungeon.pipeline import Floor, generate_floor
from delve.dungeon.rng import SeedSource, make_rng, mint_seed
from delve.dungeon.tiles import BLOCKING, FLOOR, KEY, LOCKED_DOOR, SECRET_DOOR, STAIRS_DOWN, TRAP_HIDDEN
from delve.logging_utils import get_logger
from delve.models.entities import Player
from delve.models.events import DepthChanged, DoorLocked, DoorUnlocked, Event, KeyFound, SecretRevealed
from delve.models.run_state import RunState
from delve.models.snapshot import Snapshot

from .combat_service import end_run, resolve_combat, trigger_trap
from .monster_ai import monster_turn
from .score_store import MemoryScoreStore, ScoreStore

log = get_logger("delve.engine")

DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

Direction = Union[str, Sequence[int]]


def resolve_direction(direction: Direction) -> Tuple[int, int]:
    """Map a direction name or unit ``(dx, dy)`` pair to a step; raises ``ValueError`` otherwise."""
    if isinstance(direction, str):
        try:
            return DIRECTIONS[direction.strip().lower()]
        except KeyError:
            raise ValueError(f"unknown direction {direction!r}") from None
    try:
        dx, dy = (int(v) for v in direction)
    except (TypeError, ValueError):
        raise ValueError(f"unknown direction {direction!r}") from None
    if abs(dx) + abs(dy) != 1:
        raise ValueError(f"direction must be a unit step, got {(dx, dy)!r}")
    return dx, dy


class Game:
    def __init__(
        self,
        config: Optional[DungeonConfig] = None,
        score_store: Optional[ScoreStore] = None,
        seed_source: Optional[SeedSource] = None,
    ):
        self.config = config or DungeonConfig()
        self.score_store = score_store if score_store is not None else MemoryScoreStore()
        self.seed_source: SeedSource = seed_source or mint_seed
        self.best_score = int(self.score_store.load() or 0)
        # Monster ids stay unique for the lifetime of this object, across floors and restarts.
        self._ids = itertools.count(1)
        self.rng = None
        self.floor: Optional[Floor] = None
        self.state: RunState = self._new_state()
        self.regenerate_floor()
        log.info(event="run_started", seed=self.state.seed, economy=self.config.key_economy)

    def _new_state(self) -> RunState:
        return RunState(depth=1, tiles=[], player=Player.new(self.config))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_snapshot(self) -> Snapshot:
        return self.state.snapshot(self.best_score)

    def consume_events(self) -> List[Event]:
        events = list(self.state.events)
        self.state.events.clear()
        return events

    def restart(self):
        self.state = self._new_state()
        self.regenerate_floor()
        log.info(event="run_restarted", seed=self.state.seed)

    def collect_telemetry(self) -> Dict[str, object]:
        player = self.state.player
        return {
            "depth": self.state.depth,
            "hp": f"{player.hp} / {player.hp_max}",
            "xp": f"{player.xp} / {player.xp_max}",
            "lvl": player.level,
            "keys": player.keys,
            "monsters": len(self.state.monsters),
            "running": self.state.running,
        }

    def regenerate_floor(self, seed: Optional[int] = None) -> Floor:
        """Build a new floor for the current depth and drop the player on its spawn tile."""
        state = self.state
        if seed is None:
            seed = self.seed_source(state.depth)
        self.rng = make_rng(seed)
        floor = generate_floor(seed, state.depth, self.config, ids=self._ids, rng=self.rng)
        self.floor = floor
        state.seed = seed
        state.tiles = floor.grid
        state.monsters = list(floor.monsters)
        state.player.place(floor.spawn)
        return floor

    def handle_move(self, direction: Direction) -> bool:
        """Resolve one player step. Returns False when the move was rejected without a turn."""
        dx, dy = resolve_direction(direction)
        state = self.state
        if not state.running:
            return False
        player = state.player
        nx, ny = player.x + dx, player.y + dy
        if not state.in_bounds(nx, ny):
            return False
        tile = state.tile(nx, ny)
        if tile in BLOCKING:
            return False

        turn_start = len(state.events)

        if tile == SECRET_DOOR:
            state.set_tile(nx, ny, FLOOR)
            state.emit(SecretRevealed(nx, ny))
            return self._finish_turn(turn_start)

        if tile == LOCKED_DOOR:
            if player.keys <= 0:
                state.emit(DoorLocked(nx, ny))
                return self._finish_turn(turn_start)
            player.keys -= 1
            state.set_tile(nx, ny, FLOOR)
            state.emit(DoorUnlocked(nx, ny))

        player.place((nx, ny))

        if tile == KEY:
            player.keys += 1
            state.set_tile(nx, ny, FLOOR)
            state.emit(KeyFound(nx, ny))
        elif tile == TRAP_HIDDEN:
            trigger_trap(state, nx, ny, self.config)

        monster = state.monster_at(nx, ny)
        if monster is not None and state.running:
            resolve_combat(state, monster, self.config, self.rng)

        if tile == STAIRS_DOWN and state.running:
            self._advance_floor()
            return self._finish_turn(turn_start)

        if state.running:
            monster_turn(state, self.config, self.rng)
        return self._finish_turn(turn_start)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _finish_turn(self, turn_start: int) -> bool:
        produced = self.state.events[turn_start:]
        self.state.last_action = produced[-1] if produced else None
        return True

    def _advance_floor(self):
        state = self.state
        if state.depth >= self.config.max_depth:
            end_run(state, "max_depth")
            return
        state.depth += 1
        state.player.keys += self.config.floor_bonus_keys
        if state.depth > self.best_score:
            self.best_score = state.depth
            self.score_store.save(self.best_score)
        self.regenerate_floor()
        state.emit(DepthChanged(state.depth))
        log.info(event="floor_advanced", depth=state.depth, seed=state.seed, best=self.best_score)


__all__ = ["Game", "DIRECTIONS", "resolve_direction"]
