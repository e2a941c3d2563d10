import pytest

from delve.dungeon.config import DungeonConfig
from delve.dungeon.rng import SEED_DEPTH_STRIDE
from delve.dungeon.tiles import FLOOR, TRAP_TRIGGERED
from delve.models.events import (
    Combat,
    DepthChanged,
    DoorLocked,
    DoorUnlocked,
    KeyDrop,
    KeyFound,
    LevelUp,
    MonsterDefeated,
    PlayerDefeated,
    SecretRevealed,
    Trap,
    XpGained,
)
from delve.services import game_engine
from delve.services.game_engine import resolve_direction
from delve.services.monster_ai import monster_turn
from tests.dungeon_test_utils import new_game, stage


def test_trap_springs_once():
    game = new_game()
    state = stage(game, ["#####", "#.^.#", "#####"], (1, 1))
    assert game.handle_move("right")
    assert state.player.hp == 14
    assert state.tile(2, 1) == TRAP_TRIGGERED
    assert game.consume_events() == [Trap(4, 2, 1)]
    assert state.last_action == Trap(4, 2, 1)
    # walk off and back on: a triggered trap is inert
    game.handle_move("left")
    game.handle_move("right")
    assert state.player.hp == 14
    assert game.consume_events() == []


def test_kill_grants_xp_and_levels_up():
    game = new_game()
    state = stage(game, ["######", "#....#", "######"], (1, 1), monsters=[(2, 1, 3, 5, 15)])
    assert game.handle_move("right")
    assert state.player.pos == (2, 1)
    assert game.consume_events() == [
        Combat(900, 3, 2, 0),
        MonsterDefeated(900),
        XpGained(15),
        LevelUp(2, True),
    ]
    player = state.player
    assert (player.level, player.hp, player.hp_max, player.xp, player.xp_max) == (2, 26, 26, 0, 29)
    assert state.monsters == []


def test_surviving_monster_hits_back_in_full():
    game = new_game()
    state = stage(game, ["######", "#....#", "######"], (1, 1), monsters=[(2, 1, 10, 4, 5)])
    game.handle_move("right")
    # the monster shares the tile, so its own turn is a second exchange
    assert game.consume_events() == [Combat(900, 3, 4, 7), Combat(900, 3, 4, 4)]
    assert state.player.hp == 10
    assert state.monsters[0].alerted


def _watch_monster_turns(monkeypatch):
    calls = []

    def spy(state, config, rng):
        calls.append(state.depth)
        return monster_turn(state, config, rng)

    monkeypatch.setattr(game_engine, "monster_turn", spy)
    return calls


def _stage_watcher(game, map_rows):
    """Stage a map with an alerted monster at (3, 2) that would step toward the player."""
    state = stage(game, map_rows, (1, 1), monsters=[(3, 2, 10, 2, 5)])
    state.monsters[0].alerted = True
    return state


def test_locked_door_without_key_blocks(monkeypatch):
    turns = _watch_monster_turns(monkeypatch)
    game = new_game()
    state = _stage_watcher(game, ["######", "#.+..#", "#....#", "######"])
    assert game.handle_move("right")
    assert state.player.pos == (1, 1)
    assert state.last_action == DoorLocked(2, 1)
    assert state.tile(2, 1) == "+"
    # a locked bump ends the turn before monsters act
    assert turns == []
    assert state.monsters[0].pos == (3, 2) and state.monsters[0].alerted
    assert game.consume_events() == [DoorLocked(2, 1)]


def test_locked_door_spends_key():
    game = new_game()
    state = stage(game, ["#####", "#.+.#", "#####"], (1, 1))
    state.player.keys = 1
    game.handle_move("right")
    assert state.player.pos == (2, 1)
    assert state.player.keys == 0
    assert state.tile(2, 1) == FLOOR
    assert game.consume_events() == [DoorUnlocked(2, 1)]


def test_key_pickup():
    game = new_game()
    state = stage(game, ["#####", "#.k.#", "#####"], (1, 1))
    game.handle_move("right")
    assert state.player.keys == 1
    assert state.tile(2, 1) == FLOOR
    assert game.consume_events() == [KeyFound(2, 1)]


def test_secret_door_reveals_without_moving(monkeypatch):
    turns = _watch_monster_turns(monkeypatch)
    game = new_game()
    state = _stage_watcher(game, ["######", "#.S..#", "#....#", "######"])
    assert game.handle_move("right")
    assert state.player.pos == (1, 1)
    assert state.tile(2, 1) == FLOOR
    assert game.consume_events() == [SecretRevealed(2, 1)]
    assert turns == []
    assert state.monsters[0].pos == (3, 2) and state.monsters[0].alerted


def test_wall_bump_is_not_a_turn():
    game = new_game()
    state = stage(game, ["###", "#.#", "###"], (1, 1))
    for direction in ("up", "down", "left", "right"):
        assert not game.handle_move(direction)
    assert state.player.pos == (1, 1)
    assert game.consume_events() == []


def test_monsters_act_after_a_plain_step(monkeypatch):
    turns = _watch_monster_turns(monkeypatch)
    game = new_game()
    state = stage(game, ["########", "#......#", "########"], (1, 1), monsters=[(5, 1, 10, 2, 5)])
    game.handle_move("right")
    monster = state.monsters[0]
    assert monster.alerted
    assert monster.pos == (4, 1)
    assert turns == [1]
    assert state.last_action is None


def test_stairs_descend_and_record_best(monkeypatch):
    turns = _watch_monster_turns(monkeypatch)
    game = new_game(seed=1234)
    first_ids = [m.id for m in game.state.monsters]
    state = _stage_watcher(game, ["#####", "#.>.#", "#...#", "#####"])
    watcher = state.monsters[0]
    assert game.handle_move("right")
    # descending skips the monster turn on both the old and the new floor
    assert turns == []
    assert watcher.pos == (3, 2)
    assert not any(m.alerted for m in state.monsters)
    assert state.depth == 2
    assert state.seed == 1234 + 2 * SEED_DEPTH_STRIDE
    assert state.player.pos == game.floor.spawn
    assert game.best_score == 2
    assert game.score_store.value == 2
    assert game.consume_events() == [DepthChanged(2)]
    assert state.last_action == DepthChanged(2)
    new_ids = [m.id for m in state.monsters]
    assert new_ids and min(new_ids) > max(first_ids)


def test_best_score_only_moves_up():
    game = new_game(best=7)
    assert game.get_snapshot().best_score == 7
    stage(game, ["####", "#.>#", "####"], (1, 1))
    game.handle_move("right")
    assert game.best_score == 7
    assert game.score_store.value == 7


def test_final_depth_ends_run_quietly():
    game = new_game(config=DungeonConfig(max_depth=1))
    state = stage(game, ["####", "#.>#", "####"], (1, 1))
    assert game.handle_move("right")
    assert not state.running
    assert state.depth == 1
    assert game.consume_events() == []
    assert state.last_action is None
    assert not game.handle_move("left")


def test_direction_validation():
    game = new_game()
    with pytest.raises(ValueError):
        game.handle_move("north-east")
    with pytest.raises(ValueError):
        game.handle_move((1, 1))
    assert resolve_direction((0, -1)) == (0, -1)
    assert resolve_direction(" Down ") == (0, 1)


def test_restart_resets_run_and_keeps_ids_unique():
    game = new_game()
    before = max(m.id for m in game.state.monsters)
    state = stage(game, ["####", "#.>#", "####"], (1, 1))
    state.player.keys = 3
    game.handle_move("right")
    game.restart()
    state = game.state
    assert state.depth == 1 and state.running
    assert state.player.hp == 18 and state.player.level == 1 and state.player.keys == 0
    assert state.events == []
    assert state.seed == 1234 + SEED_DEPTH_STRIDE
    assert min(m.id for m in state.monsters) > before


def test_legacy_rules_grant_floor_key():
    game = new_game(config=DungeonConfig.legacy())
    state = stage(game, ["####", "#.>#", "####"], (1, 1))
    game.handle_move("right")
    assert state.depth == 2
    assert state.player.keys == 1


def test_key_drop_on_kill():
    game = new_game(config=DungeonConfig(key_drop_chance=1.0))
    state = stage(game, ["#####", "#...#", "#####"], (1, 1), monsters=[(2, 1, 3, 2, 1)])
    game.handle_move("right")
    assert KeyDrop() in game.consume_events()
    assert state.player.keys == 1


def test_trap_can_end_the_run():
    game = new_game()
    state = stage(game, ["#####", "#.^.#", "#####"], (1, 1))
    state.player.hp = 3
    game.handle_move("right")
    assert not state.running
    assert state.player.hp == 0
    assert game.consume_events() == [Trap(4, 2, 1), PlayerDefeated()]
    assert state.last_action == PlayerDefeated()


def test_telemetry_and_event_drain():
    game = new_game()
    telemetry = game.collect_telemetry()
    assert telemetry["depth"] == 1
    assert telemetry["hp"] == "18 / 18"
    assert telemetry["xp"] == "0 / 15"
    assert telemetry["lvl"] == 1
    assert telemetry["keys"] == 0
    assert telemetry["monsters"] == len(game.state.monsters)
    assert telemetry["running"] is True
    stage(game, ["#####", "#.k.#", "#####"], (1, 1))
    game.handle_move("right")
    assert len(game.consume_events()) == 1
    assert game.consume_events() == []
