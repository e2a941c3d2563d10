import random

from delve.dungeon.config import DungeonConfig
from delve.models.entities import Monster, Player
from delve.models.events import Combat, PlayerDefeated
from delve.models.run_state import RunState
from delve.services.monster_ai import has_line_of_sight, monster_turn, step_candidates, step_toward
from tests.dungeon_test_utils import grid

ROOM = ("#######", "#.....#", "#.....#", "#.....#", "#######")


def _state(map_rows, player, monsters):
    p = Player(hp=18, hp_max=18)
    p.place(player)
    return RunState(depth=1, tiles=grid(*map_rows), player=p, monsters=list(monsters))


def test_line_of_sight_clear_corridor():
    g = grid("#######", "#.....#", "#######")
    assert has_line_of_sight(g, (1, 1), (5, 1), 9)


def test_line_of_sight_blocked_by_wall_and_doors():
    assert not has_line_of_sight(grid("#######", "#..#..#", "#######"), (1, 1), (5, 1), 9)
    assert not has_line_of_sight(grid("#######", "#..+..#", "#######"), (1, 1), (5, 1), 9)
    assert not has_line_of_sight(grid("#######", "#..S..#", "#######"), (1, 1), (5, 1), 9)


def test_line_of_sight_range_is_manhattan():
    g = grid(*ROOM)
    assert has_line_of_sight(g, (1, 1), (3, 3), 4)
    assert not has_line_of_sight(g, (1, 1), (3, 3), 3)


def test_line_of_sight_skips_start_tile():
    g = grid("#######", "#..#..#", "#######")
    assert has_line_of_sight(g, (3, 1), (5, 1), 9)


def test_step_preference():
    m = Monster(id=1, x=0, y=0, hp=1, hp_max=1, damage=1, xp=1)
    assert step_candidates(m, (3, 1)) == [(1, 0), (0, 1)]
    assert step_candidates(m, (1, 3)) == [(0, 1), (1, 0)]
    assert step_candidates(m, (2, -2)) == [(1, 0), (0, -1)]
    assert step_candidates(m, (0, -4)) == [(0, -1)]


def test_step_skips_occupied_and_walls():
    a = Monster(id=1, x=1, y=1, hp=5, hp_max=5, damage=1, xp=1)
    b = Monster(id=2, x=2, y=1, hp=5, hp_max=5, damage=1, xp=1)
    state = _state(ROOM, (5, 2), [a, b])
    # horizontal blocked by b, so a falls back to the vertical step
    assert step_toward(state, a, (5, 2))
    assert a.pos == (1, 2)
    # a monster in a dead end with both steps walled stays put
    c = Monster(id=3, x=5, y=1, hp=5, hp_max=5, damage=1, xp=1)
    state = _state(ROOM, (5, 0), [c])
    assert not step_toward(state, c, (6, 0))
    assert c.pos == (5, 1)


def test_adjacent_monster_wakes_steps_in_and_attacks():
    m = Monster(id=7, x=3, y=2, hp=10, hp_max=10, damage=2, xp=5)
    state = _state(ROOM, (2, 2), [m])
    monster_turn(state, DungeonConfig(), random.Random(0))
    assert m.alerted
    assert m.pos == (2, 2)
    assert state.events == [Combat(7, 3, 2, 7)]
    assert state.player.hp == 16


def test_dormant_monster_without_sight_stays():
    m = Monster(id=8, x=5, y=1, hp=10, hp_max=10, damage=2, xp=5)
    state = _state(("#######", "#..#..#", "#######"), (1, 1), [m])
    monster_turn(state, DungeonConfig(), random.Random(0))
    assert not m.alerted
    assert m.pos == (5, 1)
    assert state.events == []


def test_loop_stops_when_player_dies():
    a = Monster(id=1, x=3, y=1, hp=50, hp_max=50, damage=30, xp=1, alerted=True)
    b = Monster(id=2, x=1, y=1, hp=50, hp_max=50, damage=30, xp=1, alerted=True)
    state = _state(("#####", "#...#", "#####"), (2, 1), [a, b])
    monster_turn(state, DungeonConfig(), random.Random(0))
    assert not state.running
    assert state.player.hp == 0
    assert [type(e) for e in state.events] == [Combat, PlayerDefeated]
    assert b.pos == (1, 1)


def test_no_turn_when_run_over():
    m = Monster(id=1, x=3, y=2, hp=10, hp_max=10, damage=2, xp=5, alerted=True)
    state = _state(ROOM, (2, 2), [m])
    state.running = False
    monster_turn(state, DungeonConfig(), random.Random(0))
    assert m.pos == (3, 2)
