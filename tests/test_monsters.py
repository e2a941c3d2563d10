import itertools
import random

from delve.dungeon.config import DungeonConfig
from delve.dungeon.monsters import monster_count, monster_stats, place_monsters
from delve.dungeon.tiles import FLOOR, manhattan
from tests.dungeon_test_utils import grid


def _open_room(size=15):
    edge = "#" * size
    inner = "#" + "." * (size - 2) + "#"
    return grid(edge, *([inner] * (size - 2)), edge)


def test_monster_count_scales_and_caps():
    cfg = DungeonConfig()
    assert monster_count(1, cfg) == 8
    assert monster_count(9, cfg) == 11
    assert monster_count(100, cfg) == 20


def test_monster_stats_curve():
    assert monster_stats(1) == (4, 2, 7)
    assert monster_stats(4) == (6, 3, 8)
    assert monster_stats(20) == (12, 9, 18)


def test_placement_rules():
    cfg = DungeonConfig()
    spawn, exit_pos = (7, 7), (1, 1)
    for seed in range(10):
        g = _open_room()
        monsters = place_monsters(g, spawn, exit_pos, 3, random.Random(seed), cfg)
        assert len(monsters) == monster_count(3, cfg)
        positions = [m.pos for m in monsters]
        assert len(set(positions)) == len(positions)
        for m in monsters:
            assert g[m.x][m.y] == FLOOR
            assert m.pos != exit_pos
            assert manhattan(m.pos, spawn) >= cfg.monster_spawn_clearance
            assert m.hp == m.hp_max and not m.alerted


def test_ids_come_from_caller_iterator():
    cfg = DungeonConfig()
    ids = itertools.count(100)
    first = place_monsters(_open_room(), (7, 7), (1, 1), 1, random.Random(1), cfg, ids)
    second = place_monsters(_open_room(), (7, 7), (1, 1), 1, random.Random(2), cfg, ids)
    all_ids = [m.id for m in first + second]
    assert all_ids == list(range(100, 100 + len(all_ids)))


def test_no_floor_means_no_monsters():
    cfg = DungeonConfig()
    g = grid("###", "###", "###")
    assert place_monsters(g, (1, 1), (1, 1), 5, random.Random(0), cfg) == []


def test_attempt_budget_limits_placement():
    cfg = DungeonConfig(monster_attempts=0)
    assert place_monsters(_open_room(), (7, 7), (1, 1), 1, random.Random(0), cfg) == []
