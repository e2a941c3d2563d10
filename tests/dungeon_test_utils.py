from delve.dungeon.config import DungeonConfig
from delve.dungeon.rng import fixed_seeds
from delve.dungeon.tiles import TRAVERSABLE, grid_from_rows, grid_rows
from delve.models.entities import Monster
from delve.services.game_engine import Game
from delve.services.score_store import MemoryScoreStore


def grid(*rows):
    """Column-major grid from row strings, e.g. grid("#####", "#...#", "#####")."""
    return grid_from_rows(rows)


def rows(g):
    return grid_rows(g)


def find_tiles(g, tile):
    return [(x, y) for x in range(len(g)) for y in range(len(g[0])) if g[x][y] == tile]


def walkable_cells(g):
    return [(x, y) for x in range(len(g)) for y in range(len(g[0])) if g[x][y] in TRAVERSABLE]


def new_game(seed=1234, config=None, best=0):
    return Game(
        config=config or DungeonConfig(),
        score_store=MemoryScoreStore(best),
        seed_source=fixed_seeds(seed),
    )


def stage(game, map_rows, player, monsters=()):
    """Replace the current floor with a hand-drawn map.

    ``monsters`` entries are ``(x, y, hp, damage, xp)`` tuples; ids start at 900
    so they never collide with generated ones.
    """
    state = game.state
    state.tiles = grid_from_rows(map_rows)
    state.player.place(player)
    state.monsters = [
        Monster(id=900 + i, x=x, y=y, hp=hp, hp_max=hp, damage=dmg, xp=xp)
        for i, (x, y, hp, dmg, xp) in enumerate(monsters)
    ]
    state.events.clear()
    state.last_action = None
    return state
