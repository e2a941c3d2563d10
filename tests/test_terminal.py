from delve import terminal
from delve.models.events import Combat, PlayerDefeated
from tests.dungeon_test_utils import new_game, stage


def test_render_hides_secrets_and_marks_actors():
    game = new_game()
    stage(game, ["#######", "#.^S>k#", "#######"], (1, 1), monsters=[(2, 1, 5, 1, 1)])
    game.state.monsters[0].alerted = True
    text = terminal.render(game.get_snapshot(), color=False)
    lines = text.splitlines()
    assert lines[1] == "#@M#>k#"
    assert lines[3].startswith("Depth 1  HP 18/18")


def test_render_shows_hidden_trap_as_floor():
    game = new_game()
    stage(game, ["#####", "#.^.#", "#####"], (1, 1))
    assert terminal.render(game.get_snapshot(), color=False).splitlines()[1] == "#@..#"


def test_render_game_over_line():
    game = new_game()
    stage(game, ["###", "#.#", "###"], (1, 1))
    game.state.running = False
    assert "run is over" in terminal.render(game.get_snapshot(), color=False)


def test_describe_event():
    assert terminal.describe(Combat(3, 4, 1, 2)) == "combat monster_id=3 player_damage=4 monster_damage=1 monster_hp=2"
    assert terminal.describe(PlayerDefeated()) == "player-defeated"


def test_play_runs_command_list():
    game = new_game()
    stage(game, ["#####", "#.k.#", "#####"], (1, 1))
    out = []
    depth = terminal.play(game, commands=["d", "x", "t", "q", "d"], output=out.append, color=False)
    assert depth == 1
    assert game.state.player.pos == (2, 1)
    assert "key-found x=2 y=1" in out
    assert any(line.startswith("depth=1 hp=18 / 18") for line in out)
    assert any("w/a/s/d" in line for line in out)


def test_play_restart_command():
    game = new_game()
    stage(game, ["#####", "#.^.#", "#####"], (1, 1))
    terminal.play(game, commands=["d", "r"], output=lambda _: None, color=False)
    assert game.state.player.hp == 18
    assert game.state.depth == 1
