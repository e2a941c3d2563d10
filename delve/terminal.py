"""Minimal terminal client for a local run.

Renders snapshots as colored text and forwards single-letter commands to a
``Game``. Keys: w/a/s/d move, r restarts, t prints telemetry, q quits. Pausing
needs no command: the engine only advances when a move is entered.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from colorama import Fore, Style

from delve.dungeon.tiles import (
    FLOOR,
    KEY,
    LOCKED_DOOR,
    SECRET_DOOR,
    STAIRS_DOWN,
    TRAP_HIDDEN,
    TRAP_TRIGGERED,
    VOID,
    WALL,
)
from delve.models.events import Event
from delve.models.snapshot import Snapshot
from delve.services.game_engine import Game

KEYMAP: Dict[str, str] = {"w": "up", "a": "left", "s": "down", "d": "right"}

# Hidden traps and secret doors are drawn as what they pretend to be.
_DISPLAY = {
    VOID: " ",
    FLOOR: ".",
    WALL: "#",
    LOCKED_DOOR: "+",
    SECRET_DOOR: "#",
    TRAP_HIDDEN: ".",
    TRAP_TRIGGERED: "x",
    STAIRS_DOWN: ">",
    KEY: "k",
}

_COLORS = {
    LOCKED_DOOR: Fore.YELLOW,
    TRAP_TRIGGERED: Fore.RED,
    STAIRS_DOWN: Fore.CYAN + Style.BRIGHT,
    KEY: Fore.YELLOW + Style.BRIGHT,
}


def _paint(ch: str, color: str, enabled: bool) -> str:
    return f"{color}{ch}{Style.RESET_ALL}" if enabled and color else ch


def render(snapshot: Snapshot, color: bool = True) -> str:
    """Draw the map with the player ``@`` and monsters ``m`` (``M`` when alerted)."""
    monsters = {(m.x, m.y): m for m in snapshot.monsters}
    lines: List[str] = []
    for y in range(snapshot.height):
        row = []
        for x in range(snapshot.width):
            if (x, y) == (snapshot.player.x, snapshot.player.y):
                row.append(_paint("@", Fore.GREEN + Style.BRIGHT, color))
            elif (x, y) in monsters:
                ch = "M" if monsters[(x, y)].alerted else "m"
                row.append(_paint(ch, Fore.RED, color))
            else:
                tile = snapshot.tile_at(x, y)
                row.append(_paint(_DISPLAY.get(tile, "?"), _COLORS.get(tile, ""), color))
        lines.append("".join(row))
    p = snapshot.player
    lines.append(
        f"Depth {snapshot.depth}  HP {p.hp}/{p.hp_max}  XP {p.xp}/{p.xp_max}  "
        f"Lvl {p.level}  Keys {p.keys}  Best {snapshot.best_score}"
    )
    if not snapshot.running:
        lines.append(_paint("The run is over. Press r to restart.", Fore.MAGENTA, color))
    return "\n".join(lines)


def describe(event: Event) -> str:
    data = event.to_dict()
    kind = data.pop("type")
    detail = " ".join(f"{k}={v}" for k, v in data.items())
    return f"{kind} {detail}".strip()


def play(
    game: Game,
    commands: Iterable[str] | None = None,
    output: Callable[[str], None] = print,
    color: bool = True,
) -> int:
    """Drive ``game`` from ``commands`` (stdin prompts by default) until q or input ends."""
    if commands is None:
        commands = _prompt_forever()
    output(render(game.get_snapshot(), color))
    for raw in commands:
        cmd = raw.strip().lower()
        if cmd == "q":
            break
        if cmd == "r":
            game.restart()
        elif cmd == "t":
            output(" ".join(f"{k}={v}" for k, v in game.collect_telemetry().items()))
            continue
        elif cmd in KEYMAP:
            game.handle_move(KEYMAP[cmd])
        else:
            output("w/a/s/d move, r restart, t telemetry, q quit")
            continue
        for event in game.consume_events():
            output(describe(event))
        output(render(game.get_snapshot(), color))
    return game.state.depth


def _prompt_forever():  # pragma: no cover - interactive
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


__all__ = ["KEYMAP", "render", "describe", "play"]
