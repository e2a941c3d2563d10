"""Delve CLI entry point.

Provides subcommands for running the JSON game API server and playing a run
directly in the terminal. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve Game Server

    Run the JSON game API server or play a run directly in the terminal.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 0.0.0.0)
          PORT                  Port for the web server (default: 5000)
          DATABASE_URL          SQLAlchemy database URI (default: sqlite:///instance/delve.db)
          DELVE_KEY_ECONOMY     placed (lock-and-key puzzle) or legacy (scattered doors)
          DELVE_LOG_LEVEL       debug | info | warn | error

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Bind to localhost only and use a different database
          python run.py server --host 127.0.0.1 --db sqlite:///instance/dev.db

          # Play a reproducible run in the terminal
          python run.py play --seed 1234

          # Load variables from .env then play the legacy rule set
          python run.py --env-file .env play --legacy
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON game API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask game API server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/delve.db)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # play subcommand
    play_parser = subparsers.add_parser(
        "play",
        help="Play a run in the terminal",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Play a run in the terminal.

            Commands (press Enter after each):
              w / a / s / d   Move up / left / down / right
              r               Restart the run
              t               Print telemetry
              q               Quit
            """
        ),
    )
    play_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Base seed; floor N uses seed + N * 1337 (default: wall clock)",
    )
    play_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Use the legacy rule set (scattered doors, key drops, one key per floor)",
    )
    play_parser.set_defaults(command="play")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _banner(mode: str, rows: list[tuple[str, object]]) -> str:
    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    title = f"{Fore.CYAN}{Style.BRIGHT}Delve{Style.RESET_ALL}" if _COLOR_ENABLED else "Delve"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [divider, f"  {title}", divider, f"  {label('Mode:'):12} {value(mode.upper())}"]
    lines += [f"  {label(k + ':'):12} {value(v)}" for k, v in rows]
    lines += [divider, ""]
    return "\n".join(lines)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # Load .env if requested, otherwise the default .env if present (no error if missing)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "play":
        from delve.dungeon.config import DungeonConfig
        from delve.dungeon.rng import fixed_seeds
        from delve.services.game_engine import Game
        from delve.terminal import play

        config = DungeonConfig.legacy() if args.legacy else DungeonConfig.from_env()
        seed_source = fixed_seeds(args.seed) if args.seed is not None else None
        seed_label = args.seed if args.seed is not None else "clock"
        print(_banner(mode, [("Economy", config.key_economy), ("Seed", seed_label)]))
        game = Game(config=config, seed_source=seed_source)
        depth = play(game, color=_COLOR_ENABLED)
        print(f"[INFO] Reached depth {depth}")
        return 0

    # Resolve configuration from CLI flags or env vars
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "5000"))
    # Make DATABASE_URL available to the Flask app BEFORE creating it
    if args.db_uri:
        os.environ["DATABASE_URL"] = args.db_uri
    db_banner = args.db_uri or os.getenv("DATABASE_URL") or "auto (instance/delve.db)"

    print(_banner(mode, [("Host", host), ("Port", port), ("Database", db_banner)]))

    from delve.logging_utils import log
    from delve.server import start_server

    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner)
    start_server(host=host, port=port, debug=args.debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
