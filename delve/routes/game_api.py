"""
project: Delve
module: game_api.py
License: MIT

JSON API that drives a single-player run over HTTP.

Each browser session owns at most one ``Game``, kept in an in-process
registry keyed by a random id stored in the Flask session. A presentation
client polls ``/state``, forwards moves, and drains events to drive its
effects; pausing is purely client side (a paused client stops sending moves).
"""

import threading
import uuid
from collections import OrderedDict

from flask import Blueprint, current_app, jsonify, request, session

from delve.logging_utils import get_logger
from delve.services.game_engine import Game
from delve.services.score_store import SqlScoreStore

bp_game = Blueprint("game", __name__)
log = get_logger("delve.api")

# session id -> slot. The registry lock guards the mapping; each slot's own lock
# serializes the requests that drive its game (the dev server is threaded).
_games: "OrderedDict[str, _GameSlot]" = OrderedDict()
_games_lock = threading.Lock()
_SESSION_KEY = "game_id"


class _GameSlot:
    __slots__ = ("game", "lock")

    def __init__(self, game: Game):
        self.game = game
        self.lock = threading.Lock()


def _max_games() -> int:
    return int(current_app.config.get("MAX_ACTIVE_GAMES", 64))


def _new_game() -> Game:
    return Game(
        config=current_app.config.get("DUNGEON_CONFIG"),
        score_store=SqlScoreStore(current_app.config.get("BEST_SCORE_KEY")),
    )


def _current_slot():
    game_id = session.get(_SESSION_KEY)
    if not game_id:
        return None
    with _games_lock:
        slot = _games.get(game_id)
        if slot is not None:
            _games.move_to_end(game_id)
        return slot


def _store_game(game: Game) -> str:
    game_id = session.get(_SESSION_KEY) or uuid.uuid4().hex
    session[_SESSION_KEY] = game_id
    with _games_lock:
        _games[game_id] = _GameSlot(game)
        _games.move_to_end(game_id)
        while len(_games) > _max_games():
            evicted, _ = _games.popitem(last=False)
            log.info(event="game_evicted", game_id=evicted)
    return game_id


def clear_games():
    with _games_lock:
        _games.clear()


def _no_game():
    return jsonify({"error": "no active game"}), 404


@bp_game.route("/api/game", methods=["POST"])
def create_game():
    game = _new_game()
    game_id = _store_game(game)
    log.info(event="game_created", game_id=game_id, seed=game.state.seed)
    return jsonify(game.get_snapshot().to_dict()), 201


@bp_game.route("/api/game/state", methods=["GET"])
def game_state():
    slot = _current_slot()
    if slot is None:
        return _no_game()
    with slot.lock:
        return jsonify(slot.game.get_snapshot().to_dict())


@bp_game.route("/api/game/move", methods=["POST"])
def game_move():
    slot = _current_slot()
    if slot is None:
        return _no_game()
    data = request.get_json(silent=True) or {}
    direction = data.get("direction")
    if not isinstance(direction, str):
        return jsonify({"error": "direction required"}), 400
    with slot.lock:
        game = slot.game
        try:
            game.handle_move(direction)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        events = [e.to_dict() for e in game.consume_events()]
        return jsonify({"snapshot": game.get_snapshot().to_dict(), "events": events})


@bp_game.route("/api/game/events", methods=["GET"])
def game_events():
    slot = _current_slot()
    if slot is None:
        return _no_game()
    with slot.lock:
        return jsonify([e.to_dict() for e in slot.game.consume_events()])


@bp_game.route("/api/game/restart", methods=["POST"])
def game_restart():
    slot = _current_slot()
    if slot is None:
        return _no_game()
    with slot.lock:
        slot.game.restart()
        return jsonify(slot.game.get_snapshot().to_dict())


@bp_game.route("/api/game/telemetry", methods=["GET"])
def game_telemetry():
    slot = _current_slot()
    if slot is None:
        return _no_game()
    with slot.lock:
        return jsonify(slot.game.collect_telemetry())
