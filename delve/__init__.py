"""
project: Delve
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app and SQLAlchemy. Configuration is
sourced from environment variables with reasonable defaults for development.
A local `instance/` directory is used for SQLite and other runtime data.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

db = SQLAlchemy(session_options={"expire_on_commit": False})


def create_app(test_config=None):
    """Build the Flask app, bind the database and register the game API.

    ``test_config`` entries override the environment-derived settings (tests
    pass a temporary ``SQLALCHEMY_DATABASE_URI`` and a ``DUNGEON_CONFIG``).
    """
    from delve.dungeon.config import DungeonConfig
    from delve.services.score_store import best_score_key

    app = Flask(__name__, instance_relative_config=True)

    # Ensure instance directory exists for SQLite and the log file
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        logging.getLogger(__name__).warning("could not create instance dir %s", app.instance_path)

    # If DATABASE_URL isn't provided, default to a SQLite file in the instance folder.
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        db_path = Path(app.instance_path) / "delve.db"
        # POSIX path for SQLAlchemy URI compatibility across OS
        database_url = f"sqlite:///{db_path.as_posix()}"

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        SQLALCHEMY_DATABASE_URI=database_url,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        BEST_SCORE_KEY=best_score_key(),
        MAX_ACTIVE_GAMES=int(os.getenv("DELVE_MAX_ACTIVE_GAMES", "64")),
        DUNGEON_CONFIG=DungeonConfig.from_env(),
    )
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "connect_args": {
                "timeout": 10,  # busy timeout (seconds) for sqlite
                "check_same_thread": False,  # the dev server handles requests on threads
            }
        }
    if test_config:
        app.config.update(test_config)

    db.init_app(app)

    from delve.routes.game_api import bp_game

    app.register_blueprint(bp_game)

    with app.app_context():
        from delve.models import score  # noqa: F401 ensure model metadata is loaded

        db.create_all()

    # Error handling: log details under a short id and return it in the JSON body
    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app
