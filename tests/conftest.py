import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app, db  # noqa: E402
from delve.dungeon.config import DungeonConfig  # noqa: E402
from delve.routes.game_api import clear_games  # noqa: E402


@pytest.fixture(scope="session")
def test_app(tmp_path_factory):
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path.as_posix()}",
            "DUNGEON_CONFIG": DungeonConfig(),
            "BEST_SCORE_KEY": "bestScore",
        }
    )
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "structure: structural invariant sweeps over many seeds")


@pytest.fixture(autouse=True)
def _clear_game_registry():
    """Keep API games from leaking between tests."""
    clear_games()
    yield
    clear_games()
