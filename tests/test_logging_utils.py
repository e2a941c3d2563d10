import json
import logging
import os

from delve import logging_utils
from delve.dungeon.config import DungeonConfig
from delve.server import _configure_logging
from tests.dungeon_test_utils import new_game, stage


def test_key_value_format(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", 20)
    log = logging_utils.get_logger("delve.test")
    log.info(event="floor generated", depth=3, skipped=None)
    line = capsys.readouterr().out.strip()
    assert line.startswith("level=info ts=")
    assert "event=floor_generated" in line
    assert "depth=3" in line
    assert "logger=delve.test" in line
    assert "skipped" not in line


def test_json_mode_and_level_filter(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", 20)
    log = logging_utils.get_logger("delve.test")
    log.debug(event="hidden")
    log.warn(event="door_rejected", reason="bypass")
    out = capsys.readouterr().out.strip().splitlines()
    assert len(out) == 1
    rec = json.loads(out[0])
    assert rec["level"] == "warn"
    assert rec["reason"] == "bypass"
    assert rec["logger"] == "delve.test"


def test_errors_go_to_stderr(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    logging_utils.get_logger("delve.test").error(event="boom")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=boom" in captured.err


def test_get_logger_is_cached():
    assert logging_utils.get_logger("delve.same") is logging_utils.get_logger("delve.same")


def test_configure_logging_is_idempotent(tmp_path):
    root = logging.getLogger()
    saved, level = root.handlers[:], root.level
    root.handlers = []
    try:
        path = _configure_logging(str(tmp_path))
        _configure_logging(str(tmp_path))
        assert path == os.path.join(str(tmp_path), "app.log")
        assert os.path.exists(path)
        assert len(root.handlers) == 2
    finally:
        for h in root.handlers:
            h.close()
        root.handlers = saved
        root.setLevel(level)


def test_run_lifecycle_lines(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", 20)
    game = new_game(config=DungeonConfig(max_depth=1))
    stage(game, ["####", "#.>#", "####"], (1, 1))
    game.handle_move("right")
    out = capsys.readouterr().out
    assert "event=run_started" in out and "logger=delve.engine" in out
    assert "event=run_ended reason=max_depth" in out
    assert "event=floor_generated" not in out
