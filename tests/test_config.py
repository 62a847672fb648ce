"""Tests for YAML board configuration."""

from pathlib import Path

import pytest

from gamewidgets.board import Board
from gamewidgets.config import DEFAULT_WIDGETS, Config, load_config
from gamewidgets.game import LocalGame
from gamewidgets.scheduler import ManualClock

BOARD_YAML = """\
resolution: 2560x1600
columns: 2
renderer: {kind: web}
output: {path: $GW_OUT/board.png}
game:
  player: {id: P1, name: Alice}
  sequence: [{id: intro}]
board:
  widgets: [Chat, DebugInfo]
widgets:
  Chat: {mode: MANY_TO_ONE}
  DebugInfo:
"""


def _write(tmp_path, text):
    path = tmp_path / "board.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_full(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GW_OUT", str(tmp_path))
        cfg = load_config(_write(tmp_path, BOARD_YAML))
        assert cfg.resolution == (2560, 1600)
        assert cfg.columns == 2
        assert cfg.renderer_kind == "web"
        assert cfg.output_path == tmp_path / "board.png"
        assert cfg.widget_order == ["Chat", "DebugInfo"]
        assert cfg.widget_options == {"Chat": {"mode": "MANY_TO_ONE"}, "DebugInfo": {}}
        assert cfg.game["player"]["id"] == "P1"

    def test_defaults(self):
        cfg = Config(raw={})
        assert cfg.resolution == (1920, 1080)
        assert cfg.renderer_kind == "pillow"
        assert cfg.widget_order == DEFAULT_WIDGETS
        assert cfg.output_path == Path("~/.cache/gamewidgets/board.png").expanduser()
        assert cfg.theme == {}

    def test_unsupported_resolution(self):
        with pytest.raises(ValueError):
            Config(raw={"resolution": "640x480"}).resolution

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_widgets_must_be_mapping(self):
        with pytest.raises(ValueError):
            Config(raw={"widgets": ["Chat"]}).widget_options


def test_example_config_mounts(bus):
    cfg = load_config(Path(__file__).resolve().parent.parent / "board.example.yaml")
    game = LocalGame.from_config(bus, cfg.game)
    board = Board(game, bus, scheduler=ManualClock())
    board.mount_all(cfg.widget_order, cfg.widget_options)
    game.start()
    assert all(r.ok for r in board.collect().results)
    board.destroy_all()
