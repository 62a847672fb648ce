"""Tests for mounting a board of widgets and collecting snapshots."""

import logging

from gamewidgets.board import Board
from gamewidgets.widgets import default_registry
from gamewidgets.widgets.base import Phase, Widget


def _board(game, bus, clock, surface):
    return Board(game, bus, surface=surface, scheduler=clock)


class TestBoard:
    def test_mount_all_and_collect(self, game, bus, clock, surface):
        board = _board(game, bus, clock, surface)
        board.mount_all(["VisualState", "GameBoard", "DebugInfo", "Chat"],
                        {"Chat": {"mode": "MANY_TO_ONE"}})
        game.start()
        data = board.collect()
        assert [r.name for r in data.results] == ["VisualState", "GameBoard", "DebugInfo", "Chat"]
        assert all(r.ok for r in data.results)
        assert board.get("Chat").mode.value == "MANY_TO_ONE"

    def test_unknown_widget_reported_in_place(self, game, bus, clock, surface):
        board = _board(game, bus, clock, surface)
        board.mount_all(["Nope", "GameBoard"])
        data = board.collect()
        assert not data.results[0].ok
        assert data.results[0].error == "Unknown widget"
        assert data.results[1].ok

    def test_bad_options_reported_in_place(self, game, bus, clock, surface):
        board = _board(game, bus, clock, surface)
        board.mount_all(["Chat"], {"Chat": {"mode": "BOGUS"}})
        res = board.collect().results[0]
        assert not res.ok
        assert "BOGUS" in res.error
        assert res.title == "Chat"
        assert board.widgets == []

    def test_each_widget_gets_its_own_slot(self, game, bus, clock, surface):
        board = _board(game, bus, clock, surface)
        board.mount_all(["GameBoard", "VisualState"])
        assert surface.get("slot-0").children[0] is board.widgets[0].panel
        assert surface.get("slot-1").children[0] is board.widgets[1].panel

    def test_destroy_all(self, game, bus, clock, surface):
        board = _board(game, bus, clock, surface)
        widgets = board.mount_all(["DebugInfo"])
        board.destroy_all()
        assert widgets[0].phase is Phase.DESTROYED
        assert clock.pending() == 0

    def test_unexpected_build_error_reported_in_place(self, game, bus, clock, surface, caplog):
        class Broken(Widget):
            name = "Broken"

            def build(self, body):
                raise AttributeError("boom")

        reg = default_registry()
        reg.register("Broken", Broken)
        board = Board(game, bus, registry=reg, surface=surface, scheduler=clock)
        with caplog.at_level(logging.ERROR, logger="gamewidgets.board"):
            board.mount_all(["Broken", "VisualState"])
        results = board.collect().results
        assert not results[0].ok
        assert "boom" in results[0].error
        assert results[1].ok
        assert [w.name for w in board.widgets] == ["VisualState"]
        assert any("could not mount Broken" in r.getMessage() for r in caplog.records)
