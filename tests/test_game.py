"""Tests for the local game state provider."""

import pytest

from gamewidgets import events
from gamewidgets.game import GameStage, LocalGame, Player, PlayerList, StageLevel


class TestGameStage:
    @pytest.mark.parametrize("text, expected", [
        ("2", GameStage(2, 1, 1)),
        ("2.3", GameStage(2, 3, 1)),
        ("2.3.4", GameStage(2, 3, 4)),
    ])
    def test_parse(self, text, expected):
        assert GameStage.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "a", "1.2.3.4"])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            GameStage.parse(text)

    def test_str(self):
        assert str(GameStage(1, 2, 3)) == "1.2.3"


class TestPlayerList:
    def test_add_remove(self):
        pl = PlayerList([Player("a")])
        pl.add(Player("b"))
        assert pl.ids() == ["a", "b"]
        with pytest.raises(ValueError):
            pl.add(Player("a"))
        pl.remove("a")
        assert pl.size() == 1
        with pytest.raises(KeyError):
            pl.remove("a")


class TestLocalGame:
    def test_step_through_sequence(self, game):
        names = []
        game.start()
        while game.stage_level is not StageLevel.DONE:
            names.append(game.step_name(game.stage))
            game.step()
        assert names == ["intro", "play.bid", "play.reveal", "end"]

    def test_step_emits_events(self, game, bus):
        seen = []
        bus.on(events.STATECHANGE, lambda: seen.append("state"))
        bus.on(events.STEP_CALLBACK_EXECUTED, lambda: seen.append("step"))
        game.start()
        assert seen == ["state", "step"]

    def test_goto_unknown_step(self, game):
        with pytest.raises(ValueError):
            game.goto_step("7")

    def test_disconnect_once(self, game, bus):
        seen = []
        bus.on(events.SOCKET_DISCONNECT, lambda: seen.append(1))
        game.disconnect()
        game.disconnect()
        assert seen == [1]

    def test_say_publishes_outbound(self, game, bus):
        seen = []
        bus.on(events.outbound_topic("CHAT"), seen.append)
        game.say("CHAT", "ALL", "hi")
        assert seen[0].sender == "ME"
        assert game.outbox[0][0] == "CHAT"

    def test_from_config(self, bus):
        g = LocalGame.from_config(bus, {
            "player": {"id": "P1", "name": "Alice"},
            "players": [{"id": "P2"}],
            "sequence": [{"id": "intro"}, {"id": "game", "steps": ["bid", "respond"]}],
            "treatment": "standard",
        })
        assert g.player.label == "Alice"
        assert g.players.ids() == ["P2"]
        assert g.step_name(GameStage(2, 2, 1)) == "game.respond"
        assert g.treatment == "standard"
