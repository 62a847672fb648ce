"""Tests for the smaller widgets in the default registry."""

import pytest

from gamewidgets import events
from gamewidgets.errors import ConfigurationError
from gamewidgets.game import ALL, GameStage, Player, StageLevel, StageSpec
from gamewidgets.surface import Table
from gamewidgets.widgets.content_box import ContentBox
from gamewidgets.widgets.game_board import format_player
from gamewidgets.widgets.goto import get_sequence
from gamewidgets.widgets.server_info import WAITING
from gamewidgets.widgets.timeseries import sparkline


class TestContentBox:
    def test_renders_parts(self, mount):
        w = mount("ContentBox", {"mainText": "Main", "content": "Body", "hint": "Hint"})
        assert w.snapshot().lines == ["Main", "Body", "Hint"]
        assert w.heading is None

    @pytest.mark.parametrize("field", ["mainText", "content", "hint"])
    def test_non_string_rejected(self, game, bus, field):
        with pytest.raises(ConfigurationError) as exc:
            ContentBox(game, bus).init({field: 42})
        assert exc.value.field == field


class TestConsent:
    def test_texts_filled_on_frame_loaded(self, mount, bus):
        w = mount("Consent", {"consent": {"PURPOSE_TEXT": "Why we ask"}})
        node = w.form.find("purpose-text")
        assert node.text == ""
        bus.emit(events.FRAME_LOADED)
        assert node.text == "Why we ask"

    def test_accept(self, mount, bus, game):
        w = mount("Consent")
        bus.emit(events.FRAME_LOADED)
        w.agree.click()
        assert game.submitted == [{"done": True, "consent": True}]

    def test_reject(self, mount, bus, game):
        seen = []
        bus.on(events.CONSENT_REJECTING, lambda: seen.append("rejecting"))
        bus.on(events.CONSENT_REJECTED, lambda: seen.append("rejected"))
        w = mount("Consent")
        bus.emit(events.FRAME_LOADED)
        w.not_agree.click()
        assert seen == ["rejecting", "rejected"]
        assert game.submitted == [{"consent": False}]
        assert not game.connected
        assert w.form.hidden and not w.rejected_note.hidden
        assert w.agree.disabled and w.not_agree.disabled
        assert w.get_values() == {"consent": False}

        w.toggle.click()
        assert not w.form.hidden
        assert w.toggle.text == "Hide Consent Form"

        w.enable()
        assert w.agree.disabled

    def test_reject_cancelled_by_confirm(self, mount, bus, game):
        w = mount("Consent", {"confirm": lambda question: False})
        bus.emit(events.FRAME_LOADED)
        w.not_agree.click()
        assert game.connected
        assert not w.not_agreed

    def test_disable(self, mount):
        w = mount("Consent")
        w.disable()
        assert w.agree.disabled
        w.enable()
        assert not w.agree.disabled

    @pytest.mark.parametrize("opts", [{"consent": ["x"]}, {"consent": {"a": 1}}, {"showPrint": "no"}])
    def test_invalid(self, registry, game, bus, opts):
        with pytest.raises(ConfigurationError):
            registry.get("Consent", game, bus, options=opts)

    def test_no_print(self, mount):
        w = mount("Consent", {"showPrint": False})
        assert w.form.find("print") is None


class TestDisconnectBox:
    def test_leave(self, mount, game):
        w = mount("DisconnectBox", {"showStatus": True})
        assert w.status.text == "Connected"
        w.disconnect_button.click()
        assert not game.connected
        assert w.disconnect_button.disabled
        assert w.disconnect_button.text == "You Left"
        assert w.status.text == "Disconnected"

    def test_reconnect(self, mount, game):
        w = mount("DisconnectBox")
        game.disconnect()
        game.connect()
        assert not w.disconnect_button.disabled
        assert w.status is None

    def test_show_status_must_be_bool(self, game, bus, registry):
        with pytest.raises(ConfigurationError):
            registry.get("DisconnectBox", game, bus, options={"showStatus": 1})


class TestGameBoard:
    def test_format_player(self):
        p = Player("P1", "Alice", stage=GameStage(2, 1, 3), stage_level=StageLevel.PLAYING)
        assert format_player(p) == "[Alice]> \t(3) 2.1 (playing)"

    def test_roster_updates(self, mount, game):
        w = mount("GameBoard")
        assert w.status.text == "Connected players: 1"
        game.add_player(Player("P2"))
        assert w.status.text == "Connected players: 2"
        assert len(w.board.find_class("gboard-player")) == 2

    def test_bad_player_keeps_last_board(self, mount, game):
        w = mount("GameBoard")
        before = w.snapshot().lines
        game.add_player(Player("P2", stage=None))
        assert w.snapshot().lines == before
        assert w.status.text == "Connected players: 1"
        assert len(w.board.find_class("gboard-player")) == 1
        assert w.last_fault is not None


class TestGoto:
    def test_get_sequence(self):
        seq = [StageSpec("intro"), StageSpec("play", ("bid", "reveal"))]
        assert get_sequence(seq) == [("1", "1 intro"), ("2.1", "2.1 play.bid"), ("2.2", "2.2 play.reveal")]

    def test_goto(self, mount, game):
        w = mount("Goto")
        w.dropdown.change("2.2")
        assert game.stage == GameStage(2, 2, 1)

    def test_unknown_step_is_contained(self, mount, game):
        w = mount("Goto")
        w.goto("")
        w.dropdown.change("9")
        assert game.stage is None
        assert "no such step" in w.last_fault

    def test_disable(self, mount, game):
        w = mount("Goto")
        w.disable()
        assert not w.dropdown.change("1")
        assert game.stage is None


class TestNextPreviousStep:
    def test_buttons_follow_sequence(self, mount, game):
        game.start()
        w = mount("NextPreviousStep")
        assert w.rew.disabled and not w.fwd.disabled
        w.fwd.click()
        assert game.stage == GameStage(2, 1, 1)
        assert not w.rew.disabled
        w.rew.click()
        assert game.stage == GameStage(1, 1, 1)

    def test_last_step(self, mount, game):
        game.goto_step("3")
        w = mount("NextPreviousStep")
        assert w.fwd.disabled

    def test_update_on(self, mount, game):
        w = mount("NextPreviousStep", {"updateOn": events.STATECHANGE})
        assert w.update_on == [events.STATECHANGE]
        game.start()
        assert not w.fwd.disabled

    def test_update_on_must_be_strings(self, registry, game, bus):
        with pytest.raises(ConfigurationError):
            registry.get("NextPreviousStep", game, bus, options={"updateOn": [1]})


class TestServerInfoDisplay:
    def test_waits_then_shows_reply(self, mount, game):
        w = mount("ServerInfoDisplay")
        assert w.div.text == WAITING
        assert game.reply("INFO", {"name": "srv", "clients": 3}) == 1
        assert w.get_values() == {"name": "srv", "clients": 3}
        assert w.div.text == ""
        assert len(w.table.rows) == 2

    def test_reply_after_destroy_is_ignored(self, mount, game):
        w = mount("ServerInfoDisplay")
        w.destroy()
        game.reply("INFO", {"name": "srv"})
        assert w.get_values() == {}
        assert w.div.text == WAITING

    def test_player_created_requests_again(self, mount, game):
        w = mount("ServerInfoDisplay")
        game.create_player()
        assert game.reply("INFO", {"a": 1}) == 2
        w.button.click()
        assert game.reply("INFO", {"a": 2}) == 1
        assert w.get_values() == {"a": 2}

    def test_bad_reply_keeps_last_table(self, mount, game):
        class Unprintable:
            def __str__(self):
                raise ValueError("cannot print")

        w = mount("ServerInfoDisplay")
        game.reply("INFO", {"name": "srv", "clients": 3})
        rows = [tr.text_content() for tr in w.table.node.children]
        w.button.click()
        waiting = w.snapshot().lines
        assert game.reply("INFO", {"name": Unprintable()}) == 1
        assert w.snapshot().lines == waiting
        assert w.get_values() == {"name": "srv", "clients": 3}
        assert w.table.rows == [["name", "srv"], ["clients", 3]]
        assert [tr.text_content() for tr in w.table.node.children] == rows
        assert "cannot print" in w.last_fault


class TestVisualState:
    def test_uninitialized(self, mount):
        w = mount("VisualState")
        assert w.get_values() == {"previous": "-", "current": "Uninitialized", "next": "-"}

    def test_follows_state(self, mount, game):
        w = mount("VisualState")
        game.start()
        game.step()
        assert w.get_values() == {"previous": "intro", "current": "play.bid", "next": "play.reveal"}
        assert w.table.node.children[1].has_class("strong")

    def test_failing_lookup_keeps_last_state(self, mount, game, bus, monkeypatch):
        def broken(stage):
            raise KeyError("sequence gone")

        w = mount("VisualState")
        game.start()
        before = w.snapshot().lines
        monkeypatch.setattr(game, "step_name", broken)
        bus.emit(events.STATECHANGE)
        assert w.snapshot().lines == before
        assert w.get_values()["current"] == "intro"
        assert "sequence gone" in w.last_fault


class TestTable:
    def test_set_rows(self, surface):
        table = Table(surface)
        node = table.set_rows([["a", 1], ["b", None]], row_classes={0: ["strong"]})
        assert node is table.node
        assert node.lines() == ["a 1", "b"]
        assert node.children[0].has_class("strong")

    def test_failed_set_rows_leaves_table_alone(self, surface):
        class Unprintable:
            def __str__(self):
                raise ValueError("cannot print")

        table = Table(surface)
        table.set_rows([["a", 1]])
        with pytest.raises(ValueError):
            table.set_rows([["b", 2], ["c", Unprintable()]], row_classes={1: ["strong"]})
        assert table.rows == [["a", 1]]
        assert table.row_classes == {}
        assert table.node.lines() == ["a 1"]


class TestMsgBar:
    def test_send(self, mount, game):
        w = mount("MsgBar")
        w.msg_text.value = " hey "
        w.recipient.change("P1")
        w.send_button.click()
        assert [(label, m.to, m.text) for label, m in game.outbox] == [("TXT", "P1", "hey")]
        assert w.msg_text.value == ""

    def test_blank_not_sent(self, mount, game):
        w = mount("MsgBar")
        assert w.send() is False
        assert game.outbox == []

    def test_roster(self, mount, game):
        w = mount("MsgBar")
        assert w.recipient.value == ALL
        game.add_player(Player("P2", "Bob"))
        assert ("P2", "Bob") in w.recipient.options


class TestD3ts:
    def test_sparkline(self):
        assert sparkline([0.0, 0.5, 1.0]) == " ▄█"
        assert sparkline([5.0], 0.0, 1.0) == "█"

    def test_ticks(self, mount, bus):
        w = mount("D3ts", {"n": 3})
        for v in (0.1, 0.2, 0.3, 0.4):
            bus.emit("D3", v)
        assert w.get_values() == {"data": [0.2, 0.3, 0.4]}
        assert len(w.svg.text) == 3

    def test_bad_value_is_contained(self, mount, bus):
        w = mount("D3ts")
        bus.emit("D3", "x")
        assert w.get_values() == {"data": []}
        assert w.last_fault is not None

    @pytest.mark.parametrize("opts", [{"n": 0}, {"n": True}, {"domain": (1, 0)}, {"event": ""}])
    def test_invalid(self, registry, game, bus, opts):
        with pytest.raises(ConfigurationError):
            registry.get("D3ts", game, bus, options=opts)
