"""Configurable chat between players, or between players and the server.

Modes:

- MANY_TO_MANY: everybody sees all messages; the recipient is picked from a
  selector listing the standard recipients and the current roster.
- MANY_TO_ONE: everybody sees all messages; messages go to the room.
- ONE_TO_ONE: messages go to a single counterpart (the server unless the
  ``recipient`` option names someone else) and only messages from that
  counterpart are shown.
- RECEIVER_ONLY: messages can only be received; no compose box is rendered.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Iterable

from .. import events
from ..errors import ConfigurationError, StateError
from ..game import ALL, ROOM, SERVER, STANDARD_RECIPIENTS, ChatMessage, Player
from ..surface import Node, set_options
from .base import Widget

logger = logging.getLogger(__name__)


class ChatMode(str, Enum):
    MANY_TO_MANY = "MANY_TO_MANY"
    MANY_TO_ONE = "MANY_TO_ONE"
    ONE_TO_ONE = "ONE_TO_ONE"
    RECEIVER_ONLY = "RECEIVER_ONLY"

    @classmethod
    def parse(cls, value: Any) -> "ChatMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ConfigurationError(
            "mode", value,
            f"unknown chat mode {value!r}. Valid modes: {[m.value for m in cls]}")


class ChatModeRouter:
    """Send/receive rules for one chat mode.

    Decides whether composing is allowed, who receives outgoing messages and
    whether an incoming message is displayed.
    """

    def __init__(self, mode: ChatMode, counterpart: str | None = None) -> None:
        self.mode = mode
        if mode is ChatMode.MANY_TO_MANY:
            self._recipient: str | None = ALL
        elif mode is ChatMode.MANY_TO_ONE:
            self._recipient = ROOM
        elif mode is ChatMode.ONE_TO_ONE:
            self._recipient = counterpart or SERVER
        else:
            self._recipient = None
        self._choices: list[tuple[str, str]] = [(r, r) for r in STANDARD_RECIPIENTS]

    @property
    def can_compose(self) -> bool:
        return self.mode is not ChatMode.RECEIVER_ONLY

    @property
    def selectable(self) -> bool:
        return self.mode is ChatMode.MANY_TO_MANY

    @property
    def recipient(self) -> str | None:
        return self._recipient

    @property
    def choices(self) -> list[tuple[str, str]]:
        return list(self._choices)

    def select(self, value: str) -> None:
        if not self.selectable:
            raise StateError(f"recipient is fixed in {self.mode.value} mode")
        if value not in {v for v, _ in self._choices}:
            raise ConfigurationError("recipient", value, f"unknown recipient {value!r}")
        self._recipient = value

    def update_roster(self, players: Iterable[Player]) -> list[tuple[str, str]]:
        """Rebuild the recipient choices; keep the selection if still present."""
        self._choices = [(r, r) for r in STANDARD_RECIPIENTS]
        self._choices.extend((p.id, p.label) for p in players)
        if self.selectable and self._recipient not in {v for v, _ in self._choices}:
            logger.info("recipient %s left the roster, falling back to %s", self._recipient, ALL)
            self._recipient = ALL
        return self.choices

    def accepts(self, msg: ChatMessage, own_ids: Iterable[str | None]) -> bool:
        if msg.sender in {i for i in own_ids if i}:
            return False
        if self.mode is ChatMode.ONE_TO_ONE:
            return msg.sender == self._recipient
        return True


def _default_display_name(sender: str) -> str:
    return sender


class Chat(Widget):
    name = "Chat"
    version = "0.5.0"
    description = ("Offers a uni-/bi-directional communication interface "
                   "between players, or between players and the server.")
    title = "Chat"
    class_name = "chat"

    modes = ChatMode

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.mode: ChatMode | None = None
        self.router: ChatModeRouter | None = None
        self.textarea_id = "chat_textarea"
        self.chat_id = "chat_chat"
        self.submit_id = "chat_submit"
        self.submit_text = "chat"
        self.chat_event = "CHAT"
        self.display_name: Callable[[str], str] = _default_display_name

        self.chat: Node | None = None
        self.textarea: Node | None = None
        self.submit: Node | None = None
        self.recipient_selector: Node | None = None

    def configure(self, options: dict[str, Any]) -> None:
        mode = ChatMode.parse(options.get("mode", ChatMode.MANY_TO_MANY))
        strings = {}
        for key, default in (("textareaId", "chat_textarea"), ("chatId", "chat_chat"),
                             ("submitId", "chat_submit"), ("submitText", "chat"),
                             ("chatEvent", "CHAT")):
            value = options.get(key, default)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(key, value, f"{key} must be a non-empty string. Found: {value!r}")
            strings[key] = value
        display_name = options.get("displayName", _default_display_name)
        if not callable(display_name):
            raise ConfigurationError("displayName", display_name)
        counterpart = options.get("recipient")
        if counterpart is not None:
            if mode is not ChatMode.ONE_TO_ONE:
                raise ConfigurationError("recipient", counterpart,
                                         f"recipient can only be set in ONE_TO_ONE mode, not {mode.value}")
            if not isinstance(counterpart, str) or not counterpart:
                raise ConfigurationError("recipient", counterpart)

        self.mode = mode
        self.router = ChatModeRouter(mode, counterpart)
        self.textarea_id = strings["textareaId"]
        self.chat_id = strings["chatId"]
        self.submit_id = strings["submitId"]
        self.submit_text = strings["submitText"]
        self.chat_event = strings["chatEvent"]
        self.display_name = display_name

    @property
    def recipient(self) -> str | None:
        return self.router.recipient if self.router else None

    def build(self, body: Node) -> None:
        self.chat = self.surface.add("div", body, id=self.chat_id, classes=("chat_transcript",))
        if not self.router.can_compose:
            return
        self.textarea = body.append(self.surface.textarea(self.textarea_id))
        self.submit = body.append(self.surface.button(
            self.submit_text, id=self.submit_id,
            onclick=self.guard(lambda: self.bus.emit(self.chat_event), "submit")))
        if self.router.selectable:
            self.router.update_roster(self.game.players)
            self.recipient_selector = body.append(self.surface.select(
                self.router.choices, onchange=self.guard(self.router.select, "recipient")))
            self.recipient_selector.value = self.router.recipient

    def bind(self) -> None:
        if self.router.can_compose:
            self.on(self.chat_event, self.send)
        if self.router.selectable:
            self.on(events.UPDATED_PLIST, self._update_recipients)
        self.on(events.data_topic(self.chat_event), self.receive)

    # ------------------------------------------------------------------
    # Send / receive
    # ------------------------------------------------------------------

    def read_input(self) -> str:
        """Return the compose box content and clear it."""
        if self.textarea is None:
            return ""
        txt = self.textarea.value or ""
        self.textarea.value = ""
        return txt

    def send(self, *args: Any) -> bool:
        if not self.router.can_compose:
            raise StateError(f"cannot send messages in {self.mode.value} mode")
        text = self.read_input().strip()
        if not text:
            return False
        to = self.router.recipient
        try:
            self.game.say(self.chat_event, to, text)
        except Exception:
            # keep the draft so the user can retry
            if self.textarea is not None:
                self.textarea.value = text
            raise
        self.write_line("Me", text, "chat_me")
        return True

    def receive(self, msg: ChatMessage) -> bool:
        me = self.game.player
        if not self.router.accepts(msg, (me.id, me.sid)):
            return False
        self.write_line(self.display_name(msg.sender), msg.text, "chat_others")
        return True

    def write_line(self, who: str, text: str, css: str) -> None:
        line = self.surface.add("li", self.chat, classes=(css, "chat_msg"), text=f"{who}: {text}")
        line.attrs["sender"] = who
        self.chat.scroll_to_end()

    def _update_recipients(self, *args: Any) -> None:
        set_options(self.recipient_selector, self.router.update_roster(self.game.players))
        self.recipient_selector.value = self.router.recipient

    def transcript(self) -> list[str]:
        return [n.text for n in self.chat.children] if self.chat is not None else []

    def get_values(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value if self.mode else None,
            "recipient": self.recipient,
            "transcript": self.transcript(),
        }
