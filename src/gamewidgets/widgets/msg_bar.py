from __future__ import annotations

from typing import Any

from .. import events
from ..game import STANDARD_RECIPIENTS
from ..surface import Node, set_options
from .base import Widget


class MsgBar(Widget):
    name = "MsgBar"
    version = "0.4.0"
    description = "Send txt messages to players"
    title = "Send MSG to players"
    class_name = "msgbar"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.msg_text: Node | None = None
        self.recipient: Node | None = None
        self.send_button: Node | None = None

    def build(self, body: Node) -> None:
        self.send_button = body.append(self.surface.button("Send", onclick=self.guard(self.send, "send")))
        self.msg_text = body.append(self.surface.text_input())
        self.recipient = body.append(self.surface.select(self._choices()))

    def bind(self) -> None:
        self.on(events.UPDATED_PLIST, self._populate)

    def _choices(self) -> list[tuple[str, str]]:
        return [(r, r) for r in STANDARD_RECIPIENTS] + [(p.id, p.label) for p in self.game.players]

    def _populate(self, *args: Any) -> None:
        set_options(self.recipient, self._choices())

    def send(self) -> bool:
        text = (self.msg_text.value or "").strip()
        self.msg_text.value = ""
        if not text:
            return False
        self.game.say("TXT", self.recipient.value, text)
        return True
