from __future__ import annotations

from typing import Any

from .. import events
from ..errors import ConfigurationError
from ..surface import Node
from .base import Widget


class DisconnectBox(Widget):
    name = "DisconnectBox"
    version = "0.3.0"
    description = "Lets the player leave the game."
    title = "Disconnect"
    class_name = "disconnectbox"
    texts = {
        "leave": "Leave Experiment",
        "left": "You Left",
        "connected": "Connected",
        "disconnected": "Disconnected",
    }

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.show_status = False
        self.disconnect_button: Node | None = None
        self.status: Node | None = None

    def configure(self, options: dict[str, Any]) -> None:
        show_status = options.get("showStatus", False)
        if not isinstance(show_status, bool):
            raise ConfigurationError("showStatus", show_status)
        self.show_status = show_status

    def build(self, body: Node) -> None:
        self.disconnect_button = body.append(self.surface.button(
            self.get_text("leave"), classes=("btn", "btn-lg"),
            onclick=self.guard(self.game.disconnect, "leave")))
        if self.show_status:
            self.status = self.surface.add("span", body, classes=("disconnectbox-status",))
        self._render(self.game.connected)

    def bind(self) -> None:
        self.on(events.SOCKET_DISCONNECT, lambda *a: self._render(False))
        self.on(events.SOCKET_CONNECT, lambda *a: self._render(True))

    def _render(self, connected: bool) -> None:
        self.disconnect_button.disabled = not connected
        self.disconnect_button.text = self.get_text("leave" if connected else "left")
        if self.status is not None:
            self.status.text = self.get_text("connected" if connected else "disconnected")
