from __future__ import annotations

from typing import Any

from .. import events
from ..surface import Node, Table
from .base import Widget

WAITING = "Waiting for the reply from Server..."


class ServerInfoDisplay(Widget):
    name = "ServerInfoDisplay"
    version = "0.5.0"
    description = "Displays information about the server."
    title = "Server Info"
    class_name = "serverinfodisplay"
    dependencies = {"Table": {}}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.div: Node | None = None
        self.table: Table | None = None
        self.button: Node | None = None
        self.info: dict[str, Any] = {}

    def build(self, body: Node) -> None:
        self.table = Table(self.surface)
        self.button = body.append(self.surface.button("Refresh", onclick=self.guard(self.get_info, "refresh")))
        self.div = self.surface.add("div", body, classes=("serverinfo",))
        self.get_info()

    def bind(self) -> None:
        self.on(events.PLAYER_CREATED, self.get_info)

    def get_info(self, *args: Any) -> None:
        self.div.clear()
        self.div.text = WAITING
        self.game.get("INFO", self.guard(self.process_info, "INFO"))

    def process_info(self, info: dict[str, Any]) -> None:
        info = dict(info)
        node = self.table.set_rows([[key, value] for key, value in info.items()])
        self.info = info
        self.div.text = ""
        self.div.clear()
        self.div.append(node)

    def get_values(self) -> dict[str, Any]:
        return dict(self.info)
