from __future__ import annotations

from typing import Any

from .. import events
from ..surface import Node, Table
from .base import Widget

MISS = "-"


class VisualState(Widget):
    name = "VisualState"
    version = "0.3.0"
    description = "Visually display current, previous and next state of the game."
    title = "State"
    class_name = "visualstate"
    dependencies = {"Table": {}}

    table: Table | None = None

    def build(self, body: Node) -> None:
        self.table = Table(self.surface)
        body.append(self.table.node)
        self.write_state()

    def bind(self) -> None:
        self.on(events.STATECHANGE, self.write_state)

    def write_state(self, *args: Any) -> None:
        game = self.game
        if game.stage is not None:
            state = game.step_name(game.stage) or MISS
            pr = game.step_name(game.previous_step()) or MISS
            nx = game.step_name(game.next_step()) or MISS
        else:
            state, pr, nx = "Uninitialized", MISS, MISS

        self.table.set_rows(
            [["Previous: ", pr], ["Current: ", state], ["Next: ", nx]],
            row_classes={1: ["strong"]},
        )

    def get_values(self) -> dict[str, Any]:
        if not self.table or not self.table.rows:
            return {}
        return {"previous": self.table.cell(0, 1), "current": self.table.cell(1, 1), "next": self.table.cell(2, 1)}
