from __future__ import annotations

from ..surface import Node, Table
from .polling import PollingWidget

MISS = "-"


class DebugInfo(PollingWidget):
    name = "DebugInfo"
    version = "0.7.0"
    description = "Display basic info about a client's status."
    title = "Debug Info"
    class_name = "debuginfo"
    dependencies = {"Table": {}}

    table: Table | None = None

    def build_display(self, body: Node) -> None:
        self.table = Table(self.surface)
        body.append(self.table.node)

    def refresh(self) -> None:
        game = self.game
        stage_no = stage_id = MISS
        if game.stage is not None:
            stage_no = str(game.stage)
            stage_id = game.step_name(game.stage) or MISS
        player = getattr(game, "player", None)

        rows = [
            ["Treatment: ", game.treatment or MISS],
            ["Connected: ", "yes" if game.connected else "no"],
            ["Player Id: ", player.id if player else MISS],
            ["Stage  No: ", stage_no],
            ["Stage  Id: ", stage_id],
            ["Stage Lvl: ", game.stage_level.name],
            ["Players  : ", game.players.size()],
            ["Last  Err: ", game.last_error or MISS],
        ]
        self.table.set_rows(rows)

    def get_values(self) -> dict:
        return {" ".join(str(k).rstrip(": ").split()): v for k, v in self.table.rows} if self.table else {}
