from __future__ import annotations

from typing import Any

from .. import events
from ..game import Player, StageLevel
from ..surface import Node
from .base import Widget

LEVEL_LABELS = {
    StageLevel.UNINITIALIZED: "uninit.",
    StageLevel.INITIALIZING: "init...",
    StageLevel.INITIALIZED: "init!",
    StageLevel.LOADING: "loading",
    StageLevel.LOADED: "loaded",
    StageLevel.PLAYING: "playing",
    StageLevel.DONE: "done",
}


def format_player(p: Player) -> str:
    level = LEVEL_LABELS.get(p.stage_level, str(p.stage_level))
    return f"[{p.label}]> \t({p.stage.round}) {p.stage.stage}.{p.stage.step} ({level})"


class GameBoard(Widget):
    name = "GameBoard"
    version = "0.5.0"
    description = "Offer a visual representation of the state of all players in the game."
    title = "Game Board"
    class_name = "gameboard"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.status: Node | None = None
        self.board: Node | None = None

    def build(self, body: Node) -> None:
        self.status = self.surface.add("div", body, id="gboard_status")
        self.board = self.surface.add("div", body, id="gboard")
        self.update_board()

    def bind(self) -> None:
        self.on(events.UPDATED_PLIST, self.update_board)

    def update_board(self, *args: Any) -> None:
        pl = self.game.players
        lines = [format_player(p) for p in pl]
        status = f"Connected players: {pl.size()}"

        self.board.clear()
        for line in lines:
            self.surface.add("span", self.board, classes=("gboard-player",), text=line)
            self.surface.add("hr", self.board)
        self.status.text = status
