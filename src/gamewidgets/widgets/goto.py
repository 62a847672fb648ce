from __future__ import annotations

from ..game import GameStage, StageSpec
from ..surface import Node
from .base import Widget


def get_sequence(seq: list[StageSpec]) -> list[tuple[str, str]]:
    """Dropdown choices: ``"2"`` for single-step stages, ``"2.1"`` otherwise."""
    out = []
    for i, spec in enumerate(seq, start=1):
        single = len(spec.steps) == 1
        for j, step in enumerate(spec.steps, start=1):
            value = str(i) if single else f"{i}.{j}"
            label = spec.id if single else f"{spec.id}.{step}"
            out.append((value, f"{value} {label}"))
    return out


class Goto(Widget):
    name = "Goto"
    version = "0.1.0"
    description = "Creates a simple interface to move across steps in the sequence."
    title = False
    class_name = "goto"

    dropdown: Node | None = None

    def build(self, body: Node) -> None:
        self.dropdown = body.append(self.surface.select(
            [("", "Go to Step")] + get_sequence(self.game.sequence), id="ng_goto",
            onchange=self.guard(self.goto, "goto")))

    def goto(self, value: str) -> None:
        if not value:
            return
        self.game.goto_step(GameStage.parse(value))

    def enable(self) -> None:
        if self.dropdown is not None:
            self.dropdown.disabled = False
        super().enable()

    def disable(self) -> None:
        if self.dropdown is not None:
            self.dropdown.disabled = True
        super().disable()
