from __future__ import annotations

from typing import Any

from .. import events
from ..errors import ConfigurationError
from ..surface import Node
from .base import Widget


class NextPreviousStep(Widget):
    name = "NextPreviousStep"
    version = "1.1.0"
    description = "Adds two buttons to push forward or rewind the state of the game by one step."
    title = "Next/Previous Step"
    class_name = "nextprevious"
    defaults = {"id": "nextprevious"}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.update_on: list[str] = [events.STEP_CALLBACK_EXECUTED]
        self.rew: Node | None = None
        self.fwd: Node | None = None

    def configure(self, options: dict[str, Any]) -> None:
        update_on = options.get("updateOn", [events.STEP_CALLBACK_EXECUTED])
        if isinstance(update_on, str):
            update_on = [update_on]
        if not isinstance(update_on, (list, tuple)) or not all(isinstance(t, str) for t in update_on):
            raise ConfigurationError("updateOn", update_on)
        self.update_on = list(update_on)

    def build(self, body: Node) -> None:
        prefix = self.options.get("id", "nextprevious")
        self.rew = body.append(self.surface.button("<<", id=f"{prefix}_rew",
                                                   onclick=self.guard(self.rewind, "rew")))
        self.fwd = body.append(self.surface.button(">>", id=f"{prefix}_fwd",
                                                   onclick=self.guard(self.forward, "fwd")))
        self.update_buttons()

    def bind(self) -> None:
        for topic in self.update_on:
            self.on(topic, self.update_buttons)

    def has_next_step(self) -> bool:
        return self.game.next_step() is not None

    def has_previous_step(self) -> bool:
        return self.game.previous_step() is not None

    def forward(self) -> None:
        self.game.step()
        self.update_buttons()

    def rewind(self) -> None:
        prev = self.game.previous_step()
        if prev is None:
            return
        self.game.goto_step(prev)
        self.update_buttons()

    def update_buttons(self, *args: Any) -> None:
        self.fwd.disabled = not self.has_next_step()
        self.rew.disabled = not self.has_previous_step()
