from __future__ import annotations

import numbers
from typing import Any, ClassVar

from ..errors import ConfigurationError
from ..scheduler import TimerHandle
from ..surface import Node
from .base import Widget


def check_interval(value: Any, field_name: str = "intervalTime") -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(field_name, value, f"{field_name} must be a number. Found: {value!r}")
    if value <= 0:
        raise ConfigurationError(field_name, value, f"{field_name} must be > 0. Found: {value!r}")
    return float(value)


class PollingWidget(Widget):
    """Widget that rewrites its display from authoritative state on a timer.

    ``refresh`` runs once on append and then every ``intervalTime``
    milliseconds until destroy. ``refreshOn`` lists extra topics that
    trigger a refresh.
    """

    default_interval: ClassVar[float] = 1000.0

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.interval_time = self.default_interval
        self.refresh_on: list[str] = []
        self.interval: TimerHandle | None = None
        self.refreshes = 0

    def configure(self, options: dict[str, Any]) -> None:
        interval = self.default_interval
        if "intervalTime" in options:
            interval = check_interval(options["intervalTime"])
        refresh_on = options.get("refreshOn", [])
        if isinstance(refresh_on, str):
            refresh_on = [refresh_on]
        if not isinstance(refresh_on, (list, tuple)) or not all(isinstance(t, str) for t in refresh_on):
            raise ConfigurationError("refreshOn", refresh_on)
        self.interval_time = interval
        self.refresh_on = list(refresh_on)

    def build(self, body: Node) -> None:
        self.build_display(body)
        self._tick()
        self.interval = self.every(self.interval_time / 1000.0, self._tick)

    def bind(self) -> None:
        for topic in self.refresh_on:
            self.on(topic, self._tick)

    def teardown(self) -> None:
        self.interval = None

    def _tick(self, *args: Any) -> None:
        self.refresh()
        self.refreshes += 1

    def build_display(self, body: Node) -> None:
        """Create the nodes that ``refresh`` rewrites."""

    def refresh(self) -> None:
        raise NotImplementedError
