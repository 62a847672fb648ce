from __future__ import annotations

import numbers
from collections import deque
from typing import Any

from ..errors import ConfigurationError
from ..surface import Node
from .base import Widget

BARS = " ▁▂▃▄▅▆▇█"


def sparkline(values: list[float], lo: float = 0.0, hi: float = 1.0) -> str:
    if hi <= lo:
        hi = lo + 1.0
    out = []
    for v in values:
        frac = min(1.0, max(0.0, (v - lo) / (hi - lo)))
        out.append(BARS[round(frac * (len(BARS) - 1))])
    return "".join(out)


class D3ts(Widget):
    """Real-time plot of the last ``n`` values received on ``event``."""

    name = "D3ts"
    version = "0.2.0"
    description = "Time series plot of values received on an event."
    title = "D3 plot"
    class_name = "d3ts"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.event = "D3"
        self.n = 40
        self.domain = (0.0, 1.0)
        self.data: deque[float] = deque(maxlen=self.n)
        self.svg: Node | None = None

    def configure(self, options: dict[str, Any]) -> None:
        event = options.get("event", "D3")
        if not isinstance(event, str) or not event:
            raise ConfigurationError("event", event)
        n = options.get("n", 40)
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise ConfigurationError("n", n, f"n must be a positive integer. Found: {n!r}")
        domain = options.get("domain", (0.0, 1.0))
        if (not isinstance(domain, (list, tuple)) or len(domain) != 2
                or not all(isinstance(d, numbers.Real) and not isinstance(d, bool) for d in domain)
                or domain[0] >= domain[1]):
            raise ConfigurationError("domain", domain)
        self.event = event
        self.n = n
        self.domain = (float(domain[0]), float(domain[1]))
        self.data = deque(maxlen=n)

    def build(self, body: Node) -> None:
        self.svg = self.surface.add("svg", body, classes=("line",))
        self.redraw()

    def bind(self) -> None:
        self.on(self.event, self.tick)

    def tick(self, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"D3ts.tick: value must be a number, got {value!r}")
        self.data.append(float(value))
        self.redraw()

    def redraw(self) -> None:
        self.svg.text = sparkline(list(self.data), *self.domain)

    def get_values(self) -> dict[str, Any]:
        return {"data": list(self.data)}
