from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .events import EventBus
from .scheduler import ManualClock, Scheduler
from .surface import RenderSurface
from .widgets import REGISTRY
from .widgets.base import Widget, WidgetSnapshot
from .widgets.registry import WidgetRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardData:
    results: list[WidgetSnapshot]


class Board:
    """Mounts a list of widgets side by side and collects their snapshots.

    A widget that is unknown or fails to mount is reported in place instead
    of aborting the rest of the board.
    """

    def __init__(
        self,
        game: Any,
        bus: EventBus,
        registry: WidgetRegistry = REGISTRY,
        surface: RenderSurface | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.game = game
        self.bus = bus
        self.registry = registry
        self.surface = surface or RenderSurface()
        self.scheduler = scheduler or ManualClock()
        self._slots: list[tuple[str, Widget | None, str | None]] = []

    @property
    def widgets(self) -> list[Widget]:
        return [w for _, w, _ in self._slots if w is not None]

    def get(self, name: str) -> Widget | None:
        return next((w for n, w, _ in self._slots if n == name and w is not None), None)

    def mount(self, name: str, options: dict | None = None) -> Widget | None:
        if name not in self.registry:
            logger.warning("board: unknown widget %s", name)
            self._slots.append((name, None, "Unknown widget"))
            return None
        try:
            w = self.registry.append(
                name, self.surface.container(id=f"slot-{len(self._slots)}"),
                game=self.game, bus=self.bus, options=options,
                surface=self.surface, scheduler=self.scheduler)
        except Exception as e:
            logger.exception("board: could not mount %s", name)
            self._slots.append((name, None, str(e)))
            return None
        self._slots.append((name, w, None))
        return w

    def mount_all(self, order: list[str], widget_options: dict[str, dict] | None = None) -> list[Widget]:
        widget_options = widget_options or {}
        for name in order:
            self.mount(name, widget_options.get(name))
        return self.widgets

    def collect(self) -> BoardData:
        results: list[WidgetSnapshot] = []
        for name, w, error in self._slots:
            if w is None:
                desc_title = name
                if name in self.registry:
                    title = self.registry.lookup(name).title
                    desc_title = title if isinstance(title, str) and title else name
                results.append(WidgetSnapshot(name=name, title=desc_title, ok=False, error=error))
                continue
            results.append(w.snapshot())
        return BoardData(results=results)

    def destroy_all(self) -> None:
        for w in self.widgets:
            w.destroy()
