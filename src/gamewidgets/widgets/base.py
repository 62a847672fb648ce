"""Widget base class and lifecycle.

A widget goes through ``Constructed -> Initialized -> Attached -> Listening
-> Destroyed``, strictly forward:

* ``init(options)`` validates and stores configuration (``configure`` hook);
* ``append(container)`` builds the panel and its body (``build`` hook);
* ``listeners()`` subscribes to bus topics (``bind`` hook);
* ``destroy()`` releases every subscription, timer and node it owns
  (``teardown`` hook).

Subclasses only override the hooks they need; every hook defaults to a
no-op. Event handlers, timers and async replies registered through
``on``/``every``/``later``/``guard`` are no-ops once the widget is
destroyed, and exceptions raised inside them are logged instead of
propagating into the bus.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, ClassVar, Mapping

from .. import events
from ..errors import ConfigurationError, StateError
from ..events import EventBus, Subscription
from ..scheduler import ManualClock, Scheduler, TimerHandle
from ..surface import Node, RenderSurface

logger = logging.getLogger("gamewidgets.widgets")

DOM_EVENTS = ("onclick", "onfocus", "onblur", "onchange", "onsubmit", "onmouseover")


class Phase(IntEnum):
    CONSTRUCTED = 0
    INITIALIZED = 1
    ATTACHED = 2
    LISTENING = 3
    DESTROYED = 4


@dataclass(frozen=True)
class WidgetSnapshot:
    name: str
    title: str
    lines: list[str] = field(default_factory=list)
    ok: bool = True
    error: str | None = None
    stale: bool = False

    def display_lines(self, limit: int = 18, width: int = 80) -> list[str]:
        if not self.ok:
            out = ["ERROR"]
            if self.error:
                out.append(self.error[:width])
            return out
        out = [ln[:width] for ln in self.lines[:limit]]
        if self.stale:
            out.append("(stale)")
        return out


def _check_heading(field_name: str, value: Any) -> None:
    if value is None or value is False or isinstance(value, str):
        return
    raise ConfigurationError(field_name, value,
                             f"{field_name} must be string, false or missing. Found: {value!r}")


class Widget:
    # Metadata, copied into the registry descriptor on registration
    name: ClassVar[str] = ""
    version: ClassVar[str] = "0.0.1"
    description: ClassVar[str] = ""
    title: ClassVar[str | bool | None] = None
    footer: ClassVar[str | bool | None] = None
    class_name: ClassVar[str] = ""
    context: ClassVar[str | None] = None
    dependencies: ClassVar[dict[str, dict]] = {}
    defaults: ClassVar[dict[str, Any]] = {}
    texts: ClassVar[dict[str, Any]] = {}

    def __init__(
        self,
        game: Any,
        bus: EventBus,
        surface: RenderSurface | None = None,
        scheduler: Scheduler | None = None,
        wid: str | None = None,
    ) -> None:
        self.game = game
        self.bus = bus
        self.surface = surface or RenderSurface()
        self.scheduler = scheduler or ManualClock()
        self.wid = wid or uuid.uuid4().hex
        self.phase = Phase.CONSTRUCTED
        self.options: dict[str, Any] = {}

        self.title = type(self).title
        self.footer = type(self).footer
        self.class_name = type(self).class_name or type(self).__name__.lower()
        self.context = type(self).context

        self.panel: Node | None = None
        self.heading: Node | None = None
        self.body: Node | None = None
        self.footer_node: Node | None = None

        self.last_fault: str | None = None
        self._enabled = True
        self._highlighted = False
        self._subs: list[Subscription] = []
        self._timers: list[TimerHandle] = []
        self._finalizers: list[Callable[[Widget], Any]] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} wid={self.wid[:8]} phase={self.phase.name}>"

    @property
    def alive(self) -> bool:
        return self.phase is not Phase.DESTROYED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, options: Mapping[str, Any] | None = None) -> None:
        if self.phase is not Phase.CONSTRUCTED:
            raise StateError(f"{type(self).__name__}.init: already initialized")
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ConfigurationError("options", options,
                                     f"options must be a mapping or None. Found: {options!r}")
        opts = dict(options)

        _check_heading("title", opts.get("title"))
        _check_heading("footer", opts.get("footer"))
        for key in ("className", "context"):
            if key in opts and opts[key] is not None and not isinstance(opts[key], str):
                raise ConfigurationError(key, opts[key], f"{key} must be string. Found: {opts[key]!r}")
        if "texts" in opts and not isinstance(opts["texts"], Mapping):
            raise ConfigurationError("texts", opts["texts"])

        self.configure(opts)

        self.options = opts
        if "title" in opts:
            self.title = opts["title"]
        if "footer" in opts:
            self.footer = opts["footer"]
        if opts.get("className"):
            self.class_name = opts["className"]
        if opts.get("context"):
            self.context = opts["context"]
        self.phase = Phase.INITIALIZED
        logger.debug("%r initialized", self)

    def append(self, container: Node) -> Node:
        if self.phase is Phase.CONSTRUCTED:
            raise StateError(f"{type(self).__name__}.append: init must be called first")
        if self.phase is Phase.DESTROYED:
            raise StateError(f"{type(self).__name__}.append: widget destroyed")
        if self.phase is not Phase.INITIALIZED:
            raise StateError(f"{type(self).__name__}.append: already attached")
        if not isinstance(container, Node):
            raise TypeError(f"container must be a Node, got {container!r}")

        panel = self.surface.add("div", container, id=self.options.get("id"),
                                 classes=("ng_widget", "panel", "panel-default", self.class_name))
        self.panel = panel
        try:
            if self.title:
                self.set_title(self.title)
            self.body = self.surface.add("div", panel, classes=("panel-body",))
            if self.footer:
                self.set_footer(self.footer)
            if self.context:
                self.set_context(self.context)
            self._attach_dom_listeners()
            self.build(self.body)
        except Exception:
            self._cancel_timers()
            panel.detach()
            self.panel = self.heading = self.body = self.footer_node = None
            raise
        self.phase = Phase.ATTACHED
        logger.debug("%r attached", self)
        return panel

    def listeners(self) -> None:
        if self.phase is not Phase.ATTACHED:
            raise StateError(
                f"{type(self).__name__}.listeners: expected phase ATTACHED, got {self.phase.name}")
        self.bind()
        self.phase = Phase.LISTENING
        logger.debug("%r listening on %d topic(s)", self, len(self._subs))

    def destroy(self) -> None:
        if self.phase is Phase.DESTROYED:
            logger.debug("%r already destroyed", self)
            return
        if self.phase is Phase.CONSTRUCTED:
            raise StateError(f"{type(self).__name__}.destroy: widget was never initialized")

        self.phase = Phase.DESTROYED
        for sub in self._subs:
            sub.dispose()
        self._subs = []
        self._cancel_timers()
        try:
            self.teardown()
        except Exception:
            logger.warning("%s.destroy: error caught in teardown", type(self).__name__,
                           exc_info=True)
        if self.panel is not None:
            self.panel.detach()
        for fin in self._finalizers:
            fin(self)
        self._finalizers = []
        logger.debug("%r destroyed", self)
        self.bus.emit(events.WIDGET_DESTROYED, self)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def configure(self, options: dict[str, Any]) -> None:
        """Validate options and store them. Raise before assigning anything."""

    def build(self, body: Node) -> None:
        """Create the widget's nodes inside ``body``."""

    def bind(self) -> None:
        """Subscribe to bus topics with ``self.on``."""

    def teardown(self) -> None:
        """Release resources not tracked by the base class."""

    # ------------------------------------------------------------------
    # Owned subscriptions and timers
    # ------------------------------------------------------------------

    def on(self, topic: str, handler: Callable[..., Any]) -> Subscription:
        sub = self.bus.on(topic, self.guard(handler, topic))
        self._subs.append(sub)
        return sub

    def guard(self, fn: Callable[..., Any], context: str | None = None) -> Callable[..., Any]:
        """Wrap a callback so it is a no-op after destroy and never raises."""
        where = context or getattr(fn, "__name__", "callback")

        def _guarded(*args: Any, **kwargs: Any) -> Any:
            if not self.alive:
                return None
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                self.last_fault = f"{where}: {e}"
                logger.exception("%s: error in %s handler", type(self).__name__, where)
                return None

        return _guarded

    def every(self, interval: float, fn: Callable[[], Any]) -> TimerHandle:
        handle = self.scheduler.call_every(interval, self.guard(fn, "interval"))
        self._timers.append(handle)
        return handle

    def later(self, delay: float, fn: Callable[[], Any]) -> TimerHandle:
        handle: TimerHandle
        guarded = self.guard(fn, "timeout")

        def _fire() -> None:
            if handle in self._timers:
                self._timers.remove(handle)
            guarded()

        handle = self.scheduler.call_later(delay, _fire)
        self._timers.append(handle)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None:
            return
        handle.cancel()
        if handle in self._timers:
            self._timers.remove(handle)

    def add_finalizer(self, fn: Callable[["Widget"], Any]) -> None:
        self._finalizers.append(fn)

    def _cancel_timers(self) -> None:
        for handle in self._timers:
            handle.cancel()
        self._timers = []

    @property
    def subscriptions(self) -> list[Subscription]:
        return list(self._subs)

    @property
    def timers(self) -> list[TimerHandle]:
        return list(self._timers)

    # ------------------------------------------------------------------
    # Optional capabilities
    # ------------------------------------------------------------------

    def get_values(self) -> dict[str, Any]:
        return {}

    def is_enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        if self.panel is not None:
            self.panel.remove_class("disabled")
        self.bus.emit(events.WIDGET_ENABLED, self)

    def disable(self) -> None:
        if not self._enabled:
            return
        self._enabled = False
        if self.panel is not None:
            self.panel.add_class("disabled")
        self.bus.emit(events.WIDGET_DISABLED, self)

    def is_highlighted(self) -> bool:
        return self._highlighted

    def highlight(self) -> None:
        if self._highlighted:
            return
        self._highlighted = True
        if self.panel is not None:
            self.panel.add_class("highlighted")
        self.bus.emit(events.WIDGET_HIGHLIGHTED, self)

    def unhighlight(self) -> None:
        if not self._highlighted:
            return
        self._highlighted = False
        if self.panel is not None:
            self.panel.remove_class("highlighted")
        self.bus.emit(events.WIDGET_UNHIGHLIGHTED, self)

    def get_text(self, key: str, *args: Any) -> str:
        overrides = self.options.get("texts") or {}
        text = overrides.get(key, type(self).texts.get(key))
        if text is None:
            raise KeyError(f"{type(self).__name__} has no text {key!r}")
        if callable(text):
            return str(text(self, *args))
        return str(text)

    # ------------------------------------------------------------------
    # Panel decoration
    # ------------------------------------------------------------------

    def set_title(self, title: str | bool | None) -> None:
        if self.panel is None:
            raise StateError(f"{type(self).__name__}.set_title: panel is missing")
        _check_heading("title", title)
        if not title:
            if self.heading is not None:
                self.heading.detach()
                self.heading = None
            return
        if self.heading is None:
            self.heading = self.panel.insert(0, self.surface.element("div", classes=("panel-heading",)))
        self.heading.text = title

    def set_footer(self, footer: str | bool | None) -> None:
        if self.panel is None:
            raise StateError(f"{type(self).__name__}.set_footer: panel is missing")
        _check_heading("footer", footer)
        if not footer:
            if self.footer_node is not None:
                self.footer_node.detach()
                self.footer_node = None
            return
        if self.footer_node is None:
            self.footer_node = self.surface.add("div", self.panel, classes=("panel-footer",))
        self.footer_node.text = footer

    def set_context(self, context: str) -> None:
        if not isinstance(context, str):
            raise ConfigurationError("context", context, f"context must be string. Found: {context!r}")
        if self.panel is None:
            raise StateError(f"{type(self).__name__}.set_context: panel is missing")
        self.panel.remove_class(r"panel-[a-z]*")
        self.panel.add_class(f"panel-{context}")

    def _attach_dom_listeners(self) -> None:
        if self.panel is None:
            raise StateError(f"{type(self).__name__}._attach_dom_listeners: panel is missing")
        for ev in DOM_EVENTS:
            fn = self.options.get(ev)
            if callable(fn):
                self.panel.on(ev, self.guard(lambda *a, fn=fn: fn(self, *a), ev))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def snapshot(self) -> WidgetSnapshot:
        label = type(self).name or type(self).__name__
        heading = self.title if isinstance(self.title, str) and self.title else label
        lines = self.body.lines() if self.body is not None else []
        return WidgetSnapshot(
            name=label,
            title=heading,
            lines=lines,
            ok=self.alive,
            error=None if self.alive else "destroyed",
            stale=self.last_fault is not None,
        )
