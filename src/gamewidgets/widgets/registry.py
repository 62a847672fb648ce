from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ..errors import ConfigurationError
from ..events import EventBus
from ..scheduler import Scheduler
from ..surface import Node, RenderSurface
from .base import Widget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WidgetDescriptor:
    name: str
    cls: type[Widget]
    version: str = "0.0.1"
    description: str = ""
    title: str | bool | None = None
    footer: str | bool | None = None
    class_name: str = ""
    context: str | None = None
    dependencies: Mapping[str, Mapping] = field(default_factory=dict)
    defaults: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_class(cls, name: str, widget_cls: type[Widget]) -> "WidgetDescriptor":
        return cls(
            name=name,
            cls=widget_cls,
            version=widget_cls.version,
            description=widget_cls.description,
            title=widget_cls.title,
            footer=widget_cls.footer,
            class_name=widget_cls.class_name or name.lower(),
            context=widget_cls.context,
            dependencies=MappingProxyType(dict(widget_cls.dependencies)),
            defaults=MappingProxyType(dict(widget_cls.defaults)),
        )


class WidgetRegistry:
    """Catalog of widget types plus the instances it has mounted."""

    def __init__(self, capabilities: Mapping[str, Any] | None = None) -> None:
        self._widgets: dict[str, WidgetDescriptor] = {}
        self.capabilities: dict[str, Any] = dict(capabilities or {})
        self.instances: list[Widget] = []

    def __contains__(self, name: object) -> bool:
        return name in self._widgets

    def __len__(self) -> int:
        return len(self._widgets)

    def names(self) -> list[str]:
        return sorted(self._widgets)

    def register(self, name: str, widget_cls: type[Widget], replace: bool = False) -> WidgetDescriptor:
        if not isinstance(name, str) or not name:
            raise TypeError("register: name must be a non-empty string")
        if not (isinstance(widget_cls, type) and issubclass(widget_cls, Widget)):
            raise TypeError(f"register: {widget_cls!r} is not a Widget subclass")
        if name in self._widgets and not replace:
            raise ValueError(f"widget {name!r} already registered")
        desc = WidgetDescriptor.from_class(name, widget_cls)
        self._widgets[name] = desc
        return desc

    def widget(self, name: str | None = None, replace: bool = False) -> Callable[[type[Widget]], type[Widget]]:
        """Class decorator form of ``register``."""
        def deco(widget_cls: type[Widget]) -> type[Widget]:
            self.register(name or widget_cls.name or widget_cls.__name__, widget_cls, replace=replace)
            return widget_cls
        return deco

    def provide(self, name: str, value: Any = True) -> None:
        """Declare a capability that widget dependencies may require."""
        self.capabilities[name] = value

    def lookup(self, name: str) -> WidgetDescriptor:
        desc = self._widgets.get(name)
        if desc is None:
            raise KeyError(f"Unknown widget: {name}. Available: {self.names()}")
        return desc

    def missing_dependencies(self, desc: WidgetDescriptor) -> list[str]:
        return [d for d in desc.dependencies if d not in self.capabilities and d not in self._widgets]

    def get(
        self,
        name: str,
        game: Any,
        bus: EventBus,
        options: Mapping[str, Any] | None = None,
        surface: RenderSurface | None = None,
        scheduler: Scheduler | None = None,
    ) -> Widget:
        """Instantiate and ``init`` a registered widget."""
        if options is not None and not isinstance(options, Mapping):
            raise ConfigurationError("options", options, f"options must be a mapping or None. Found: {options!r}")
        desc = self.lookup(name)
        missing = self.missing_dependencies(desc)
        if missing:
            logger.warning("%s not found. %s cannot be loaded.", ", ".join(missing), name)
            raise ConfigurationError("dependencies", missing, f"{name} has unmet dependencies: {missing}")

        opts = dict(desc.defaults)
        opts.update(options or {})

        logger.info("creating widget %s v.%s", name, desc.version)
        widget = desc.cls(game, bus, surface=surface, scheduler=scheduler)
        widget.init(opts)
        return widget

    def append(
        self,
        w: str | Widget,
        root: Node,
        game: Any = None,
        bus: EventBus | None = None,
        options: Mapping[str, Any] | None = None,
        surface: RenderSurface | None = None,
        scheduler: Scheduler | None = None,
    ) -> Widget:
        """Mount a widget: ``get`` (when given a name), ``append``, ``listeners``.

        The instance is tracked until it is destroyed.
        """
        if isinstance(w, str):
            if bus is None:
                raise TypeError("append: bus is required when passing a widget name")
            w = self.get(w, game, bus, options=options, surface=surface, scheduler=scheduler)
        elif not isinstance(w, Widget):
            raise TypeError(f"append: w must be a widget name or instance, got {w!r}")

        w.append(root)
        if w.options.get("listeners", True) is not False:
            try:
                w.listeners()
            except Exception:
                # release the timers and nodes append already created
                w.destroy()
                raise
        self.instances.append(w)
        w.add_finalizer(self._forget)
        return w

    def destroy_all(self) -> None:
        for w in list(self.instances):
            w.destroy()
        if self.instances:
            logger.warning("destroy_all: some widgets could not be destroyed")

    def _forget(self, w: Widget) -> None:
        if w in self.instances:
            self.instances.remove(w)
