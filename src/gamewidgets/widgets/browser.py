from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from ..errors import ConfigurationError
from ..scheduler import TimerHandle
from ..surface import Node
from .base import Widget
from .polling import check_interval

Trigger = Callable[[Any], Any]

NO_ELEMENT = "No element found"


class TriggerPipeline:
    """Ordered transformations applied to a record before display.

    Each trigger receives the previous trigger's output. A falsy return
    stops the pipeline and the whole pull yields ``None``.
    """

    def __init__(self, triggers: Iterable[Trigger] = ()) -> None:
        self._triggers: list[Trigger] = []
        for t in triggers:
            self.add_trigger(t)

    def __len__(self) -> int:
        return len(self._triggers)

    def add_trigger(self, trigger: Trigger, pos: int | None = None) -> Trigger:
        if not callable(trigger):
            raise TypeError(f"trigger must be callable, got {trigger!r}")
        if pos is None:
            self._triggers.append(trigger)
        else:
            self._triggers.insert(pos, trigger)
        return trigger

    def remove_trigger(self, trigger: Trigger) -> bool:
        try:
            self._triggers.remove(trigger)
        except ValueError:
            return False
        return True

    def reset_triggers(self) -> None:
        self._triggers = []

    def pull(self, record: Any) -> Any:
        if record is None:
            return None
        out = record
        for trigger in self._triggers:
            out = trigger(out)
            if not out:
                return None
        return out


@dataclass(frozen=True)
class NavigationResult:
    found: bool
    record: Any = None
    pointer: int | None = None
    size: int = 0

    @property
    def position(self) -> str:
        if not self.found or self.pointer is None:
            return NO_ELEMENT
        return f"{self.pointer + 1}/{self.size}"


class CursorNavigator:
    """Cursor over an ordered record collection.

    The pointer is either ``None`` or a valid index. Moving past a boundary
    or over an empty collection reports "no element found" and leaves the
    pointer where it was.
    """

    def __init__(self, records: Iterable[Any] = (), triggers: Iterable[Trigger] = ()) -> None:
        self.records: list[Any] = list(records)
        self.pointer: int | None = None
        self.triggers = TriggerPipeline(triggers)

    def size(self) -> int:
        return len(self.records)

    @property
    def current(self) -> Any:
        return None if self.pointer is None else self.records[self.pointer]

    def add(self, record: Any) -> Any:
        self.records.append(record)
        return record

    def sort(self, key: str | Callable[[Any], Any] | None = None) -> None:
        """Sort records; a string key sorts mappings by that field."""
        current = self.current
        if isinstance(key, str):
            field = key
            self.records.sort(key=lambda r: r[field])
        else:
            self.records.sort(key=key)
        if self.pointer is not None:
            self.pointer = next(i for i, r in enumerate(self.records) if r is current)

    def first(self) -> NavigationResult:
        return self._move(0)

    def last(self) -> NavigationResult:
        return self._move(len(self.records) - 1)

    def next(self) -> NavigationResult:
        return self._move(0 if self.pointer is None else self.pointer + 1)

    def previous(self) -> NavigationResult:
        if self.pointer is None:
            return self._miss()
        return self._move(self.pointer - 1)

    def _move(self, index: int) -> NavigationResult:
        if not 0 <= index < len(self.records):
            return self._miss()
        self.pointer = index
        out = self.triggers.pull(self.records[index])
        if out is None:
            return self._miss()
        return NavigationResult(True, out, self.pointer, len(self.records))

    def _miss(self) -> NavigationResult:
        return NavigationResult(False, None, self.pointer, len(self.records))


class NDDBBrowser(Widget):
    name = "NDDBBrowser"
    version = "0.3.0"
    description = "Provides a very simple interface to browse a record collection."
    class_name = "nddbbrowser"
    dependencies = {"TriggerPipeline": {}}
    defaults = {"id": "nddbbrowser"}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.id = "nddbbrowser"
        self.nav = CursorNavigator()
        self.info_delay = 2000.0
        self.commands: Node | None = None
        self.info: Node | None = None
        self.info_timeout: TimerHandle | None = None

    def configure(self, options: dict[str, Any]) -> None:
        wid = options.get("id", "nddbbrowser")
        if not isinstance(wid, str) or not wid:
            raise ConfigurationError("id", wid)
        records = options.get("records", [])
        if not isinstance(records, (list, tuple)):
            raise ConfigurationError("records", records, f"records must be a list. Found: {records!r}")
        triggers = options.get("triggers", [])
        if not isinstance(triggers, (list, tuple)) or not all(callable(t) for t in triggers):
            raise ConfigurationError("triggers", triggers, "triggers must be a list of callables")
        delay = check_interval(options["infoDelay"], "infoDelay") if "infoDelay" in options else 2000.0

        self.id = wid
        self.nav = CursorNavigator(records, triggers)
        self.info_delay = delay

    # Collection and trigger passthroughs

    def add(self, record: Any) -> Any:
        return self.nav.add(record)

    def sort(self, key: Any = None) -> None:
        self.nav.sort(key)

    def add_trigger(self, trigger: Trigger) -> Trigger:
        return self.nav.triggers.add_trigger(trigger)

    def remove_trigger(self, trigger: Trigger) -> bool:
        return self.nav.triggers.remove_trigger(trigger)

    def reset_triggers(self) -> None:
        self.nav.triggers.reset_triggers()

    def event(self, action: str) -> str:
        return f"{self.id}_{action}"

    def build(self, body: Node) -> None:
        self.commands = self.surface.add("div", body, id=f"{self.id}_commands")
        for label, action in (("<<", "GO_TO_FIRST"), ("<", "GO_TO_PREVIOUS"),
                              (">", "GO_TO_NEXT"), (">>", "GO_TO_LAST")):
            topic = self.event(action)
            self.commands.append(self.surface.button(
                label, id=f"{self.id}_{action.lower()}",
                onclick=self.guard(lambda t=topic: self.bus.emit(t), action)))
        self.info = self.surface.add("span", self.commands, classes=("nddbbrowser-info",))

    def bind(self) -> None:
        self.on(self.event("GO_TO_FIRST"), lambda *a: self._notify(self.nav.first()))
        self.on(self.event("GO_TO_PREVIOUS"), lambda *a: self._notify(self.nav.previous()))
        self.on(self.event("GO_TO_NEXT"), lambda *a: self._notify(self.nav.next()))
        self.on(self.event("GO_TO_LAST"), lambda *a: self._notify(self.nav.last()))

    def _notify(self, result: NavigationResult) -> NavigationResult:
        if result.found:
            self.bus.emit(self.event("GOT"), result.record)
        self.write_info(result.position)
        return result

    def write_info(self, text: str) -> None:
        self.cancel(self.info_timeout)
        self.info.text = text
        self.info_timeout = self.later(self.info_delay / 1000.0, self._clear_info)

    def _clear_info(self) -> None:
        self.info_timeout = None
        self.info.text = ""

    def get_values(self) -> dict[str, Any]:
        return {"pointer": self.nav.pointer, "size": self.nav.size(), "current": self.nav.current}
