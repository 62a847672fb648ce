"""In-process publish/subscribe channel carrying game events.

``EventBus.on`` returns a ``Subscription`` handle; disposing the handle is
the only way to unsubscribe, so owners never need to remember handler names.
"""

from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

# Topics consumed by widgets
STATECHANGE = "STATECHANGE"
UPDATED_PLIST = "UPDATED_PLIST"
SOCKET_CONNECT = "SOCKET_CONNECT"
SOCKET_DISCONNECT = "SOCKET_DISCONNECT"
FRAME_LOADED = "FRAME_LOADED"
STEP_CALLBACK_EXECUTED = "STEP_CALLBACK_EXECUTED"
PLAYER_CREATED = "PLAYER_CREATED"

# Topics produced by widgets
CONSENT_REJECTING = "CONSENT_REJECTING"
CONSENT_REJECTED = "CONSENT_REJECTED"
WIDGET_ENABLED = "WIDGET_ENABLED"
WIDGET_DISABLED = "WIDGET_DISABLED"
WIDGET_HIGHLIGHTED = "WIDGET_HIGHLIGHTED"
WIDGET_UNHIGHLIGHTED = "WIDGET_UNHIGHLIGHTED"
WIDGET_DESTROYED = "WIDGET_DESTROYED"


def data_topic(label: str) -> str:
    """Topic on which incoming data messages labelled ``label`` arrive."""
    return f"in.say.DATA.{label}"


def outbound_topic(label: str) -> str:
    """Topic on which the transport publishes messages sent with ``label``."""
    return f"out.say.{label}"


_ids = itertools.count(1)


@dataclass(eq=False)
class Subscription:
    topic: str
    handler: Handler
    bus: "EventBus"
    id: int = field(default_factory=lambda: next(_ids))
    active: bool = True

    def dispose(self) -> None:
        """Remove the handler from the bus. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self.bus._remove(self)


class EventBus:
    """Named-topic event emitter.

    Handlers run synchronously, in subscription order, on the caller's
    thread. Emission iterates over a copy of the handler list so handlers
    may subscribe or unsubscribe while an event is being delivered.
    """

    def __init__(self) -> None:
        self._subs: dict[str, list[Subscription]] = defaultdict(list)

    def on(self, topic: str, handler: Handler) -> Subscription:
        if not callable(handler):
            raise TypeError(f"handler for {topic!r} must be callable, got {handler!r}")
        sub = Subscription(topic=topic, handler=handler, bus=self)
        self._subs[topic].append(sub)
        return sub

    def once(self, topic: str, handler: Handler) -> Subscription:
        sub: Subscription

        def _once(*args: Any, **kwargs: Any) -> Any:
            sub.dispose()
            return handler(*args, **kwargs)

        sub = self.on(topic, _once)
        return sub

    def emit(self, topic: str, *args: Any, **kwargs: Any) -> int:
        """Deliver an event; returns the number of handlers invoked."""
        subs = list(self._subs.get(topic, ()))
        count = 0
        for sub in subs:
            if not sub.active:
                continue
            sub.handler(*args, **kwargs)
            count += 1
        logger.debug("emitted %s to %d handler(s)", topic, count)
        return count

    def count(self, topic: str) -> int:
        return len(self._subs.get(topic, ()))

    def topics(self) -> list[str]:
        return [t for t, subs in self._subs.items() if subs]

    def _remove(self, sub: Subscription) -> None:
        subs = self._subs.get(sub.topic)
        if not subs:
            return
        try:
            subs.remove(sub)
        except ValueError:
            return
        if not subs:
            del self._subs[sub.topic]
