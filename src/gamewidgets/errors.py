from __future__ import annotations

from typing import Any


class WidgetError(Exception):
    """Base class for every error raised by gamewidgets."""


class ConfigurationError(WidgetError, ValueError):
    """An option passed to ``init`` has the wrong type or an unknown value."""

    def __init__(self, field: str, value: Any, message: str | None = None) -> None:
        self.field = field
        self.value = value
        if message is None:
            message = f"invalid value for {field!r}: {value!r}"
        super().__init__(message)


class StateError(WidgetError, RuntimeError):
    """A lifecycle method was called out of order."""
