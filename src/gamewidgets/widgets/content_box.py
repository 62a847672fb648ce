from __future__ import annotations

from typing import Any

from ..errors import ConfigurationError
from ..surface import Node
from .base import Widget


class ContentBox(Widget):
    name = "ContentBox"
    version = "0.3.0"
    description = "Simply displays some content"
    title = False
    class_name = "contentbox"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.main_text: str | None = None
        self.content: str | None = None
        self.hint: str | None = None

    def configure(self, options: dict[str, Any]) -> None:
        values = {}
        for key in ("mainText", "content", "hint"):
            value = options.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(
                    key, value, f"ContentBox.init: {key} must be string or undefined. Found: {value!r}")
            values[key] = value
        self.main_text = values["mainText"]
        self.content = values["content"]
        self.hint = values["hint"]

    def build(self, body: Node) -> None:
        if self.main_text:
            self.surface.add("span", body, classes=("contentbox-maintext",), text=self.main_text)
        if self.content:
            self.surface.add("div", body, classes=("contentbox-content",), text=self.content)
        if self.hint:
            self.surface.add("span", body, classes=("contentbox-hint",), text=self.hint)
