"""Minimal in-memory render surface.

Widgets build a tree of ``Node`` objects and attach click/change handlers to
them. Hosts that draw to a real screen walk the tree; the renderers in
``gamewidgets.renderers`` flatten it into text lines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Sequence


@dataclass(eq=False)
class Node:
    tag: str
    id: str | None = None
    classes: list[str] = field(default_factory=list)
    text: str = ""
    value: Any = None
    disabled: bool = False
    hidden: bool = False
    options: list[tuple[str, str]] = field(default_factory=list)
    attrs: dict[str, Any] = field(default_factory=dict)
    handlers: dict[str, Callable[..., Any]] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)
    parent: "Node | None" = None
    scroll_top: int = 0

    # -- tree ---------------------------------------------------------------

    def append(self, child: "Node") -> "Node":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def insert(self, index: int, child: "Node") -> "Node":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.insert(index, child)
        return child

    def remove(self, child: "Node") -> None:
        self.children.remove(child)
        child.parent = None

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.remove(self)

    def clear(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []

    def walk(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> "Node | None":
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def find_class(self, name: str) -> list["Node"]:
        return [n for n in self.walk() if name in n.classes]

    # -- classes --------------------------------------------------------------

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_class(self, pattern: str) -> None:
        """Remove every class fully matching the regular expression ``pattern``."""
        rx = re.compile(pattern)
        self.classes = [c for c in self.classes if not rx.fullmatch(c)]

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # -- interaction ------------------------------------------------------------

    def on(self, event: str, handler: Callable[..., Any] | None) -> None:
        if handler is None:
            self.handlers.pop(event, None)
        else:
            self.handlers[event] = handler

    def dispatch(self, event: str, *args: Any) -> bool:
        """Fire a DOM-style handler. Disabled nodes ignore user events."""
        handler = self.handlers.get(event)
        if handler is None or self.disabled:
            return False
        handler(*args)
        return True

    def click(self) -> bool:
        return self.dispatch("onclick")

    def change(self, value: Any) -> bool:
        if self.disabled:
            return False
        self.value = value
        return self.dispatch("onchange", value)

    def scroll_to_end(self) -> None:
        self.scroll_top = len(self.children)

    # -- text -------------------------------------------------------------------

    def text_content(self) -> str:
        parts = [self.text] if self.text else []
        parts.extend(c.text_content() for c in self.children if not c.hidden)
        return " ".join(p for p in parts if p)

    def lines(self) -> list[str]:
        """Flatten into display lines: block nodes and table rows break lines."""
        if self.hidden:
            return []
        if self.tag in ("tr", "span", "button", "option", "li"):
            txt = self.text_content()
            return [txt] if txt else []
        if self.tag == "select":
            label = next((lbl for val, lbl in self.options if val == self.value), "")
            return [f"[{label}]"] if label else []
        if self.tag in ("textarea", "input"):
            return [f"> {self.value or ''}"]
        out = [self.text] if self.text else []
        for child in self.children:
            out.extend(child.lines())
        return out


class RenderSurface:
    """Factory for nodes, rooted at a single screen node."""

    def __init__(self) -> None:
        self.root = Node("body", id="root")

    def element(self, tag: str, id: str | None = None, classes: Sequence[str] = (),
                text: str = "", **attrs: Any) -> Node:
        return Node(tag, id=id, classes=list(classes), text=text, attrs=dict(attrs))

    def add(self, tag: str, parent: Node, id: str | None = None,
            classes: Sequence[str] = (), text: str = "", **attrs: Any) -> Node:
        return parent.append(self.element(tag, id=id, classes=classes, text=text, **attrs))

    def button(self, text: str, id: str | None = None,
               onclick: Callable[[], Any] | None = None,
               classes: Sequence[str] = ("btn",)) -> Node:
        node = self.element("button", id=id, classes=classes, text=text)
        node.on("onclick", onclick)
        return node

    def textarea(self, id: str | None = None) -> Node:
        return self.element("textarea", id=id, classes=(), text="")

    def text_input(self, id: str | None = None) -> Node:
        return self.element("input", id=id)

    def select(self, options: Sequence[tuple[str, str]] = (), id: str | None = None,
               onchange: Callable[[Any], Any] | None = None) -> Node:
        node = self.element("select", id=id)
        set_options(node, options)
        node.on("onchange", onchange)
        return node

    def get(self, node_id: str) -> Node | None:
        return self.root.find(node_id)

    def container(self, id: str | None = None) -> Node:
        """A fresh div attached to the screen root, ready to host a widget."""
        return self.add("div", self.root, id=id)


def set_options(select: Node, options: Sequence[tuple[str, str]]) -> None:
    """Replace the options of a select, keeping the value if still offered."""
    select.options = [(str(v), str(lbl)) for v, lbl in options]
    values = [v for v, _ in select.options]
    if select.value not in values:
        select.value = values[0] if values else None


class Table:
    """Row-oriented table that (re)builds its node on ``parse``."""

    def __init__(self, surface: RenderSurface, id: str | None = None) -> None:
        self.node = surface.element("table", id=id)
        self.rows: list[list[Any]] = []
        self.row_classes: dict[int, list[str]] = {}

    def set_rows(self, rows: Sequence[Sequence[Any]],
                 row_classes: dict[int, list[str]] | None = None) -> Node:
        """Replace every row at once; on failure the table is left as it was."""
        previous = (self.rows, self.row_classes)
        self.rows = [list(cells) for cells in rows]
        self.row_classes = {i: list(names) for i, names in (row_classes or {}).items()}
        try:
            return self.parse()
        except Exception:
            self.rows, self.row_classes = previous
            raise

    def parse(self) -> Node:
        built = []
        for i, cells in enumerate(self.rows):
            tr = Node("tr", classes=list(self.row_classes.get(i, [])))
            for cell in cells:
                tr.append(Node("td", text="" if cell is None else str(cell)))
            built.append(tr)
        self.node.clear()
        for tr in built:
            self.node.append(tr)
        return self.node

    def cell(self, row: int, col: int) -> Any:
        return self.rows[row][col]
