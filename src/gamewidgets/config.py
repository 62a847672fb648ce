from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import yaml

SUPPORTED_RESOLUTIONS = {
    "1920x1080": (1920, 1080),
    "3840x2160": (3840, 2160),
    "2560x1600": (2560, 1600),
}

DEFAULT_WIDGETS = ["VisualState", "GameBoard", "DebugInfo", "Chat"]

def _expand(path: str) -> str:
    return os.path.expanduser(os.path.expandvars(path))

@dataclass(frozen=True)
class Config:
    raw: dict

    @property
    def resolution(self) -> tuple[int, int]:
        res = self.raw.get("resolution", "1920x1080")
        if res not in SUPPORTED_RESOLUTIONS:
            raise ValueError(f"Unsupported resolution {res!r}. Supported: {list(SUPPORTED_RESOLUTIONS)}")
        return SUPPORTED_RESOLUTIONS[res]

    @property
    def columns(self) -> int:
        return int(self.raw.get("columns", 3))

    @property
    def output_path(self) -> Path:
        out = self.raw.get("output", {}).get("path", "~/.cache/gamewidgets/board.png")
        return Path(_expand(out))

    @property
    def renderer_kind(self) -> str:
        return str(self.raw.get("renderer", {}).get("kind", "pillow"))

    @property
    def widget_order(self) -> list[str]:
        return list(self.raw.get("board", {}).get("widgets", DEFAULT_WIDGETS))

    @property
    def widget_options(self) -> dict[str, dict]:
        opts = self.raw.get("widgets") or {}
        if not isinstance(opts, dict):
            raise ValueError("widgets must be a mapping of widget name to options.")
        return {str(k): dict(v or {}) for k, v in opts.items()}

    @property
    def game(self) -> dict:
        return dict(self.raw.get("game") or {})

    @property
    def theme(self) -> dict:
        return dict(self.raw.get("theme") or {})

    @property
    def web_renderer(self) -> dict:
        return dict(self.raw.get("web_renderer") or {})

def load_config(path: str | Path) -> Config:
    p = Path(_expand(str(path)))
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("config.yaml must contain a YAML mapping at top level.")
    return Config(raw=raw)
