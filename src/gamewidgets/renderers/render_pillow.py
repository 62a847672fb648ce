from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from PIL import Image, ImageDraw, ImageFont, ImageFilter
import os
import math

from ..board import BoardData

def _hex(c: str) -> tuple[int, int, int]:
    c = c.lstrip("#")
    return tuple(int(c[i:i+2], 16) for i in (0, 2, 4))

def _load_font(theme: dict, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    font_path = theme.get("font_path")
    try:
        if font_path:
            return ImageFont.truetype(os.path.expanduser(font_path), size=size)
        family = theme.get("font_family", "DejaVuSansMono")
        return ImageFont.truetype(f"{family}.ttf", size=size)
    except OSError:
        return ImageFont.load_default()

@dataclass(frozen=True)
class Layout:
    width: int
    height: int
    columns: int
    gap: int
    margin: int
    cell_w: int
    cell_h: int
    rows: int

def compute_layout(width: int, height: int, columns: int, n: int) -> Layout:
    margin = max(24, width // 80)
    gap = max(18, width // 120)
    cols = max(1, min(columns, n))
    rows = max(1, math.ceil(n / cols))
    cell_w = (width - 2 * margin - (cols - 1) * gap) // cols
    cell_h = (height - 2 * margin - (rows - 1) * gap) // rows
    return Layout(width, height, cols, gap, margin, cell_w, cell_h, rows)

def _draw_glow_text(img: Image.Image, draw: ImageDraw.ImageDraw, xy: tuple[int, int], text: str, font, fill_rgb, glow_rgb, glow_radius: int = 8):
    x, y = xy
    tw, th = draw.textbbox((0, 0), text, font=font)[2:]
    pad = glow_radius * 2
    tmp = Image.new("RGBA", (tw + pad*2, th + pad*2), (0, 0, 0, 0))
    td = ImageDraw.Draw(tmp)
    td.text((pad, pad), text, font=font, fill=(*glow_rgb, 120))
    tmp = tmp.filter(ImageFilter.GaussianBlur(radius=glow_radius))
    img.paste(tmp, (x - pad, y - pad), tmp)
    draw.text((x, y), text, font=font, fill=fill_rgb)

def render(
    out_path: Path,
    data: BoardData,
    resolution: tuple[int, int],
    columns: int,
    theme: dict,
) -> Path:
    w, h = resolution
    bg = _hex(theme.get("background", "#05060a"))
    fg = _hex(theme.get("foreground", "#e8e6df"))
    fg_dim = _hex(theme.get("foreground_dim", "#9a978c"))
    border = _hex(theme.get("panel_border", "#3a3f4b"))
    alert = _hex(theme.get("alert", "#ff3355"))
    muted = _hex(theme.get("stale", "#c9a227"))

    img = Image.new("RGBA", (w, h), (*bg, 255))
    draw = ImageDraw.Draw(img)

    layout = compute_layout(w, h, columns, max(1, len(data.results)))

    font_h = _load_font(theme, size=max(20, w // 90))
    font_b = _load_font(theme, size=max(16, w // 120))
    line_h = max(22, w // 90)
    max_lines = max(1, (layout.cell_h - 70) // line_h)

    for i, res in enumerate(data.results):
        r = i // layout.columns
        c = i % layout.columns
        x0 = layout.margin + c * (layout.cell_w + layout.gap)
        y0 = layout.margin + r * (layout.cell_h + layout.gap)
        x1 = x0 + layout.cell_w
        y1 = y0 + layout.cell_h

        draw.rounded_rectangle([x0, y0, x1, y1], radius=18, outline=border if res.ok else alert, width=2)

        header_color = fg if res.ok else alert
        if res.stale:
            header_color = muted
        _draw_glow_text(img, draw, (x0 + 16, y0 + 12), res.title, font_h, header_color, border, glow_radius=6)

        y = y0 + 58
        for ln in res.display_lines(limit=max_lines):
            draw.text((x0 + 16, y), ln, font=font_b, fill=fg_dim)
            y += line_h

    out_path.parent.mkdir(parents=True, exist_ok=True)
    img.convert("RGB").save(out_path, format="PNG")
    return out_path
