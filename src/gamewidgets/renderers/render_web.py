from __future__ import annotations

from pathlib import Path
import json
from playwright.sync_api import sync_playwright

from ..board import BoardData

HTML_TEMPLATE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Game board</title>
  <style>
    :root {{
      --bg: {bg};
      --fg: {fg};
      --fg-dim: {fg_dim};
      --border: {border};
      --alert: {alert};
      --stale: {stale};
      --gap: {gap}px;
      --pad: {pad}px;
      --radius: {radius}px;
      --cols: {cols};
      --font: ui-monospace, Menlo, Monaco, "DejaVu Sans Mono", "Liberation Mono", monospace;
    }}
    html, body {{
      margin: 0;
      width: {w}px;
      height: {h}px;
      background: var(--bg);
      color: var(--fg);
      font-family: var(--font);
      overflow: hidden;
    }}
    .grid {{
      display: grid;
      grid-template-columns: repeat(var(--cols), 1fr);
      gap: var(--gap);
      padding: var(--pad);
      box-sizing: border-box;
      width: 100%;
      height: 100%;
    }}
    .card {{
      border: 2px solid var(--border);
      border-radius: var(--radius);
      padding: 16px;
      box-sizing: border-box;
      overflow: hidden;
    }}
    .card.bad {{ border-color: var(--alert); }}
    .title {{
      font-size: 22px;
      margin: 0 0 10px 0;
      color: var(--fg);
    }}
    .title.bad {{ color: var(--alert); }}
    .title.stale {{ color: var(--stale); }}
    .line {{
      color: var(--fg-dim);
      font-size: 16px;
      line-height: 1.35;
      white-space: pre;
    }}
  </style>
</head>
<body>
  <div class="grid" id="grid"></div>

  <script>
    const data = {data_json};

    const grid = document.getElementById("grid");
    for (const w of data.results) {{
      const card = document.createElement("div");
      card.className = "card" + (w.ok ? "" : " bad");

      const title = document.createElement("div");
      title.className = "title" + (w.ok ? (w.stale ? " stale" : "") : " bad");
      title.textContent = w.title || w.name;
      card.appendChild(title);

      for (const ln of w.lines) {{
        const div = document.createElement("div");
        div.className = "line";
        div.textContent = ln;
        card.appendChild(div);
      }}

      grid.appendChild(card);
    }}
  </script>
</body>
</html>
"""

def payload_for(data: BoardData) -> dict:
    return {
        "results": [
            {
                "name": r.name,
                "title": r.title,
                "ok": r.ok,
                "error": r.error,
                "stale": r.stale,
                "lines": r.display_lines(limit=40, width=120),
            }
            for r in data.results
        ]
    }

def build_html(data: BoardData, resolution: tuple[int, int], columns: int, theme: dict) -> str:
    w, h = resolution
    # "</" inside the inline script would close the tag early
    data_json = json.dumps(payload_for(data)).replace("</", "<\\/")
    return HTML_TEMPLATE.format(
        w=w, h=h,
        cols=max(1, columns),
        pad=max(24, w // 80), gap=max(18, w // 120), radius=22,
        bg=theme.get("background", "#05060a"),
        fg=theme.get("foreground", "#e8e6df"),
        fg_dim=theme.get("foreground_dim", "#9a978c"),
        border=theme.get("panel_border", "#3a3f4b"),
        alert=theme.get("alert", "#ff3355"),
        stale=theme.get("stale", "#c9a227"),
        data_json=data_json,
    )

def render(
    out_path: Path,
    data: BoardData,
    resolution: tuple[int, int],
    columns: int,
    theme: dict,
    web_cfg: dict,
) -> Path:
    w, h = resolution
    html = build_html(data, resolution, columns, theme)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_html = out_path.with_suffix(".html")
    tmp_html.write_text(html, encoding="utf-8")

    scale = float(web_cfg.get("viewport_device_scale_factor", 1))
    headless = bool(web_cfg.get("headless", True))
    browser_name = str(web_cfg.get("browser", "chromium"))

    with sync_playwright() as p:
        browser = getattr(p, browser_name).launch(headless=headless)
        page = browser.new_page(viewport={"width": w, "height": h}, device_scale_factor=scale)
        page.goto(tmp_html.as_uri())
        page.wait_for_timeout(250)  # settle time for JS layout
        page.screenshot(path=str(out_path), full_page=False)
        browser.close()

    return out_path
