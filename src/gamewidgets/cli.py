from __future__ import annotations

import argparse
import logging
from .config import load_config
from .board import Board
from .events import EventBus
from .game import LocalGame
from .scheduler import ManualClock
from .renderers import render_with

def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(prog="gamewidgets")
    ap.add_argument("--config", default="board.yaml", help="Path to board.yaml")
    ap.add_argument("--renderer", choices=["pillow", "web"], help="Override renderer.kind from config")
    ap.add_argument("--ticks", type=int, default=1, help="Seconds of virtual time to run before rendering")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config)
    renderer = args.renderer or cfg.renderer_kind

    bus = EventBus()
    clock = ManualClock()
    game = LocalGame.from_config(bus, cfg.game)

    board = Board(game, bus, scheduler=clock)
    board.mount_all(cfg.widget_order, cfg.widget_options)
    game.start()
    clock.advance(max(0, args.ticks))

    rendered = render_with(renderer, cfg.output_path, board.collect(), cfg.resolution,
                           cfg.columns, cfg.theme, cfg.web_renderer)
    board.destroy_all()
    print(rendered)
