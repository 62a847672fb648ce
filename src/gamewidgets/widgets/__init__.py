from __future__ import annotations

from ..surface import Table
from . import (
    browser,
    chat,
    consent,
    content_box,
    debug_info,
    disconnect_box,
    game_board,
    goto,
    msg_bar,
    next_previous,
    server_info,
    timeseries,
    visual_state,
)
from .base import Phase, Widget, WidgetSnapshot
from .registry import WidgetDescriptor, WidgetRegistry


def default_registry() -> WidgetRegistry:
    reg = WidgetRegistry(capabilities={"Table": Table, "TriggerPipeline": browser.TriggerPipeline})
    for cls in (
        chat.Chat,
        consent.Consent,
        content_box.ContentBox,
        debug_info.DebugInfo,
        disconnect_box.DisconnectBox,
        game_board.GameBoard,
        goto.Goto,
        msg_bar.MsgBar,
        browser.NDDBBrowser,
        next_previous.NextPreviousStep,
        server_info.ServerInfoDisplay,
        timeseries.D3ts,
        visual_state.VisualState,
    ):
        reg.register(cls.name, cls)
    return reg


REGISTRY = default_registry()

__all__ = [
    "REGISTRY",
    "Phase",
    "Widget",
    "WidgetDescriptor",
    "WidgetRegistry",
    "WidgetSnapshot",
    "default_registry",
]
