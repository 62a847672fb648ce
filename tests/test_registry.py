"""Tests for the widget registry."""

import pytest

from gamewidgets import events
from gamewidgets.errors import ConfigurationError
from gamewidgets.widgets import REGISTRY, WidgetRegistry
from gamewidgets.widgets.base import Phase, Widget
from gamewidgets.widgets.debug_info import DebugInfo


class Needy(Widget):
    name = "Needy"
    version = "1.2.3"
    dependencies = {"Fancy": {}}


class Plain(Widget):
    name = "Plain"
    defaults = {"title": "Plain default"}


class TestCatalog:
    def test_default_registry_has_all_widgets(self):
        assert REGISTRY.names() == sorted([
            "Chat", "Consent", "ContentBox", "D3ts", "DebugInfo", "DisconnectBox",
            "GameBoard", "Goto", "MsgBar", "NDDBBrowser", "NextPreviousStep",
            "ServerInfoDisplay", "VisualState",
        ])

    def test_lookup_unknown(self, registry):
        with pytest.raises(KeyError, match="Unknown widget"):
            registry.lookup("Nope")

    def test_register_duplicate(self):
        reg = WidgetRegistry()
        reg.register("Plain", Plain)
        with pytest.raises(ValueError):
            reg.register("Plain", Plain)
        reg.register("Plain", Plain, replace=True)
        assert len(reg) == 1

    def test_register_rejects_non_widgets(self):
        with pytest.raises(TypeError):
            WidgetRegistry().register("Thing", dict)

    def test_decorator(self):
        reg = WidgetRegistry()

        @reg.widget()
        class Deco(Widget):
            name = "Deco"

        assert reg.lookup("Deco").cls is Deco

    def test_descriptor_copies_metadata(self):
        reg = WidgetRegistry()
        desc = reg.register("Needy", Needy)
        assert desc.version == "1.2.3"
        assert desc.class_name == "needy"


class TestGet:
    def test_missing_dependency(self, game, bus):
        reg = WidgetRegistry()
        reg.register("Needy", Needy)
        with pytest.raises(ConfigurationError) as exc:
            reg.get("Needy", game, bus)
        assert exc.value.field == "dependencies"
        reg.provide("Fancy")
        assert reg.get("Needy", game, bus).phase is Phase.INITIALIZED

    def test_defaults_merged_under_options(self, game, bus):
        reg = WidgetRegistry()
        reg.register("Plain", Plain)
        assert reg.get("Plain", game, bus).title == "Plain default"
        assert reg.get("Plain", game, bus, options={"title": "Mine"}).title == "Mine"

    def test_bad_options(self, registry, game, bus):
        with pytest.raises(ConfigurationError):
            registry.get("ContentBox", game, bus, options="nope")


class TestAppend:
    def test_append_mounts_and_listens(self, registry, mount):
        w = mount("GameBoard")
        assert w.phase is Phase.LISTENING
        assert w in registry.instances

    def test_append_without_listeners(self, mount):
        w = mount("GameBoard", {"listeners": False})
        assert w.phase is Phase.ATTACHED

    def test_destroy_forgets_instance(self, registry, mount):
        w = mount("GameBoard")
        w.destroy()
        assert w not in registry.instances

    def test_destroy_all(self, registry, mount):
        mount("GameBoard")
        mount("VisualState")
        registry.destroy_all()
        assert registry.instances == []

    def test_append_instance(self, registry, game, bus, surface):
        w = Plain(game, bus, surface=surface)
        w.init()
        assert registry.append(w, surface.container()) is w
        assert w.phase is Phase.LISTENING

    def test_listeners_failure_releases_widget(self, registry, mount, bus, clock, surface):
        class FlakyDebugInfo(DebugInfo):
            def bind(self):
                super().bind()
                self.on(events.STATECHANGE, self._tick)
                raise RuntimeError("bind failed")

        registry.register("FlakyDebugInfo", FlakyDebugInfo)
        before = len(surface.root.children)
        with pytest.raises(RuntimeError, match="bind failed"):
            mount("FlakyDebugInfo")
        assert registry.instances == []
        assert clock.pending() == 0
        assert bus.count(events.STATECHANGE) == 0
        assert surface.root.children[before].children == []
        registry.destroy_all()
        assert clock.pending() == 0
