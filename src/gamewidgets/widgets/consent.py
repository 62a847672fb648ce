from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from .. import events
from ..errors import ConfigurationError
from ..surface import Node
from .base import Widget


def _show_hide(w: Widget, s: str) -> str:
    return ("Hide" if s == "hide" else "Show") + " Consent Form"


class Consent(Widget):
    name = "Consent"
    version = "0.4.0"
    description = "Displays a configurable consent form."
    title = False
    class_name = "consent"

    texts = {
        "areYouSure": "You did not consent and are about to leave the study. Are you sure?",
        "printText": "If you need a copy of this consent form, you may print a copy of this page for your records.",
        "printBtn": "Print this page",
        "consentTerms": "Do you understand and consent to these terms?",
        "agree": "Yes, I agree",
        "notAgree": "No, I do not agree",
        "notAgreed": "You did not give your consent. You can now close this page.",
        "showHideConsent": _show_hide,
    }

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.consent: dict[str, str] = {}
        self.show_print = True
        self.confirm: Callable[[str], bool] = lambda question: True
        self.not_agreed = False
        self.form: Node | None = None
        self.agree: Node | None = None
        self.not_agree: Node | None = None
        self.rejected_note: Node | None = None
        self.toggle: Node | None = None

    def configure(self, options: dict[str, Any]) -> None:
        consent = options.get("consent")
        if consent is None:
            consent = {}
        if not isinstance(consent, Mapping) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in consent.items()):
            raise ConfigurationError(
                "consent", consent, f"Consent: consent must be a mapping of strings or undefined. Found: {consent!r}")
        show_print = options.get("showPrint", True)
        if not isinstance(show_print, bool):
            raise ConfigurationError("showPrint", show_print)
        confirm = options.get("confirm", self.confirm)
        if not callable(confirm):
            raise ConfigurationError("confirm", confirm)
        self.consent = dict(consent)
        self.show_print = show_print
        self.confirm = confirm

    def build(self, body: Node) -> None:
        self.form = self.surface.add("div", body, id="consent")
        for key in self.consent:
            self.surface.add("div", self.form, id=key.lower().replace("_", "-"))
        if self.show_print:
            self.surface.add("div", self.form, classes=("consent-print",), text=self.get_text("printText"))
            self.form.append(self.surface.button(self.get_text("printBtn"), id="print"))
        self.surface.add("div", self.form, classes=("consent-terms",), text=self.get_text("consentTerms"))
        self.agree = self.form.append(self.surface.button(self.get_text("agree"), id="agree",
                                                          classes=("btn", "btn-lg", "btn-info")))
        self.not_agree = self.form.append(self.surface.button(self.get_text("notAgree"), id="notAgree",
                                                              classes=("btn", "btn-lg", "btn-danger")))
        self.rejected_note = self.surface.add("div", body, id="notAgreed", text=self.get_text("notAgreed"))
        self.rejected_note.hidden = True
        self.toggle = body.append(self.surface.button(self.get_text("showHideConsent", "show"), id="show-consent"))
        self.toggle.hidden = True

    def bind(self) -> None:
        self.on(events.FRAME_LOADED, self._populate)

    def _populate(self, *args: Any) -> None:
        for key, text in self.consent.items():
            node = self.form.find(key.lower().replace("_", "-"))
            if node is not None:
                node.text = text
        self.agree.on("onclick", self.guard(self.accept, "agree"))
        self.not_agree.on("onclick", self.guard(self.reject, "notAgree"))

    def accept(self) -> None:
        self.game.done({"consent": True})

    def reject(self) -> bool:
        if not self.confirm(self.get_text("areYouSure")):
            return False
        self.bus.emit(events.CONSENT_REJECTING)
        self.not_agreed = True
        self.game.set({"consent": False})
        for btn in (self.agree, self.not_agree):
            btn.disabled = True
            btn.on("onclick", None)
        self.game.disconnect()
        self.form.hidden = True
        self.rejected_note.hidden = False
        self.toggle.hidden = False
        self.toggle.on("onclick", self.guard(self._toggle_form, "show-consent"))
        self.bus.emit(events.CONSENT_REJECTED)
        return True

    def _toggle_form(self) -> None:
        self.form.hidden = not self.form.hidden
        self.toggle.text = self.get_text("showHideConsent", "show" if self.form.hidden else "hide")

    def enable(self) -> None:
        if self.not_agreed:
            return
        for btn in (self.agree, self.not_agree):
            if btn is not None:
                btn.disabled = False
        super().enable()

    def disable(self) -> None:
        if self.not_agreed:
            return
        for btn in (self.agree, self.not_agree):
            if btn is not None:
                btn.disabled = True
        super().disable()

    def get_values(self) -> dict[str, Any]:
        return {"consent": not self.not_agreed}
