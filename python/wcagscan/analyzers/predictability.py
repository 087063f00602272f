# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import inline_scripts
from ._registry import analyzer

_NAVIGATION_CALLS = ("window.open", "window.location", "submit()")


def _navigates(code: str) -> bool:
    return any(call in code for call in _NAVIGATION_CALLS)


def _on_focus(snapshot: Snapshot, scripts: list[str]) -> list[dict]:
    hits = []
    for el in snapshot.query("[onfocus]"):
        code = el.attr("onfocus") or ""
        if _navigates(code) or ".focus()" in code:
            hits.append(element_hit("focus-context-change", "Element has an onfocus handler that may change context", el))
    listeners = [s for s in scripts if "addEventListener" in s and "focus" in s and ("window.open" in s or "window.location" in s)]
    if listeners:
        hits.append(
            hit(
                "focus-context-change",
                f"{len(listeners)} script(s) with focus event listeners; verify they do not change context automatically",
                element="<script>",
            )
        )
    return hits


def _on_input(snapshot: Snapshot, scripts: list[str]) -> list[dict]:
    hits = []
    for el in snapshot.query("select[onchange]"):
        if _navigates(el.attr("onchange") or ""):
            hits.append(element_hit("input-context-change", "Select with onchange that changes context automatically", el))
    toggles = "input[type=radio][onchange], input[type=checkbox][onchange], input[type=radio][onclick], input[type=checkbox][onclick]"
    for el in snapshot.query(toggles):
        if _navigates(el.attr("onchange") or el.attr("onclick") or ""):
            hits.append(element_hit("input-context-change", "Input with automatic context change on selection", el))
    for form in snapshot.query("form"):
        has_submit = bool(form.query("button[type=submit], input[type=submit], button:not([type])"))
        if not has_submit and form.query("[onchange]"):
            hits.append(
                element_hit(
                    "input-context-change",
                    "Form without submit button but with onchange handlers; it may auto-submit",
                    form,
                )
            )
    handlers = [
        s
        for s in scripts
        if "addEventListener" in s and ("change" in s or "input" in s) and ("submit" in s or "window.location" in s)
    ]
    if handlers:
        hits.append(
            hit(
                "input-context-change",
                f"{len(handlers)} script(s) with change handlers that may auto-submit",
                element="<script>",
            )
        )
    return hits


def _change_on_request(snapshot: Snapshot, scripts: list[str]) -> list[dict]:
    hits = []
    for script in scripts:
        on_load = "window.onload" in script or "addEventListener('load'" in script or 'addEventListener("load"' in script
        if on_load and ("window.location" in script or "window.open" in script):
            hits.append(hit("onload-navigation", "Script navigates or opens a window on page load", element="<script>"))
    for meta in snapshot.query("meta[http-equiv]"):
        if (meta.attr("http-equiv") or "").strip().lower() == "refresh":
            hits.append(element_hit("meta-refresh", "Meta refresh causes automatic navigation", meta))
    return hits


@analyzer("predictability", criteria=("3.2.1", "3.2.2", "3.2.5"))
def check_predictability(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    scripts = inline_scripts(snapshot)
    return [
        result_from_hits(snapshot, "3.2.1", _on_focus(snapshot, scripts), config=config),
        result_from_hits(snapshot, "3.2.2", _on_input(snapshot, scripts), config=config),
        result_from_hits(snapshot, "3.2.5", _change_on_request(snapshot, scripts), config=config),
    ]
