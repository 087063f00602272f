# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import accessible_name, is_native_interactive, tabindex_of, trueish
from ._registry import analyzer
from .form_labels import has_label, is_form_control

_WIDGET_SELECTOR = (
    "button, a[href], input, select, textarea, [role=button], [role=link], [role=checkbox], "
    "[role=radio], [role=switch], [role=tab], [role=menuitem], [role=combobox], [role=slider]"
)
_KEY_HANDLERS = ("onkeydown", "onkeyup", "onkeypress")


@analyzer("name_role_value", criteria=("4.1.1", "4.1.2"))
def check_name_role_value(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    parsing = []
    seen: dict[str, list] = {}
    for el in snapshot.query("[id]"):
        token = (el.attr("id") or "").strip()
        if token:
            seen.setdefault(token, []).append(el)
    for token in sorted(seen, key=lambda t: seen[t][0].index):
        if len(seen[token]) > 1:
            parsing.append(
                element_hit(
                    "duplicate-id",
                    f'id "{token}" is used by {len(seen[token])} elements',
                    seen[token][1],
                    help="Element ids must be unique within the page.",
                )
            )

    widgets = []
    for el in snapshot.query(_WIDGET_SELECTOR):
        if trueish(el.attr("aria-hidden")) or el.closest("[aria-hidden=true]") is not None:
            continue
        if el.tag == "input":
            kind = (el.attr("type") or "text").strip().lower()
            if kind == "hidden":
                continue
            if is_form_control(el):
                # labels for text-like fields are reported under 3.3.2
                continue
            named = bool((el.attr("value") or "").strip() or (el.attr("alt") or "").strip()) or has_label(snapshot, el)
            if not named and kind in {"submit", "reset"}:
                named = True  # browsers supply a default caption
        elif el.tag in {"select", "textarea"}:
            continue
        else:
            named = bool(accessible_name(snapshot, el))
        if not named:
            role = (el.attr("role") or el.tag).strip()
            widgets.append(
                element_hit(
                    "unnamed-control",
                    f"Interactive element ({role}) is missing an accessible name",
                    el,
                    help="Provide visible text, aria-label or aria-labelledby.",
                )
            )

    for el in snapshot.query("[onclick]"):
        if is_native_interactive(el) or (el.attr("role") or "").strip():
            continue
        if any(el.attr(h) is not None for h in _KEY_HANDLERS) or tabindex_of(el) is not None:
            continue
        widgets.append(
            element_hit(
                "pointer-only-handler",
                f"<{el.tag}> has a click handler but no role, tabindex or keyboard handler",
                el,
                help="Use a <button> or add role, tabindex=\"0\" and a key handler.",
            )
        )

    return [
        result_from_hits(snapshot, "4.1.1", parsing, config=config),
        result_from_hits(snapshot, "4.1.2", widgets, config=config),
    ]
