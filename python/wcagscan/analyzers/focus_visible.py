# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import CssRule, Snapshot
from ..types import TestResult
from ._common import readable_sheets
from ._registry import analyzer

_FOCUS_RE = re.compile(r":focus(-visible|-within)?\b", re.I)
_NONE_VALUES = {"none", "0", "0px", "transparent"}
_INDICATOR_PROPS = ("box-shadow", "border", "border-color", "border-bottom", "background", "background-color", "text-decoration")
# Suppressing the outline on these selectors removes the indicator for most controls.
_BROAD_SELECTORS = {"*", "a", "button", "input", "select", "textarea", "html", "body"}


def _suppresses_outline(rule: CssRule) -> bool:
    outline = (rule.get("outline") or "").strip().lower()
    style = (rule.get("outline-style") or "").strip().lower()
    width = (rule.get("outline-width") or "").strip().lower()
    return outline in _NONE_VALUES or outline.startswith("none ") or style == "none" or width in {"0", "0px"}


def _has_indicator(rule: CssRule) -> bool:
    for prop in _INDICATOR_PROPS:
        value = (rule.get(prop) or "").strip().lower()
        if value and value not in _NONE_VALUES:
            return True
    outline = (rule.get("outline") or "").strip().lower()
    return bool(outline) and not _suppresses_outline(rule)


@analyzer("focus_visible", criteria=("2.4.7",))
def check_focus_visible(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    sheets, hits = readable_sheets(snapshot, "focus_visible")
    rules = [rule for sheet in sheets for rule in sheet.rules]
    focus_indicator = any(_FOCUS_RE.search(r.selector) and _has_indicator(r) for r in rules)

    for rule in rules:
        if not _suppresses_outline(rule):
            continue
        if _FOCUS_RE.search(rule.selector):
            if _has_indicator(rule):
                continue
        elif rule.selector.strip().lower() not in _BROAD_SELECTORS or focus_indicator:
            continue
        hits.append(
            hit(
                "outline-suppressed",
                f"Focus outline removed by '{rule.selector}' without an alternative focus indicator",
                element=rule.css_text,
                help="Keep a visible focus indicator, e.g. an outline or box-shadow on :focus-visible.",
            )
        )

    for el in snapshot.query("[style]"):
        inline = (el.attr("style") or "").lower().replace(" ", "")
        if "outline:none" in inline or "outline:0" in inline:
            if el.tag in {"a", "button", "input", "select", "textarea"} or el.attr("tabindex") is not None:
                hits.append(
                    element_hit("outline-suppressed", f"Inline style removes the focus outline of a focusable <{el.tag}>", el)
                )

    return [result_from_hits(snapshot, "2.4.7", hits, config=config)]
