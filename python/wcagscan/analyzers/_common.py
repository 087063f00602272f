# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import logging
import re
from typing import Any, Iterable

import soupsieve

from ..normalize import stylesheet_denied_hit
from ..snapshot import ElementHandle, Snapshot, StylesheetAccess

logger = logging.getLogger(__name__)

HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6, [role=heading]"
FOCUSABLE_SELECTOR = (
    "a[href], area[href], button, input, select, textarea, summary, iframe, "
    "[tabindex], [contenteditable=true], [contenteditable='']"
)
_NUM_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")


def idrefs(value: str | None) -> list[str]:
    return [t for t in str(value or "").split() if t.strip()]


def trueish(value: str | None) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def invalidish(value: str | None) -> bool:
    text = str(value or "").strip().lower()
    if not text:
        return False
    return text not in {"0", "false", "no", "off"}


def lang_ok(lang: str | None) -> bool:
    if not lang:
        return False
    text = str(lang).strip()
    if not text:
        return False
    return re.fullmatch(r"[A-Za-z]{2,3}(-[A-Za-z0-9]{1,8})*", text) is not None


def px(value: str | None) -> float | None:
    m = _NUM_RE.match(str(value or ""))
    return float(m.group(1)) if m else None


def heading_level(el: ElementHandle) -> int:
    if re.fullmatch(r"h[1-6]", el.tag):
        return int(el.tag[1])
    try:
        return max(1, int(str(el.attr("aria-level") or "2").strip()))
    except ValueError:
        return 2


def tabindex_of(el: ElementHandle) -> int | None:
    raw = el.attr("tabindex")
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def is_native_interactive(el: ElementHandle) -> bool:
    if el.tag == "a":
        return bool((el.attr("href") or "").strip())
    if el.tag == "input":
        return (el.attr("type") or "").strip().lower() != "hidden"
    return el.tag in {"button", "select", "textarea", "summary"}


def is_focusable(el: ElementHandle) -> bool:
    if el.attr("disabled") is not None and el.tag in {"button", "input", "select", "textarea"}:
        return False
    tabindex = tabindex_of(el)
    if tabindex is not None:
        return tabindex >= 0
    if el.attr("contenteditable") is not None:
        return (el.attr("contenteditable") or "").strip().lower() in {"", "true"}
    return is_native_interactive(el) or el.tag == "iframe" or (el.tag == "area" and el.attr("href") is not None)


def is_ancestor(outer: ElementHandle, inner: ElementHandle) -> bool:
    return inner.path().startswith(outer.path() + "/")


def innermost(elements: Iterable[ElementHandle]) -> list[ElementHandle]:
    """Drop every element that contains another element of the same list."""
    items = list(elements)
    return [el for el in items if not any(is_ancestor(el, other) for other in items if other is not el)]


def text_by_ids(snapshot: Snapshot, ids: list[str]) -> str:
    parts = []
    for token in ids:
        for target in snapshot.query(f"#{soupsieve.escape(token)}"):
            parts.append(target.text())
            break
    return " ".join(p for p in parts if p)


def accessible_name(snapshot: Snapshot, el: ElementHandle) -> str:
    """Approximate accessible name: aria-label, aria-labelledby, content, title."""
    label = (el.attr("aria-label") or "").strip()
    if label:
        return label
    labelledby = idrefs(el.attr("aria-labelledby"))
    if labelledby:
        text = text_by_ids(snapshot, labelledby).strip()
        if text:
            return text
    parts = [el.text()]
    for img in el.query("img[alt], [role=img][aria-label]"):
        parts.append((img.attr("alt") or img.attr("aria-label") or "").strip())
    if el.tag == "input":
        parts.append((el.attr("value") or "").strip())
    text = " ".join(p for p in parts if p).strip()
    if text:
        return text
    return (el.attr("title") or "").strip()


def readable_sheets(snapshot: Snapshot, analyzer: str) -> tuple[list[StylesheetAccess], list[dict[str, Any]]]:
    readable: list[StylesheetAccess] = []
    denied: list[tuple[str | None, str]] = []
    for sheet in snapshot.stylesheets():
        if sheet.denied:
            logger.debug("%s: skipping stylesheet %s on %s (%s)", analyzer, sheet.href, snapshot.url, sheet.reason)
            denied.append((sheet.href, sheet.reason))
            continue
        readable.append(sheet)
    hits: list[dict[str, Any]] = [stylesheet_denied_hit(denied)] if denied else []
    return readable, hits


def id_exists(snapshot: Snapshot, token: str) -> bool:
    return bool(token) and bool(snapshot.query(f"#{soupsieve.escape(token)}"))


def inline_scripts(snapshot: Snapshot) -> list[str]:
    # HtmlElement.text() skips script bodies; read them from outer_html instead
    out = []
    for script in snapshot.query("script:not([src])"):
        html = script.outer_html()
        start = html.find(">")
        end = html.rfind("</")
        out.append(html[start + 1 : end] if start != -1 and end > start else "")
    return out
