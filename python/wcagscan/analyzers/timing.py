# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

import soupsieve

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import ElementHandle, Snapshot
from ..types import TestResult
from ._common import inline_scripts
from ._registry import analyzer

_TIMER_RE = re.compile(r"\bset(Timeout|Interval)\s*\(")
_SESSION_UI = "[id*=timeout i], [class*=timeout i], [id*=session i]"
_PAUSE_CONTROLS = "[aria-label*=pause i], [aria-label*=stop i]"
_MOTION_HELP = "Provide a control to pause, stop or hide moving and blinking content."


def _refresh_seconds(content: str) -> float | None:
    head = content.split(";", 1)[0].split(",", 1)[0].strip()
    try:
        return float(head)
    except ValueError:
        return None


def _time_limits(snapshot: Snapshot) -> list[dict]:
    hits = []
    for meta in snapshot.query("meta[http-equiv]"):
        if (meta.attr("http-equiv") or "").strip().lower() != "refresh":
            continue
        seconds = _refresh_seconds(meta.attr("content") or "")
        if seconds is not None and seconds > 0:
            hits.append(
                element_hit(
                    "timed-refresh",
                    f"Meta refresh with a {seconds:g} second time limit",
                    meta,
                    help="Let users turn off, adjust or extend the time limit.",
                )
            )
    timers = [s for s in inline_scripts(snapshot) if _TIMER_RE.search(s)]
    if timers:
        hits.append(
            hit(
                "script-timer",
                f"{len(timers)} inline script(s) use setTimeout or setInterval; verify users can extend or disable the timers",
                element="<script>",
            )
        )
    if snapshot.query(_SESSION_UI):
        hits.append(
            hit(
                "session-timeout",
                "Session timeout UI detected; verify users can extend the session before it expires",
                help="Warn before the session expires and offer at least 20 seconds to extend it.",
            )
        )
    return hits


def _has_pause_control(snapshot: Snapshot, el: ElementHandle) -> bool:
    if el.closest(_PAUSE_CONTROLS) is not None:
        return True
    el_id = (el.attr("id") or "").strip()
    return bool(el_id) and bool(snapshot.query(f"[aria-controls~='{soupsieve.escape(el_id)}']"))


def _endless_animation(el: ElementHandle) -> bool:
    if el.style("animation-play-state").strip().lower() == "paused":
        return False
    iterations = el.style("animation-iteration-count") or el.style("animation")
    return "infinite" in iterations.lower()


def _motion(snapshot: Snapshot) -> list[dict]:
    hits = []
    for el in snapshot.query("blink"):
        hits.append(element_hit("blink-element", "Deprecated <blink> element", el, help=_MOTION_HELP))
    for el in snapshot.query("marquee"):
        hits.append(element_hit("marquee-element", "Deprecated <marquee> element", el, help=_MOTION_HELP))
    for el in snapshot.query("[behavior=scroll]:not(marquee), [scrollamount]:not(marquee)"):
        hits.append(element_hit("scrolling-content", "Scrolling content without a pause mechanism", el, help=_MOTION_HELP))
    for el in snapshot.query("*"):
        if "blink" in el.style("text-decoration").lower() or "blink" in el.style("text-decoration-line").lower():
            hits.append(element_hit("css-blink", "Element uses text-decoration: blink", el, help=_MOTION_HELP))
        elif _endless_animation(el) and not _has_pause_control(snapshot, el):
            hits.append(
                element_hit("endless-animation", "Infinite CSS animation without a pause control", el, help=_MOTION_HELP)
            )
    return hits


@analyzer("timing", criteria=("2.2.1", "2.2.2"))
def check_timing(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    return [
        result_from_hits(snapshot, "2.2.1", _time_limits(snapshot), config=config),
        result_from_hits(snapshot, "2.2.2", _motion(snapshot), config=config),
    ]
