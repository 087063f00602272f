# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import HEADING_SELECTOR, heading_level, innermost
from ._registry import analyzer

_BOX_DRAWING_RE = re.compile(r"[\u2500-\u257f]")
_LETTER_RE = re.compile(r"[A-Za-z]{2,}")


def _looks_tabular(text: str) -> bool:
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) <= 3:
        return False
    spaced = [line for line in lines if re.search(r"\S\s{2,}\S", line)]
    return len(spaced) > 2


def _looks_like_ascii_art(text: str) -> bool:
    if _BOX_DRAWING_RE.search(text) or "|" in text or "\\" in text:
        return True
    return "*" in text and "/" in text


def _pseudo_text(value: str) -> str:
    value = (value or "").strip()
    if value in {"", "none", "normal"}:
        return ""
    return value.strip("'\"").strip()


@analyzer("info_relationships", criteria=("1.3.1",))
def check_info_relationships(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = []

    for el in snapshot.query("pre"):
        raw = el.text(collapse=False)
        if _looks_tabular(raw):
            hits.append(
                element_hit(
                    "pre-table",
                    "Preformatted text appears to lay out tabular data with spaces",
                    el,
                    help="Use a <table> with header cells for tabular data.",
                )
            )
        elif _looks_like_ascii_art(raw):
            hits.append(
                element_hit(
                    "ascii-art",
                    "Preformatted text appears to contain ASCII art or a text diagram",
                    el,
                    help="Provide a text alternative or replace the diagram with an image that has alt text.",
                )
            )

    spaced = [
        el
        for el in snapshot.query("p, div, span, td, li")
        if el.text(collapse=False).count("\xa0") > config.max_nbsp_run
    ]
    for el in innermost(spaced):
        count = el.text(collapse=False).count("\xa0")
        hits.append(
            element_hit(
                "nbsp-spacing",
                f"Content uses {count} non-breaking spaces to create visual layout",
                el,
                help="Use CSS for spacing so that the structure survives linearization.",
            )
        )

    for el in snapshot.query("*"):
        for pseudo in ("before", "after"):
            content = _pseudo_text(el.style("content", pseudo))
            if len(content) > 2 and _LETTER_RE.search(content):
                hits.append(
                    element_hit(
                        "pseudo-content",
                        f'Meaningful text "{content[:60]}" is injected with ::{pseudo}',
                        el,
                        help="Text added through CSS is not reliably exposed to assistive technology.",
                    )
                )

    previous = 0
    for el in snapshot.query(HEADING_SELECTOR):
        level = heading_level(el)
        if previous and level > previous + 1:
            hits.append(element_hit("heading-skip", f"Heading level skipped from h{previous} to h{level}", el))
        previous = level

    for table in snapshot.query("table"):
        if (table.attr("role") or "").strip().lower() in {"presentation", "none"}:
            continue
        rows = table.query("tr")
        if len(rows) < 2 or max(len(r.query("td, th")) for r in rows) < 2:
            continue
        if table.query("th, [scope], [role=columnheader], [role=rowheader]"):
            continue
        hits.append(
            element_hit(
                "table-headers",
                "Data table has no header cells",
                table,
                help="Mark header cells with <th> or role=columnheader/rowheader.",
            )
        )

    return [result_from_hits(snapshot, "1.3.1", hits, config=config)]
