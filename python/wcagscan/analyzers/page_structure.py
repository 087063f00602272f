# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import HEADING_SELECTOR, id_exists
from ._registry import analyzer

_SKIP_TEXT_RE = re.compile(r"\b(skip|jump)\b|main content", re.I)
_LANDMARK_SELECTOR = "main, nav, [role=main], [role=navigation]"
GENERIC_TITLES = {
    "document",
    "home",
    "index",
    "new page",
    "page",
    "untitled",
    "untitled document",
    "untitled page",
    "welcome",
}


def _has_skip_link(snapshot: Snapshot) -> bool:
    for link in snapshot.query("a[href^='#']"):
        target = (link.attr("href") or "")[1:]
        if target and _SKIP_TEXT_RE.search(link.text() or link.attr("aria-label") or "") and id_exists(snapshot, target):
            return True
    return False


@analyzer("page_structure", criteria=("2.4.1", "2.4.2"))
def check_page_structure(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    bypass = []
    if not snapshot.query(_LANDMARK_SELECTOR) and not snapshot.query(HEADING_SELECTOR) and not _has_skip_link(snapshot):
        bypass.append(
            hit(
                "no-bypass",
                "Page has no landmarks, headings or skip link to bypass repeated blocks",
                help="Add a main landmark, a heading structure or a skip link to the main content.",
            )
        )

    titles = []
    title_els = snapshot.query("head title") or snapshot.query("title")
    title_text = title_els[0].text() if title_els else ""
    if not title_text:
        titles.append(
            hit(
                "missing-title",
                "Document has no title or the title is empty",
                element=title_els[0].outer_html() if title_els else "",
                help="Give every page a <title> that describes its topic or purpose.",
            )
        )
    elif title_text.strip().lower() in GENERIC_TITLES or title_text.strip() == snapshot.url:
        titles.append(
            element_hit(
                "generic-title",
                f'Page title "{title_text}" does not describe the page',
                title_els[0],
                help="Use a title that identifies the page content, e.g. \"Pricing - Example Corp\".",
            )
        )

    return [
        result_from_hits(snapshot, "2.4.1", bypass, config=config),
        result_from_hits(snapshot, "2.4.2", titles, config=config),
    ]
