# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import accessible_name
from ._registry import analyzer

VAGUE_LINK_PATTERNS = (
    re.compile(r"^(click\s+here|here|read\s+more|more|learn\s+more|see\s+more|continue|next|back|previous|go)$", re.I),
    re.compile(r"^(download|view|open|see|check\s+out|find\s+out)$", re.I),
    re.compile(r"^(this|that|these|those)$", re.I),
    re.compile(r"^(link|button|page|article|details|info|information)$", re.I),
)
# Repeated navigation labels that commonly point to several equivalent URLs.
OK_DUPLICATES = {"home", "contact", "about", "login", "search", "help", "skip to content"}


def _in_page(href: str) -> bool:
    href = href.strip().lower()
    return href.startswith("#") or href.startswith("javascript:")


@analyzer("link_purpose", criteria=("2.4.4", "2.4.9"))
def check_link_purpose(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    in_context = []
    link_only = []
    destinations: dict[str, list[str]] = {}

    for link in snapshot.query("a[href]"):
        href = (link.attr("href") or "").strip()
        if _in_page(href):
            continue
        text = link.text()
        aria_label = (link.attr("aria-label") or "").strip()
        title = (link.attr("title") or "").strip()
        name = accessible_name(snapshot, link)
        if not name:
            # nameless links are reported under 4.1.2
            continue

        if not aria_label and not title:
            if any(p.match(text) for p in VAGUE_LINK_PATTERNS):
                in_context.append(
                    element_hit(
                        "vague-link",
                        f'Vague link text "{text}"; users may not understand the link\'s purpose',
                        link,
                        help=f'Replace "{text}" with text that names the destination, e.g. "Download the 2024 annual report".',
                    )
                )
            if len(name) <= 2:
                in_context.append(
                    element_hit(
                        "short-link-text",
                        f'Very short link text "{name}" without aria-label or title',
                        link,
                        help="Add an aria-label describing the link's purpose or expand the link text.",
                    )
                )
        if text.lower().startswith(("http://", "https://", "www.")) and len(text) > config.max_url_link_chars:
            in_context.append(
                element_hit(
                    "url-link-text",
                    f"Long URL used as link text ({len(text)} chars); screen readers announce the entire URL",
                    link,
                    help="Replace the URL with descriptive text.",
                )
            )

        key = (aria_label or name).lower()
        seen = destinations.setdefault(key, [])
        if href not in seen:
            seen.append(href)

        if len(name) < config.min_link_text_chars and len(name.split()) < 3 and len(aria_label) < 10:
            link_only.append(
                element_hit(
                    "link-only-context",
                    f'Link text "{name}" may not be descriptive enough on its own',
                    link,
                    help="Make the link text meaningful without its surrounding context.",
                )
            )

    for key in sorted(destinations):
        hrefs = destinations[key]
        if len(hrefs) > 1 and key not in OK_DUPLICATES:
            shown = ", ".join(hrefs[:3]) + ("..." if len(hrefs) > 3 else "")
            in_context.append(
                hit(
                    "ambiguous-destination",
                    f'Same link text "{key}" points to {len(hrefs)} different destinations: {shown}',
                    element=f'Multiple links with text: "{key}"',
                    help='Make link text unique or add context, e.g. "View product A details".',
                )
            )

    return [
        result_from_hits(snapshot, "2.4.4", in_context, config=config),
        result_from_hits(snapshot, "2.4.9", link_only, config=config),
    ]
