# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import HEADING_SELECTOR, innermost
from ._registry import analyzer

_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
_TEXT_BLOCKS = "p, li, dd, dt, blockquote, pre, td, th, figcaption"


def _is_heading(el) -> bool:
    return el.tag in _HEADING_TAGS or (el.attr("role") or "").strip().lower() == "heading"


def _paragraph_runs(snapshot: Snapshot, limit: int) -> list[dict]:
    hits = []
    parents = {}
    for p in snapshot.query("p"):
        parent = p.parent()
        if parent is not None:
            parents.setdefault(parent.index, parent)
    for parent in sorted(parents.values(), key=lambda el: el.index):
        run = []
        for child in parent.children() + [None]:
            if child is not None and child.tag == "p":
                run.append(child)
                continue
            if child is not None and not _is_heading(child):
                # other siblings neither extend nor end a run
                continue
            if len(run) > limit:
                hits.append(
                    element_hit(
                        "consecutive-paragraphs",
                        f"{len(run)} consecutive paragraphs without a section heading",
                        run[0],
                        help="Break long runs of text into sections with descriptive headings.",
                    )
                )
            run = []
    return hits


def _long_sections(snapshot: Snapshot, limit: int) -> list[dict]:
    headings = snapshot.query(HEADING_SELECTOR)
    words: dict[int, int] = {}
    for block in innermost(snapshot.query(_TEXT_BLOCKS)):
        owner = -1
        for pos, heading in enumerate(headings):
            if heading.index < block.index:
                owner = pos
            else:
                break
        words[owner] = words.get(owner, 0) + len(block.text().split())

    hits = []
    for owner in sorted(words):
        count = words[owner]
        if count <= limit:
            continue
        if owner >= 0:
            hits.append(
                element_hit(
                    "long-section",
                    f"Section under heading \"{headings[owner].text()[:60]}\" has {count} words without a subheading",
                    headings[owner],
                )
            )
        elif headings:
            hits.append(hit("long-section", f"{count} words of content appear before the first heading"))
        else:
            hits.append(hit("long-section", f"{count} words of content without any heading"))
    return hits


@analyzer("section_headings", criteria=("2.4.10",))
def check_section_headings(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = _paragraph_runs(snapshot, config.max_consecutive_paragraphs)
    hits.extend(_long_sections(snapshot, config.max_words_per_heading))
    return [result_from_hits(snapshot, "2.4.10", hits, config=config)]
