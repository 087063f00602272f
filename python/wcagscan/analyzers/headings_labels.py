# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import HEADING_SELECTOR, accessible_name, heading_level
from ._registry import analyzer

VAGUE_HEADING_RE = re.compile(
    r"^(more|click here|here|untitled|heading|title|section|misc|miscellaneous|other|stuff|info|"
    r"information|details|content|text|new section|read more|learn more)$",
    re.I,
)


def _bare(text: str) -> str:
    return text.strip().rstrip(".:!?").strip()


@analyzer("headings_labels", criteria=("2.4.6",))
def check_headings_labels(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = []
    previous = None
    for el in snapshot.query(HEADING_SELECTOR):
        name = accessible_name(snapshot, el)
        if not name:
            hits.append(element_hit("empty-heading", "Heading is empty", el, help="Headings must describe the section they introduce."))
            previous = None
            continue
        if VAGUE_HEADING_RE.match(_bare(name)):
            hits.append(
                element_hit(
                    "vague-heading",
                    f'Heading "{name}" is not descriptive',
                    el,
                    help="Name the topic of the section, e.g. \"More shipping options\".",
                )
            )
        key = (heading_level(el), name.lower())
        if previous == key:
            hits.append(element_hit("duplicate-heading", f'Heading "{name}" repeats the previous heading at the same level', el))
        previous = key

    for label in snapshot.query("label"):
        text = label.text()
        if not text and not label.query("img[alt]"):
            hits.append(element_hit("empty-label", "Form label has no text", label, help="Labels must describe the control they belong to."))

    return [result_from_hits(snapshot, "2.4.6", hits, config=config)]
