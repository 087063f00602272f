# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import innermost
from ._registry import analyzer

SENSORY_PATTERNS = (
    re.compile(r"click\s+the\s+(round|square|circular|triangular|red|green|blue)\s+(button|icon)", re.I),
    re.compile(r"press\s+the\s+(button|icon)\s+(on\s+the\s+)?(left|right|top|bottom|above|below)", re.I),
    re.compile(r"the\s+(button|link|icon)\s+(on\s+the\s+)?(left|right|top|bottom)", re.I),
    re.compile(r"(round|square|circular)\s+(button|icon)", re.I),
    re.compile(r"click\s+(above|below|left|right)", re.I),
    re.compile(r"see\s+the\s+(diagram|chart|map)\s+above", re.I),
    re.compile(r"hear\s+the\s+(sound|audio|tone)", re.I),
    re.compile(r"listen\s+for", re.I),
)
_HELP = "Provide instructions that do not rely solely on shape, size, location or sound."


@analyzer("sensory_characteristics", criteria=("1.3.3",))
def check_sensory_characteristics(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = []
    candidates = snapshot.query("p, li, div, span, label, button")
    for pattern in SENSORY_PATTERNS:
        matched = [el for el in candidates if pattern.search(el.text())]
        for el in innermost(matched):
            text = el.text()
            phrase = pattern.search(text).group(0)
            hits.append(
                element_hit(
                    "sensory-instruction",
                    f'Possible sensory-only instruction ("{phrase}"): "{text[:100]}"',
                    el,
                    help=_HELP,
                )
            )

    for img in snapshot.query("img[alt]"):
        alt = (img.attr("alt") or "").strip()
        lowered = alt.lower()
        if ("arrow" in lowered or "icon" in lowered) and ("click" in lowered or "see" in lowered):
            hits.append(
                element_hit(
                    "instructional-image",
                    f'Image with instructional alt text may rely on visual characteristics: "{alt}"',
                    img,
                    help=_HELP,
                )
            )
    return [result_from_hits(snapshot, "1.3.3", hits, config=config)]
