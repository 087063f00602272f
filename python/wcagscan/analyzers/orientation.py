# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import readable_sheets
from ._registry import analyzer

_ROTATE_RE = re.compile(r"rotate", re.I)
_HELP = "Do not restrict content to a single display orientation unless it is essential."


@analyzer("orientation", criteria=("1.3.4",))
def check_orientation(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    sheets, hits = readable_sheets(snapshot, "orientation")
    for sheet in sheets:
        for rule in sheet.rules:
            if not rule.media or "orientation" not in rule.media.lower():
                continue
            transform = rule.get("transform") or ""
            if _ROTATE_RE.search(transform) or rule.get("writing-mode") is not None:
                hits.append(
                    hit(
                        "orientation-lock",
                        "CSS media query with orientation lock detected",
                        element=rule.css_text,
                        help=_HELP,
                    )
                )

    for meta in snapshot.query("meta[name=viewport]"):
        content = (meta.attr("content") or "").lower()
        if "orientation=" in content:
            hits.append(element_hit("viewport-orientation", "Viewport meta tag specifies orientation", meta, help=_HELP))

    return [result_from_hits(snapshot, "1.3.4", hits, config=config)]
