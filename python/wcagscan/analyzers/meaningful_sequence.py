# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import is_native_interactive, px, tabindex_of
from ._registry import analyzer

# Elements whose visual top edges differ by less than this share a row.
_ROW_TOLERANCE_PX = 10.0


def _order_value(el) -> int:
    try:
        return int(str(el.style("order")).strip() or "0")
    except ValueError:
        return 0


def _css_order_hits(snapshot: Snapshot) -> list[dict]:
    hits = []
    parents = {}
    for el in snapshot.query("*"):
        if _order_value(el) != 0:
            parent = el.parent()
            if parent is not None:
                parents.setdefault(parent.index, parent)
    for parent in sorted(parents.values(), key=lambda p: p.index):
        orders = [_order_value(child) for child in parent.children()]
        if any(a > b for a, b in zip(orders, orders[1:])):
            hits.append(
                element_hit(
                    "css-order",
                    f"CSS order reorders {len(orders)} child elements so visual order differs from DOM order",
                    parent,
                    help="Keep source order aligned with the visual reading order.",
                )
            )
    return hits


def _absolute_order_hits(snapshot: Snapshot, config: AnalyzerConfig) -> list[dict]:
    positioned = [
        el for el in snapshot.query("*") if el.style("position") == "absolute" and len(el.text()) > 20
    ]
    if len(positioned) <= config.max_absolute_blocks:
        return []
    placed = []
    for el in positioned:
        top = px(el.style("top"))
        left = px(el.style("left"))
        if top is None:
            continue
        placed.append((top, left or 0.0, el))
    if len(placed) < 2:
        return []

    def visual_key(item):
        top, left, el = item
        return (round(top / _ROW_TOLERANCE_PX), left, el.index)

    visual = [el.index for _, _, el in sorted(placed, key=visual_key)]
    dom = sorted(el.index for _, _, el in placed)
    if visual == dom:
        return []
    return [
        hit(
            "absolute-order",
            f"{len(positioned)} absolutely positioned text blocks are placed in a different order than they appear in the DOM",
            help="Reading order follows the DOM; avoid relying on positioning to sequence content.",
        )
    ]


@analyzer("meaningful_sequence", criteria=("1.3.2",))
def check_meaningful_sequence(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = _css_order_hits(snapshot)

    positive = [el for el in snapshot.query("[tabindex]") if (tabindex_of(el) or 0) > 0]
    if positive:
        hits.append(
            element_hit(
                "positive-tabindex",
                f"Found {len(positive)} element(s) with positive tabindex values; focus order may not match reading order",
                positive[0],
            )
        )

    floated = [
        el for el in snapshot.query("*") if el.style("float") in {"left", "right"} and len(el.text()) > 50
    ]
    if len(floated) > config.max_floated_blocks:
        hits.append(
            hit(
                "float-layout",
                f"{len(floated)} floated text blocks may present content in a different visual order",
                help="Verify the reading order when floats wrap.",
            )
        )

    hits.extend(_absolute_order_hits(snapshot, config))

    for el in snapshot.query("*"):
        count = str(el.style("column-count")).strip()
        if count in {"", "auto", "1"}:
            continue
        if any(is_native_interactive(child) for child in el.query("*")):
            hits.append(
                element_hit(
                    "multi-column",
                    f"Multi-column layout (column-count: {count}) contains interactive elements",
                    el,
                    help="Column flow can separate controls from the content they relate to.",
                )
            )

    rtl = snapshot.query("[dir=rtl]")
    ltr = snapshot.query("[dir=ltr]")
    if rtl and ltr:
        hits.append(
            element_hit(
                "mixed-direction",
                "Page mixes right-to-left and left-to-right content; verify the reading sequence",
                rtl[0],
            )
        )

    return [result_from_hits(snapshot, "1.3.2", hits, config=config)]
