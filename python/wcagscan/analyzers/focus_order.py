# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import FOCUSABLE_SELECTOR, is_focusable, tabindex_of
from ._registry import analyzer


@analyzer("focus_order", criteria=("2.4.3",))
def check_focus_order(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = []
    focusable = [el for el in snapshot.query(FOCUSABLE_SELECTOR) if is_focusable(el)]

    positive = [(tabindex_of(el) or 0, el) for el in focusable if (tabindex_of(el) or 0) > 0]
    for value, el in positive:
        hits.append(
            element_hit(
                "positive-tabindex",
                f'Element uses positive tabindex="{value}", which overrides the natural focus order',
                el,
                help="Use tabindex=\"0\" and arrange the DOM in the intended order.",
            )
        )

    values = sorted({value for value, _ in positive})
    for low, high in zip(values, values[1:]):
        if high - low > config.max_tabindex_gap:
            hits.append(
                hit(
                    "non-sequential-tabindex",
                    f"Non-sequential tabindex values ({low} -> {high}) make the focus order hard to follow",
                )
            )

    for el in focusable:
        if el.closest("[aria-hidden=true]") is not None:
            hits.append(
                element_hit(
                    "focusable-hidden",
                    "Focusable element is inside aria-hidden content",
                    el,
                    help="Remove the element from the tab order or expose it to assistive technology.",
                )
            )

    return [result_from_hits(snapshot, "2.4.3", hits, config=config)]
