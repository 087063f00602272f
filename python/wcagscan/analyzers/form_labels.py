# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import soupsieve

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import id_exists, idrefs, invalidish, text_by_ids
from ._registry import analyzer

CONTROL_SELECTOR = "input, select, textarea"
_UNLABELLED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}


def is_form_control(el) -> bool:
    if el.tag != "input":
        return True
    return (el.attr("type") or "text").strip().lower() not in _UNLABELLED_INPUT_TYPES


def has_label(snapshot: Snapshot, el) -> bool:
    if (el.attr("aria-label") or "").strip():
        return True
    if text_by_ids(snapshot, idrefs(el.attr("aria-labelledby"))).strip():
        return True
    wrapper = el.closest("label")
    if wrapper is not None and wrapper.text():
        return True
    control_id = (el.attr("id") or "").strip()
    if control_id:
        for label in snapshot.query(f"label[for='{soupsieve.escape(control_id)}']"):
            if label.text() or label.query("img[alt]"):
                return True
    return bool((el.attr("title") or "").strip())


@analyzer("form_labels", criteria=("3.3.1", "3.3.2"))
def check_form_labels(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    errors = []
    labels = []
    for el in snapshot.query(CONTROL_SELECTOR):
        if not is_form_control(el):
            continue
        if invalidish(el.attr("aria-invalid")):
            described = idrefs(el.attr("aria-describedby")) + idrefs(el.attr("aria-errormessage"))
            if not any(id_exists(snapshot, token) for token in described):
                errors.append(
                    element_hit(
                        "unidentified-error",
                        "Field is marked invalid but no error message is associated with it",
                        el,
                        help="Reference the error text with aria-describedby or aria-errormessage.",
                    )
                )
        if has_label(snapshot, el):
            continue
        if (el.attr("placeholder") or "").strip():
            labels.append(
                element_hit(
                    "placeholder-only",
                    f"Form field <{el.tag}> relies on placeholder text as its only label",
                    el,
                    help="Placeholders disappear on input; add a visible <label>.",
                )
            )
        else:
            labels.append(
                element_hit(
                    "unlabeled-control",
                    f"Form field <{el.tag}> has no label or instructions",
                    el,
                    help="Associate a <label for=...> or aria-label with the field.",
                )
            )
    return [
        result_from_hits(snapshot, "3.3.1", errors, config=config),
        result_from_hits(snapshot, "3.3.2", labels, config=config),
    ]
