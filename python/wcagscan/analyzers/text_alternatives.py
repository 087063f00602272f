# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import re

from ..config import AnalyzerConfig
from ..normalize import element_hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import idrefs, text_by_ids, trueish
from ._registry import analyzer

_FILENAME_RE = re.compile(r"^[\w\-. ]+\.(png|jpe?g|gif|svg|webp|bmp|tiff?|avif|ico)$", re.I)
_REDUNDANT_RE = re.compile(r"^(image|picture|photo|graphic|icon)\s+(of|showing)\b", re.I)
_PLACEHOLDER_ALTS = {
    "alt",
    "graphic",
    "icon",
    "image",
    "img",
    "logo",
    "photo",
    "picture",
    "placeholder",
    "spacer",
    "untitled",
}


def _is_decorative(el) -> bool:
    role = (el.attr("role") or "").strip().lower()
    if role in {"presentation", "none"}:
        return True
    if trueish(el.attr("aria-hidden")):
        return True
    alt = el.attr("alt")
    return alt is not None and alt.strip() == ""


def _is_tracking_pixel(el) -> bool:
    return (el.attr("width") or "").strip() in {"0", "1"} and (el.attr("height") or "").strip() in {"0", "1"}


@analyzer("text_alternatives", criteria=("1.1.1",))
def check_text_alternatives(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    hits = []
    for el in snapshot.query("img, input[type=image], svg[role=img], [role=img]"):
        if el.tag == "img" and _is_tracking_pixel(el):
            continue
        aria_label = (el.attr("aria-label") or "").strip()
        labelledby = text_by_ids(snapshot, idrefs(el.attr("aria-labelledby"))).strip()
        alt = el.attr("alt")
        alt_text = (alt or "").strip()
        if el.tag == "svg" and not (aria_label or labelledby):
            title = el.query("title")
            labelledby = title[0].text() if title else ""
        informative = bool(aria_label or labelledby or alt_text)

        if _is_decorative(el):
            if informative:
                hits.append(
                    element_hit(
                        "semantic-conflict",
                        "Image is marked decorative but also carries an accessible name",
                        el,
                        help="Either drop the decorative marking or remove the accessible name.",
                    )
                )
            continue

        if not informative:
            if (el.attr("title") or "").strip():
                hits.append(
                    element_hit(
                        "title-only-alt",
                        "Image relies on the title attribute as its only text alternative",
                        el,
                        help="Add an alt attribute; title is not reliably exposed.",
                    )
                )
            else:
                hits.append(
                    element_hit(
                        "missing-alt",
                        f"Image ({el.tag}) has no text alternative",
                        el,
                        help="Add alt text describing the image, or alt=\"\" if it is decorative.",
                    )
                )
            continue

        if not alt_text:
            continue
        lowered = alt_text.lower()
        if _FILENAME_RE.match(alt_text):
            hits.append(element_hit("filename-alt", f'Alt text "{alt_text}" is a file name', el))
        elif lowered in _PLACEHOLDER_ALTS:
            hits.append(element_hit("placeholder-alt", f'Alt text "{alt_text}" is a placeholder, not a description', el))
        elif _REDUNDANT_RE.match(alt_text):
            hits.append(
                element_hit(
                    "redundant-prefix",
                    f'Alt text "{alt_text[:60]}" starts with a redundant "image of" prefix',
                    el,
                    help="Screen readers already announce images; describe the content directly.",
                )
            )
        if len(alt_text) > config.max_alt_chars:
            hits.append(
                element_hit(
                    "long-alt",
                    f"Alt text is {len(alt_text)} characters long; long descriptions belong in surrounding text",
                    el,
                )
            )
    return [result_from_hits(snapshot, "1.1.1", hits, config=config)]
