# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from ..config import AnalyzerConfig
from ..normalize import element_hit, hit, result_from_hits
from ..snapshot import Snapshot
from ..types import TestResult
from ._common import lang_ok
from ._registry import analyzer


@analyzer("language", criteria=("3.1.1", "3.1.2"))
def check_language(snapshot: Snapshot, config: AnalyzerConfig) -> list[TestResult]:
    page = []
    roots = snapshot.query("html")
    if not roots:
        page.append(hit("missing-lang", "Document has no <html> element declaring a language"))
    else:
        root = roots[0]
        lang = root.attr("lang") or root.attr("xml:lang")
        if lang is None or not lang.strip():
            page.append(
                hit(
                    "missing-lang",
                    "The <html> element has no lang attribute",
                    element=root.outer_html(limit=120),
                    target=root.path(),
                    help='Declare the page language, e.g. <html lang="en">.',
                )
            )
        elif not lang_ok(lang):
            page.append(
                hit(
                    "invalid-lang",
                    f'The <html> lang attribute "{lang}" is not a valid language tag',
                    element=root.outer_html(limit=120),
                    target=root.path(),
                    help="Use a BCP 47 language tag such as en or fr-CA.",
                )
            )

    parts = []
    for el in snapshot.query("[lang]:not(html)"):
        lang = el.attr("lang") or ""
        if not lang_ok(lang):
            parts.append(
                element_hit(
                    "invalid-part-lang",
                    f'lang="{lang}" on <{el.tag}> is not a valid language tag',
                    el,
                    help="Use a BCP 47 language tag for passages in another language.",
                )
            )

    return [
        result_from_hits(snapshot, "3.1.1", page, config=config),
        result_from_hits(snapshot, "3.1.2", parts, config=config),
    ]
