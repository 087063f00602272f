# SPDX-License-Identifier: AGPL-3.0-only
"""Heuristic analyzers.

Each module registers one analyzer with ``@analyzer``; import order below is
the evaluation order of the default table.
"""
from __future__ import annotations

from ._registry import AnalyzerSpec, analyzer, registered_analyzers
from . import (  # noqa: F401  (registration side effects)
    text_alternatives,
    media,
    info_relationships,
    meaningful_sequence,
    sensory_characteristics,
    orientation,
    timing,
    page_structure,
    focus_order,
    link_purpose,
    headings_labels,
    focus_visible,
    section_headings,
    language,
    predictability,
    form_labels,
    name_role_value,
)


def default_analyzers() -> tuple[AnalyzerSpec, ...]:
    return registered_analyzers()


def covered_criteria() -> list[str]:
    out: list[str] = []
    for spec in registered_analyzers():
        out.extend(c for c in spec.criteria if c not in out)
    return out


__all__ = ["AnalyzerSpec", "analyzer", "covered_criteria", "default_analyzers"]
