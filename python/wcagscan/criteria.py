# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from .types import LEVELS, SEVERITIES, TestResult, criterion_sort_key, worst_status


def _registry_dir() -> Path:
    return Path(__file__).resolve().parent / "registry"


def _criteria_registry_path() -> Path:
    return _registry_dir() / "wcag21_criteria.v1.json"


def _severity_table_path() -> Path:
    return _registry_dir() / "severity_table.v1.json"


@lru_cache(maxsize=1)
def load_criteria_registry() -> dict[str, Any]:
    return json.loads(_criteria_registry_path().read_text(encoding="utf-8"))


@lru_cache(maxsize=1)
def load_severity_table() -> dict[str, str]:
    raw = json.loads(_severity_table_path().read_text(encoding="utf-8"))
    entries = {str(k): str(v) for k, v in dict(raw.get("entries", {})).items()}
    bad = sorted(k for k, v in entries.items() if v not in SEVERITIES)
    if bad:
        raise ValueError(f"severity table has unsupported severities for: {', '.join(bad)}")
    return entries


@lru_cache(maxsize=1)
def _criteria_index() -> dict[str, dict[str, Any]]:
    return {str(e["id"]): dict(e) for e in load_criteria_registry().get("entries", [])}


def criterion_info(criterion_id: str) -> dict[str, Any]:
    try:
        return dict(_criteria_index()[str(criterion_id)])
    except KeyError:
        raise KeyError(f"unknown WCAG criterion: {criterion_id}") from None


def all_criterion_ids() -> list[str]:
    return sorted(_criteria_index(), key=criterion_sort_key)


def severity_for(criterion_id: str, check: str, *, table: dict[str, str] | None = None) -> str | None:
    tbl = table if table is not None else load_severity_table()
    return tbl.get(f"{criterion_id}:{check}") or tbl.get(f"*:{check}")


def wcag_tags(criterion_id: str, level: str | None = None) -> tuple[str, ...]:
    lvl = level or str(_criteria_index().get(str(criterion_id), {}).get("level") or "")
    tags = [f"wcag{str(criterion_id).replace('.', '')}"]
    if lvl in LEVELS:
        tags.insert(0, f"wcag2{lvl.lower()}")
    return tuple(tags)


def coverage_from_results(results: Iterable[TestResult]) -> dict[str, Any]:
    """Registry-wide coverage of a set of results, keyed on criterion id."""
    entries = list(_criteria_index().values())
    by_id: dict[str, list[str]] = {}
    for r in results:
        by_id.setdefault(r.criterion_id, []).append(r.status)

    result_counts = {
        "pass": 0,
        "fail": 0,
        "warning": 0,
        "manual-required": 0,
        "not-applicable": 0,
    }
    evaluated = 0
    for entry in entries:
        statuses = by_id.get(str(entry["id"]))
        if not statuses:
            continue
        evaluated += 1
        worst = worst_status(statuses) or "not-applicable"
        result_counts[worst] = result_counts.get(worst, 0) + 1

    reg = load_criteria_registry()
    return {
        "registry_id": str(reg.get("schema") or "wcagscan.criteria_registry.v1"),
        "wcag_version": str(reg.get("wcag_version") or "2.1"),
        "total_criteria": len(entries),
        "automatable_criteria": sum(1 for e in entries if e.get("automatable")),
        "evaluated_criteria": evaluated,
        "not_evaluated_criteria": len(entries) - evaluated,
        "unregistered_criterion_ids": sorted(
            (cid for cid in by_id if cid not in _criteria_index()), key=criterion_sort_key
        ),
        "result_counts": result_counts,
    }
