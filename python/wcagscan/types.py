# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Iterable


SEVERITY_MINOR = "minor"
SEVERITY_MODERATE = "moderate"
SEVERITY_SERIOUS = "serious"
SEVERITY_CRITICAL = "critical"
SEVERITIES = (SEVERITY_MINOR, SEVERITY_MODERATE, SEVERITY_SERIOUS, SEVERITY_CRITICAL)

STATUS_PASS = "pass"
STATUS_WARNING = "warning"
STATUS_FAIL = "fail"
STATUS_NOT_APPLICABLE = "not-applicable"
STATUS_MANUAL = "manual-required"
STATUSES = (STATUS_PASS, STATUS_WARNING, STATUS_FAIL, STATUS_NOT_APPLICABLE, STATUS_MANUAL)

TEST_AUTOMATED = "automated"
TEST_MANUAL = "manual"
TEST_HYBRID = "hybrid"
TEST_TYPES = frozenset({TEST_AUTOMATED, TEST_MANUAL, TEST_HYBRID})

PRINCIPLES = ("Perceivable", "Operable", "Understandable", "Robust")
LEVELS = ("A", "AA", "AAA")

# Diagnostic check emitted when an analyzer raises or times out.
FAULT_CHECK = "analyzer-fault"


def severity_rank(v: str) -> int:
    return {
        SEVERITY_CRITICAL: 4,
        SEVERITY_SERIOUS: 3,
        SEVERITY_MODERATE: 2,
        SEVERITY_MINOR: 1,
    }.get(str(v or "").strip(), 0)


def status_rank(v: str) -> int:
    return {
        STATUS_FAIL: 5,
        STATUS_WARNING: 4,
        STATUS_MANUAL: 3,
        STATUS_PASS: 2,
        STATUS_NOT_APPLICABLE: 1,
    }.get(str(v or "").strip(), 0)


def worst_status(statuses: Iterable[str]) -> str | None:
    items = list(statuses)
    if not items:
        return None
    return max(items, key=status_rank)


def max_severity(severities: Iterable[str]) -> str | None:
    items = list(severities)
    if not items:
        return None
    return max(items, key=severity_rank)


def is_failing(status: str) -> bool:
    return status in {STATUS_FAIL, STATUS_MANUAL}


def criterion_sort_key(criterion_id: str) -> tuple[tuple[int, int | str], ...]:
    """Numeric-aware key so "2.4.10" sorts after "2.4.6"."""
    out: list[tuple[int, int | str]] = []
    for part in str(criterion_id).split("."):
        part = part.strip()
        if part.isdigit():
            out.append((0, int(part)))
        else:
            out.append((1, part))
    return tuple(out)


def compute_status(test_type: str, issues: Iterable["Issue"], *, applicable: bool = True) -> str:
    if not applicable:
        return STATUS_NOT_APPLICABLE
    if test_type == TEST_MANUAL:
        return STATUS_MANUAL
    items = list(issues)
    if not items:
        return STATUS_PASS
    if any(i.check_id == FAULT_CHECK for i in items):
        return STATUS_FAIL
    worst = max_severity(i.severity for i in items)
    if severity_rank(worst or "") >= severity_rank(SEVERITY_SERIOUS):
        return STATUS_FAIL
    return STATUS_WARNING


def status_counts(statuses: Iterable[str]) -> dict[str, int]:
    out = {s: 0 for s in STATUSES}
    for s in statuses:
        out[s] = out.get(s, 0) + 1
    return out


@dataclass(frozen=True)
class Issue:
    description: str
    severity: str
    element: str = ""
    help: str = ""
    wcag_tags: tuple[str, ...] = ()
    target: str | None = None
    check_id: str = ""

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"Unsupported severity {self.severity!r}")
        object.__setattr__(self, "wcag_tags", tuple(sorted(set(self.wcag_tags))))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "description": self.description,
            "severity": self.severity,
            "element": self.element,
            "help": self.help,
            "wcag_tags": list(self.wcag_tags),
            "check_id": self.check_id,
        }
        if self.target:
            d["target"] = self.target
        return d


@dataclass(frozen=True)
class TestResult:
    criterion_id: str
    title: str
    principle: str
    level: str
    test_type: str
    issues: tuple[Issue, ...] = ()
    timestamp: str = ""
    url: str = ""
    applicable: bool = True
    status: str = field(init=False)

    # keeps pytest from collecting this class
    __test__ = False

    def __post_init__(self) -> None:
        if self.test_type not in TEST_TYPES:
            raise ValueError(f"Unsupported test type {self.test_type!r}")
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(
            self, "status", compute_status(self.test_type, self.issues, applicable=self.applicable)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "criterion_id": self.criterion_id,
            "title": self.title,
            "principle": self.principle,
            "level": self.level,
            "test_type": self.test_type,
            "status": self.status,
            "issues": [i.to_dict() for i in self.issues],
            "timestamp": self.timestamp,
            "url": self.url,
        }


@dataclass(frozen=True)
class PageReport:
    url: str
    engine: str
    results: tuple[TestResult, ...]
    summary: dict[str, int] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.results, key=lambda r: criterion_sort_key(r.criterion_id)))
        ids = [r.criterion_id for r in ordered]
        if len(ids) != len(set(ids)):
            raise ValueError(f"PageReport for {self.url} has more than one result per criterion")
        object.__setattr__(self, "results", ordered)
        object.__setattr__(self, "summary", status_counts(r.status for r in ordered))

    def result_for(self, criterion_id: str) -> TestResult | None:
        for r in self.results:
            if r.criterion_id == criterion_id:
                return r
        return None

    @property
    def criterion_ids(self) -> list[str]:
        return [r.criterion_id for r in self.results]

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": "wcagscan.page_report.v1",
            "url": self.url,
            "engine": self.engine,
            "summary": dict(self.summary),
            "results": [r.to_dict() for r in self.results],
        }

    def fingerprint(self) -> str:
        text = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return f"sha256:{hashlib.sha256(text.encode('utf-8')).hexdigest()}"


@dataclass(frozen=True)
class ScanFailure:
    url: str
    engine: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "engine": self.engine, "reason": self.reason}
