# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .criteria import coverage_from_results
from .engine import issue_key
from .types import (
    LEVELS,
    PRINCIPLES,
    PageReport,
    ScanFailure,
    TestResult,
    criterion_sort_key,
    is_failing,
    severity_rank,
    status_counts,
    worst_status,
)


@dataclass(frozen=True)
class MergedIssue:
    criterion_id: str
    description: str
    severity: str
    element: str
    help: str
    wcag_tags: tuple[str, ...]
    target: str | None
    check_id: str
    occurrences: int
    sources: tuple[str, ...]

    @property
    def key(self) -> str:
        locator = " ".join(str(self.target or self.element or "").split()).lower()
        return f"{self.criterion_id}|{locator}|{' '.join(self.description.split()).lower()}"

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "criterion_id": self.criterion_id,
            "description": self.description,
            "severity": self.severity,
            "element": self.element,
            "help": self.help,
            "wcag_tags": list(self.wcag_tags),
            "check_id": self.check_id,
            "occurrences": self.occurrences,
            "sources": list(self.sources),
        }
        if self.target:
            d["target"] = self.target
        return d


@dataclass(frozen=True)
class CriterionGroup:
    criterion_id: str
    title: str
    principle: str
    level: str
    status: str
    test_types: tuple[str, ...]
    status_counts: dict[str, int]
    issues: tuple[MergedIssue, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "criterion_id": self.criterion_id,
            "title": self.title,
            "principle": self.principle,
            "level": self.level,
            "status": self.status,
            "test_types": list(self.test_types),
            "status_counts": dict(self.status_counts),
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass(frozen=True)
class ConsolidatedReport:
    groups: dict[str, CriterionGroup]
    summary: dict[str, Any]
    dedup_index: dict[str, int]
    pages: tuple[PageReport, ...] = ()
    failures: tuple[ScanFailure, ...] = field(default=())

    def group(self, criterion_id: str) -> CriterionGroup | None:
        return self.groups.get(criterion_id)

    def merge(self, other: "ConsolidatedReport") -> "ConsolidatedReport":
        return merge_reports(self.pages + other.pages, self.failures + other.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": "wcagscan.consolidated_report.v1",
            "summary": self.summary,
            "groups": [g.to_dict() for g in self.groups.values()],
            "dedup_index": dict(self.dedup_index),
            "pages": [{"url": p.url, "engine": p.engine, "fingerprint": p.fingerprint()} for p in self.pages],
            "failures": [f.to_dict() for f in self.failures],
        }


def _page_sort_key(page: PageReport) -> tuple[str, str, str]:
    return (page.url, page.engine, page.fingerprint())


def _source(page: PageReport) -> str:
    return f"{page.url} ({page.engine})"


def _merge_group(criterion_id: str, members: list[tuple[PageReport, TestResult]]) -> tuple[CriterionGroup, dict[str, int]]:
    first = members[0][1]
    merged: dict[str, dict[str, Any]] = {}
    for page, result in members:
        seen_here: set[str] = set()
        for issue in result.issues:
            locator, description = issue_key(issue)
            key = f"{criterion_id}|{locator}|{description}"
            row = merged.get(key)
            if row is None:
                row = {
                    "issue": issue,
                    "severity": issue.severity,
                    "tags": set(issue.wcag_tags),
                    "occurrences": 0,
                    "sources": [],
                }
                merged[key] = row
            if severity_rank(issue.severity) > severity_rank(row["severity"]):
                row["severity"] = issue.severity
            row["tags"].update(issue.wcag_tags)
            if key in seen_here:
                continue
            seen_here.add(key)
            row["occurrences"] += 1
            row["sources"].append(_source(page))

    issues = []
    index: dict[str, int] = {}
    for key, row in merged.items():
        base = row["issue"]
        issues.append(
            MergedIssue(
                criterion_id=criterion_id,
                description=base.description,
                severity=row["severity"],
                element=base.element,
                help=base.help,
                wcag_tags=tuple(sorted(row["tags"])),
                target=base.target,
                check_id=base.check_id,
                occurrences=row["occurrences"],
                sources=tuple(row["sources"]),
            )
        )
        index[key] = row["occurrences"]

    statuses = [r.status for _, r in members]
    group = CriterionGroup(
        criterion_id=criterion_id,
        title=first.title,
        principle=first.principle,
        level=first.level,
        status=worst_status(statuses) or "",
        test_types=tuple(sorted({r.test_type for _, r in members})),
        status_counts={k: v for k, v in status_counts(statuses).items() if v},
        issues=tuple(issues),
    )
    return group, index


def _summary(
    groups: dict[str, CriterionGroup],
    index: dict[str, int],
    pages: tuple[PageReport, ...],
    failures: tuple[ScanFailure, ...],
) -> dict[str, Any]:
    items = list(groups.values())
    by_principle = {p: status_counts(g.status for g in items if g.principle == p) for p in PRINCIPLES}
    by_level = {lvl: status_counts(g.status for g in items if g.level == lvl) for lvl in LEVELS}
    return {
        "pages": {
            "scanned": len(pages),
            "failed": len(failures),
            "attempted": len(pages) + len(failures),
        },
        "criteria": len(items),
        "status_counts": status_counts(g.status for g in items),
        "by_principle": by_principle,
        "by_level": by_level,
        "failing_criteria": [g.criterion_id for g in items if is_failing(g.status)],
        "issues": {"unique": len(index), "occurrences": sum(index.values())},
        "coverage": coverage_from_results(r for p in pages for r in p.results),
    }


def merge_reports(reports: Iterable[PageReport], failures: Iterable[ScanFailure] = ()) -> ConsolidatedReport:
    """Combine page reports into one consolidated report.

    Inputs are put into canonical (url, engine, fingerprint) order first, so
    the result does not depend on the order reports arrived in.
    """
    pages = tuple(sorted(reports, key=_page_sort_key))
    failed = tuple(sorted(failures, key=lambda f: (f.url, f.engine, f.reason)))

    by_criterion: dict[str, list[tuple[PageReport, TestResult]]] = {}
    for page in pages:
        for result in page.results:
            by_criterion.setdefault(result.criterion_id, []).append((page, result))

    groups: dict[str, CriterionGroup] = {}
    index: dict[str, int] = {}
    for cid in sorted(by_criterion, key=criterion_sort_key):
        group, group_index = _merge_group(cid, by_criterion[cid])
        groups[cid] = group
        index.update(group_index)

    return ConsolidatedReport(
        groups=groups,
        summary=_summary(groups, index, pages, failed),
        dedup_index=index,
        pages=pages,
        failures=failed,
    )
