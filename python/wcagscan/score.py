# SPDX-License-Identifier: AGPL-3.0-only
"""Weighted 0-100 accessibility score.

Level A criteria weigh 3, AA weigh 2 and AAA weigh 1. Only ``pass`` and
``fail`` outcomes count toward the score; ``warning`` and ``manual-required``
outcomes are reported separately. Works on anything with ``level`` and
``status`` attributes, so TestResults and merged CriterionGroups both score.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from .types import LEVELS, STATUS_FAIL, STATUS_MANUAL, STATUS_PASS, STATUS_WARNING

LEVEL_WEIGHTS = {"A": 3, "AA": 2, "AAA": 1}
GRADE_THRESHOLDS = (("A", 90), ("B", 80), ("C", 70), ("D", 60))


class Scored(Protocol):
    level: str
    status: str


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def grade_for(score: int) -> str:
    for grade, floor in GRADE_THRESHOLDS:
        if score >= floor:
            return grade
    return "F"


def score_description(score: int) -> str:
    if score >= 90:
        return "Excellent accessibility - meets or exceeds standards"
    if score >= 80:
        return "Good accessibility - minor improvements needed"
    if score >= 70:
        return "Fair accessibility - some issues need attention"
    if score >= 60:
        return "Poor accessibility - significant issues present"
    return "Critical accessibility issues - immediate action required"


@dataclass(frozen=True)
class LevelScore:
    score: int
    passed: int
    total: int

    def to_dict(self) -> dict[str, int]:
        return {"score": self.score, "passed": self.passed, "total": self.total}


@dataclass(frozen=True)
class AccessibilityScore:
    score: int
    grade: str
    passed: int
    failed: int
    total: int
    weighted_score: int
    level_scores: dict[str, LevelScore]
    manual_count: int = 0
    warning_count: int = 0
    recommendations: tuple[str, ...] = field(default=())

    @property
    def description(self) -> str:
        return score_description(self.score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "grade": self.grade,
            "description": self.description,
            "passed": self.passed,
            "failed": self.failed,
            "total": self.total,
            "weighted_score": self.weighted_score,
            "level_scores": {k: v.to_dict() for k, v in self.level_scores.items()},
            "manual_count": self.manual_count,
            "warning_count": self.warning_count,
            "recommendations": list(self.recommendations),
        }


def _recommendations(
    score: int, failed: int, level_scores: dict[str, LevelScore], manual: int, warnings: int
) -> tuple[str, ...]:
    out = []
    if score < 70:
        out.append("Priority: fix Level A failures first")
    a = level_scores["A"]
    if a.total and a.score < 100:
        out.append(f"Level A: {a.total - a.passed} critical issue(s) remaining")
    aa = level_scores["AA"]
    if aa.total and aa.score < 100:
        out.append(f"Level AA: {aa.total - aa.passed} compliance issue(s) remaining")
    if manual:
        out.append(f"Manual testing: {manual} criteria require human review")
    if warnings:
        out.append(f"Warnings: {warnings} potential issue(s) detected")
    if score >= 90 and failed == 0:
        out.append("Excellent work; keep monitoring and testing regularly")
    return tuple(out)


def accessibility_score(results: Iterable[Scored]) -> AccessibilityScore:
    items = list(results)
    testable = [r for r in items if r.status in {STATUS_PASS, STATUS_FAIL}]
    manual = sum(1 for r in items if r.status == STATUS_MANUAL)
    warnings = sum(1 for r in items if r.status == STATUS_WARNING)

    max_weighted = 0
    weighted = 0
    for r in testable:
        weight = LEVEL_WEIGHTS.get(r.level, 1)
        max_weighted += weight
        if r.status == STATUS_PASS:
            weighted += weight
    score = _round(weighted / max_weighted * 100) if max_weighted else 0

    level_scores: dict[str, LevelScore] = {}
    for level in LEVELS:
        members = [r for r in testable if r.level == level]
        passed = sum(1 for r in members if r.status == STATUS_PASS)
        level_scores[level] = LevelScore(
            score=_round(passed / len(members) * 100) if members else 0,
            passed=passed,
            total=len(members),
        )

    passed = sum(1 for r in testable if r.status == STATUS_PASS)
    failed = len(testable) - passed
    return AccessibilityScore(
        score=score,
        grade=grade_for(score),
        passed=passed,
        failed=failed,
        total=len(testable),
        weighted_score=weighted,
        level_scores=level_scores,
        manual_count=manual,
        warning_count=warnings,
        recommendations=_recommendations(score, failed, level_scores, manual, warnings),
    )


def compare_scores(previous: AccessibilityScore, current: AccessibilityScore) -> dict[str, Any]:
    delta = current.score - previous.score
    if delta > 0:
        summary = f"Improved by {delta} points ({previous.grade} -> {current.grade})"
    elif delta < 0:
        summary = f"Decreased by {-delta} points ({previous.grade} -> {current.grade})"
    else:
        summary = f"No change ({current.grade})"
    return {
        "score_delta": delta,
        "grade_delta": f"{previous.grade} -> {current.grade}",
        "improvement": delta > 0,
        "summary": summary,
    }
