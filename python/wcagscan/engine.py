# SPDX-License-Identifier: AGPL-3.0-only
"""Per-page result aggregation.

``analyze_page`` runs the analyzer table against one snapshot and folds the
outputs into a ``PageReport`` that always enumerates the requested criterion
set: analyzers that are missing produce ``not-applicable`` placeholders,
analyzers that raise or time out produce a failing ``analyzer-fault`` result,
and criteria the matrix marks manual produce a ``manual-required`` reminder.
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import replace
from typing import Iterable, Sequence

from .analyzers import AnalyzerSpec, default_analyzers
from .config import DEFAULT_CONFIG, AnalyzerConfig
from .criteria import criterion_info
from .errors import AnalyzerFault, SchemaViolation
from .matrix import DEFAULT_MATRIX, TestMatrix, manual_prompt
from .normalize import fault_hit, hit, result_from_hits
from .snapshot import Snapshot
from .types import TEST_MANUAL, Issue, PageReport, TestResult, severity_rank

logger = logging.getLogger(__name__)


def issue_key(issue: Issue) -> tuple[str, str]:
    """(normalized locator, normalized description) used to collapse duplicates."""
    locator = " ".join(str(issue.target or issue.element or "").split()).lower()
    description = " ".join(issue.description.split()).lower()
    return locator, description


def fold_issues(issues: Iterable[Issue]) -> tuple[Issue, ...]:
    order: list[tuple[str, str]] = []
    by_key: dict[tuple[str, str], Issue] = {}
    for issue in issues:
        key = issue_key(issue)
        kept = by_key.get(key)
        if kept is None:
            by_key[key] = issue
            order.append(key)
            continue
        severity = kept.severity
        if severity_rank(issue.severity) > severity_rank(severity):
            severity = issue.severity
        by_key[key] = replace(kept, severity=severity, wcag_tags=kept.wcag_tags + issue.wcag_tags)
    return tuple(by_key[k] for k in order)


def fold_results(results: Sequence[TestResult]) -> TestResult:
    """Combine several results for one criterion, keeping table order."""
    if not results:
        raise ValueError("fold_results() needs at least one result")
    first = results[0]
    if len(results) == 1:
        return first
    issues = fold_issues(i for r in results for i in r.issues)
    return replace(first, issues=issues, applicable=any(r.applicable for r in results))


def placeholder_result(snapshot: Snapshot, criterion_id: str, *, config: AnalyzerConfig = DEFAULT_CONFIG) -> TestResult:
    return result_from_hits(snapshot, criterion_id, (), config=config, applicable=False)


def manual_result(snapshot: Snapshot, criterion_id: str, *, config: AnalyzerConfig = DEFAULT_CONFIG) -> TestResult:
    info = criterion_info(criterion_id)
    reminder = hit(
        "manual-review",
        manual_prompt(criterion_id, str(info["title"])),
        help="Heuristics are skipped for this criterion; record the outcome of a manual review.",
    )
    return result_from_hits(snapshot, criterion_id, [reminder], config=config, test_type=TEST_MANUAL)


def _fault_results(
    spec: AnalyzerSpec,
    snapshot: Snapshot,
    config: AnalyzerConfig,
    fault: AnalyzerFault,
) -> list[TestResult]:
    logger.warning("analyzer %s failed on %s (%s): %s", spec.name, snapshot.url, snapshot.engine, fault.reason)
    raw = fault_hit(spec.name, fault.reason)
    return [result_from_hits(snapshot, cid, [raw], config=config) for cid in spec.criteria]


def _checked(spec: AnalyzerSpec, snapshot: Snapshot, config: AnalyzerConfig, output: object) -> list[TestResult]:
    if isinstance(output, TestResult):
        return [output]
    try:
        results = list(output or ())  # type: ignore[call-overload]
    except TypeError:
        results = [output]
    bad = [r for r in results if not isinstance(r, TestResult)]
    if bad:
        fault = AnalyzerFault(spec.name, f"returned {type(bad[0]).__name__} instead of TestResult")
        return _fault_results(spec, snapshot, config, fault)
    return results


def _run_sequential(
    table: Sequence[AnalyzerSpec], snapshot: Snapshot, config: AnalyzerConfig
) -> list[list[TestResult]]:
    out: list[list[TestResult]] = []
    for spec in table:
        try:
            output = spec.run(snapshot, config)
        except SchemaViolation:
            raise
        except Exception as e:
            out.append(_fault_results(spec, snapshot, config, AnalyzerFault(spec.name, repr(e))))
            continue
        out.append(_checked(spec, snapshot, config, output))
    return out


def _run_parallel(
    table: Sequence[AnalyzerSpec], snapshot: Snapshot, config: AnalyzerConfig, executor: Executor
) -> list[list[TestResult]]:
    futures = [(spec, executor.submit(spec.run, snapshot, config)) for spec in table]
    out: list[list[TestResult]] = []
    for spec, future in futures:
        try:
            output = future.result(timeout=config.analyzer_timeout_s)
        except TimeoutError:
            future.cancel()
            reason = f"timed out after {config.analyzer_timeout_s:g}s"
            out.append(_fault_results(spec, snapshot, config, AnalyzerFault(spec.name, reason)))
            continue
        except SchemaViolation:
            raise
        except Exception as e:
            out.append(_fault_results(spec, snapshot, config, AnalyzerFault(spec.name, repr(e))))
            continue
        out.append(_checked(spec, snapshot, config, output))
    return out


def analyze_page(
    snapshot: Snapshot,
    *,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    matrix: TestMatrix = DEFAULT_MATRIX,
    analyzers: Sequence[AnalyzerSpec] | None = None,
    executor: Executor | None = None,
) -> PageReport:
    table = tuple(analyzers) if analyzers is not None else default_analyzers()
    available = [cid for spec in table for cid in spec.criteria]
    requested = matrix.requested(available)
    unknown = []
    for cid in requested:
        try:
            criterion_info(cid)
        except KeyError:
            unknown.append(cid)
    if unknown:
        raise ValueError(f"test matrix requests unknown criteria: {', '.join(unknown)}")

    wanted = {cid for cid in requested if not matrix.is_manual(cid)}
    runnable = [spec for spec in table if wanted.intersection(spec.criteria)]
    skipped = [spec.name for spec in table if spec not in runnable]
    if skipped:
        logger.debug("skipping analyzers on %s: %s", snapshot.url, ", ".join(skipped))

    if executor is None:
        outputs = _run_sequential(runnable, snapshot, config)
    else:
        outputs = _run_parallel(runnable, snapshot, config, executor)

    collected: dict[str, list[TestResult]] = {}
    for results in outputs:
        for result in results:
            if result.criterion_id in wanted:
                collected.setdefault(result.criterion_id, []).append(result)

    final: list[TestResult] = []
    for cid in requested:
        if matrix.is_manual(cid):
            final.append(manual_result(snapshot, cid, config=config))
        elif cid in collected:
            final.append(fold_results(collected[cid]))
        else:
            final.append(placeholder_result(snapshot, cid, config=config))
    return PageReport(url=snapshot.url, engine=snapshot.engine, results=tuple(final))
