# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Iterable, Protocol, Sequence

from .analyzers import AnalyzerSpec
from .config import DEFAULT_CONFIG, AnalyzerConfig
from .engine import analyze_page
from .errors import SnapshotUnavailable
from .matrix import DEFAULT_MATRIX, TestMatrix
from .merge import ConsolidatedReport, merge_reports
from .snapshot import Snapshot, SnapshotProvider
from .types import PageReport, ScanFailure

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = "default"


class AsyncSnapshotProvider(Protocol):
    async def snapshot(self, url: str, engine: str) -> Snapshot: ...


def normalize_targets(targets: Iterable[Any]) -> list[tuple[str, str]]:
    """Accept bare URLs or (url, engine) pairs."""
    out: list[tuple[str, str]] = []
    for t in targets:
        if isinstance(t, str):
            out.append((t, DEFAULT_ENGINE))
        else:
            url, engine = t
            out.append((str(url), str(engine or DEFAULT_ENGINE)))
    return out


def _failure(url: str, engine: str, exc: BaseException) -> ScanFailure:
    if isinstance(exc, SnapshotUnavailable):
        reason = exc.reason
    else:
        reason = repr(exc)
    logger.warning("scan failed for %s (%s): %s", url, engine, reason)
    return ScanFailure(url=url, engine=engine, reason=reason)


def scan_page(
    provider: SnapshotProvider,
    url: str,
    engine: str = DEFAULT_ENGINE,
    *,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    matrix: TestMatrix = DEFAULT_MATRIX,
    analyzers: Sequence[AnalyzerSpec] | None = None,
) -> PageReport | ScanFailure:
    try:
        snapshot = provider.snapshot(url, engine)
    except Exception as e:
        return _failure(url, engine, e)
    return analyze_page(snapshot, config=config, matrix=matrix, analyzers=analyzers)


def _split(outcomes: Iterable[PageReport | ScanFailure]) -> tuple[list[PageReport], list[ScanFailure]]:
    pages: list[PageReport] = []
    failures: list[ScanFailure] = []
    for outcome in outcomes:
        if isinstance(outcome, ScanFailure):
            failures.append(outcome)
        else:
            pages.append(outcome)
    return pages, failures


def scan_pages(
    provider: SnapshotProvider,
    targets: Iterable[Any],
    *,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    matrix: TestMatrix = DEFAULT_MATRIX,
    analyzers: Sequence[AnalyzerSpec] | None = None,
    max_workers: int = 1,
) -> ConsolidatedReport:
    """Scan every target and merge the page reports.

    Pages whose snapshot cannot be acquired become ``ScanFailure`` entries;
    they never abort the run. Errors raised while analyzing a snapshot
    propagate the same way for every ``max_workers``.
    """
    jobs = normalize_targets(targets)
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1 (got {max_workers!r})")
    outcomes: list[PageReport | ScanFailure] = []
    if max_workers == 1 or len(jobs) <= 1:
        for url, engine in jobs:
            outcomes.append(scan_page(provider, url, engine, config=config, matrix=matrix, analyzers=analyzers))
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [
                pool.submit(
                    scan_page,
                    provider,
                    url,
                    engine,
                    config=config,
                    matrix=matrix,
                    analyzers=analyzers,
                )
                for url, engine in jobs
            ]
            for fut in as_completed(futures):
                outcomes.append(fut.result())
    pages, failures = _split(outcomes)
    logger.info("scanned %d page(s), %d failed", len(pages), len(failures))
    return merge_reports(pages, failures)


async def scan_pages_async(
    provider: AsyncSnapshotProvider,
    targets: Iterable[Any],
    *,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    matrix: TestMatrix = DEFAULT_MATRIX,
    analyzers: Sequence[AnalyzerSpec] | None = None,
    concurrency: int = 4,
) -> ConsolidatedReport:
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1 (got {concurrency!r})")
    jobs = normalize_targets(targets)
    gate = asyncio.Semaphore(concurrency)
    loop = asyncio.get_running_loop()

    async def one(url: str, engine: str) -> PageReport | ScanFailure:
        async with gate:
            try:
                snapshot = await provider.snapshot(url, engine)
            except Exception as e:
                return _failure(url, engine, e)
        return await loop.run_in_executor(
            None,
            lambda: analyze_page(snapshot, config=config, matrix=matrix, analyzers=analyzers),
        )

    outcomes = await asyncio.gather(*(one(url, engine) for url, engine in jobs))
    pages, failures = _split(outcomes)
    logger.info("scanned %d page(s), %d failed", len(pages), len(failures))
    return merge_reports(pages, failures)
