# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from typing import Any


class WcagScanError(Exception):
    pass


class SnapshotUnavailable(WcagScanError):
    """The snapshot provider could not deliver a page."""

    def __init__(self, url: str, reason: str, *, engine: str = "default") -> None:
        super().__init__(f"snapshot unavailable for {url} ({engine}): {reason}")
        self.url = url
        self.engine = engine
        self.reason = reason


class AnalyzerFault(WcagScanError):
    def __init__(self, analyzer: str, reason: str) -> None:
        super().__init__(f"analyzer {analyzer!r} failed: {reason}")
        self.analyzer = analyzer
        self.reason = reason


class SchemaViolation(WcagScanError, ValueError):
    def __init__(self, message: str, hit: dict[str, Any]) -> None:
        super().__init__(message)
        self.hit = hit


class SchemaWarning(UserWarning):
    pass
