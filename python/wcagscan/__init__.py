# SPDX-License-Identifier: AGPL-3.0-only
"""Heuristic WCAG 2.1 analysis engine.

Criterion analyzers inspect one page snapshot (DOM, computed styles,
stylesheet rules) and emit findings; ``analyze_page`` folds them into a
``PageReport`` and ``merge_reports`` consolidates reports across pages and
engines. The engine flags heuristic risk signals only; it never certifies
conformance.
"""
import logging

from .analyzers import AnalyzerSpec, analyzer, default_analyzers
from .config import DEFAULT_CONFIG, AnalyzerConfig, load_config
from .criteria import all_criterion_ids, criterion_info, load_criteria_registry, load_severity_table
from .engine import analyze_page
from .errors import AnalyzerFault, SchemaViolation, SchemaWarning, SnapshotUnavailable, WcagScanError
from .matrix import TestMatrix
from .merge import ConsolidatedReport, CriterionGroup, MergedIssue, merge_reports
from .scan import scan_page, scan_pages, scan_pages_async
from .score import AccessibilityScore, accessibility_score
from .snapshot import CssRule, ElementHandle, HtmlSnapshot, Snapshot, SnapshotProvider, StylesheetAccess
from .types import Issue, PageReport, ScanFailure, TestResult, criterion_sort_key, is_failing

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AccessibilityScore",
    "AnalyzerConfig",
    "AnalyzerFault",
    "AnalyzerSpec",
    "ConsolidatedReport",
    "CriterionGroup",
    "CssRule",
    "DEFAULT_CONFIG",
    "ElementHandle",
    "HtmlSnapshot",
    "Issue",
    "MergedIssue",
    "PageReport",
    "ScanFailure",
    "SchemaViolation",
    "SchemaWarning",
    "Snapshot",
    "SnapshotProvider",
    "SnapshotUnavailable",
    "StylesheetAccess",
    "TestMatrix",
    "TestResult",
    "WcagScanError",
    "accessibility_score",
    "all_criterion_ids",
    "analyze_page",
    "analyzer",
    "criterion_info",
    "criterion_sort_key",
    "default_analyzers",
    "is_failing",
    "load_config",
    "load_criteria_registry",
    "load_severity_table",
    "merge_reports",
    "scan_page",
    "scan_pages",
    "scan_pages_async",
]
