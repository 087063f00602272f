# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

import html as html_mod
import warnings
from typing import Any, Iterable, Mapping

from .config import DEFAULT_CONFIG, AnalyzerConfig
from .criteria import criterion_info, severity_for, wcag_tags
from .errors import SchemaViolation, SchemaWarning
from .types import FAULT_CHECK, SEVERITY_MODERATE, TEST_AUTOMATED, Issue, TestResult

PLACEHOLDER_DESCRIPTION = "(no description provided)"
PLACEHOLDER_CHECK = "unknown"


def hit(
    check: str,
    description: str,
    *,
    element: str = "",
    help: str = "",
    target: str | None = None,
) -> dict[str, Any]:
    d: dict[str, Any] = {"check": check, "description": description}
    if element:
        d["element"] = element
    if help:
        d["help"] = help
    if target:
        d["target"] = target
    return d


def element_hit(check: str, description: str, el: Any, *, help: str = "") -> dict[str, Any]:
    return hit(check, description, element=el.outer_html(), help=help, target=el.path())


def clean_text(value: Any, limit: int | None = None) -> str:
    text = " ".join(html_mod.unescape(str(value or "")).split())
    if limit is not None and len(text) > limit:
        return text[: max(0, limit - 3)].rstrip() + "..."
    return text


def _violation(message: str, raw: Mapping[str, Any], config: AnalyzerConfig) -> None:
    if config.schema_mode == "raise":
        raise SchemaViolation(message, dict(raw))
    warnings.warn(message, SchemaWarning, stacklevel=3)


def normalize_hit(
    criterion_id: str,
    raw: Mapping[str, Any],
    *,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    level: str | None = None,
    table: dict[str, str] | None = None,
) -> Issue:
    """Canonicalize one raw heuristic hit into an Issue.

    Severity always comes from the severity table keyed on
    ``"<criterion>:<check>"``; analyzers never pick it themselves.
    """
    check = str(raw.get("check") or "").strip()
    description = clean_text(raw.get("description"), config.max_description_chars)
    placeholder = not check
    if placeholder:
        _violation(f"raw hit for {criterion_id} is missing 'check'", raw, config)
        check = PLACEHOLDER_CHECK
    if not description:
        _violation(f"raw hit {criterion_id}:{check} is missing 'description'", raw, config)
        description = PLACEHOLDER_DESCRIPTION
    severity = SEVERITY_MODERATE if placeholder else severity_for(criterion_id, check, table=table)
    if severity is None:
        _violation(f"no severity table entry for {criterion_id}:{check}", raw, config)
        severity = SEVERITY_MODERATE

    tags = list(wcag_tags(criterion_id, level))
    tags.extend(str(t) for t in raw.get("tags") or ())
    target = raw.get("target")
    return Issue(
        description=description,
        severity=severity,
        element=clean_text(raw.get("element"), config.max_element_chars),
        help=clean_text(raw.get("help")),
        wcag_tags=tuple(tags),
        target=str(target) if target else None,
        check_id=check,
    )


def result_from_hits(
    snapshot: Any,
    criterion_id: str,
    hits: Iterable[Mapping[str, Any]],
    *,
    config: AnalyzerConfig = DEFAULT_CONFIG,
    test_type: str = TEST_AUTOMATED,
    applicable: bool = True,
) -> TestResult:
    info = criterion_info(criterion_id)
    per_check: dict[str, int] = {}
    issues: list[Issue] = []
    for raw in hits:
        check = str(raw.get("check") or "")
        per_check[check] = per_check.get(check, 0) + 1
        if per_check[check] > config.max_issues_per_check:
            continue
        issues.append(normalize_hit(criterion_id, raw, config=config, level=info["level"]))
    for check, count in per_check.items():
        dropped = count - config.max_issues_per_check
        if dropped > 0 and check:
            summary = hit(
                check,
                f"{dropped} further occurrence(s) of {check} not listed",
                help=f"Only the first {config.max_issues_per_check} occurrences of each check are reported.",
            )
            issues.append(normalize_hit(criterion_id, summary, config=config, level=info["level"]))
    return TestResult(
        criterion_id=criterion_id,
        title=str(info["title"]),
        principle=str(info["principle"]),
        level=str(info["level"]),
        test_type=test_type,
        issues=tuple(issues),
        timestamp=str(getattr(snapshot, "captured_at", "") or ""),
        url=str(getattr(snapshot, "url", "") or ""),
        applicable=applicable,
    )


def fault_hit(analyzer: str, reason: str) -> dict[str, Any]:
    return hit(
        FAULT_CHECK,
        f"Analyzer {analyzer} failed: {reason}",
        help="The heuristic could not complete on this page. Manual review required.",
    )


def stylesheet_denied_hit(denied: Iterable[tuple[str | None, str]]) -> dict[str, Any]:
    """One hit covering every stylesheet the analyzer could not read."""
    sheets = list(denied)
    hrefs = [href or "(inline)" for href, _ in sheets]
    reasons = sorted({reason or "access denied" for _, reason in sheets})
    if len(sheets) == 1:
        description = f"Stylesheet {hrefs[0]} could not be inspected ({reasons[0]}); style checks are incomplete"
    else:
        description = (
            f"{len(sheets)} stylesheets could not be inspected ({', '.join(reasons)}): "
            f"{', '.join(hrefs)}; style checks are incomplete"
        )
    return hit(
        "stylesheet-inaccessible",
        description,
        help="Cross-origin stylesheets cannot be read from the page; review them separately.",
    )
