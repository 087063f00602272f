# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .types import criterion_sort_key

# Criteria whose verdict needs a human with assistive technology.
MANUAL_PROMPTS: dict[str, str] = {
    "1.2.2": "Check that all prerecorded video content has accurate captions",
    "1.2.3": "Check that video has an audio description or a text alternative",
    "1.2.5": "Check that video has an audio description track",
    "1.2.6": "Check whether audio content has sign language interpretation",
    "1.4.13": "Test that hover/focus content can be dismissed and persists",
    "2.2.1": "Check that time limits can be turned off, adjusted or extended",
    "2.3.1": "Ensure no content flashes more than 3 times per second",
    "2.4.4": "Verify link text clearly describes link purpose",
    "3.1.1": "Confirm the language attribute matches the actual content language",
    "3.1.2": "Check that content in other languages is marked with a lang attribute",
    "3.1.5": "Assess whether content requires reading ability beyond lower secondary education",
    "3.2.5": "Check that context changes only occur on user request",
    "3.3.3": "Verify error messages provide suggestions for correction",
}
MANUAL_CRITERIA = frozenset(MANUAL_PROMPTS)

_TRUE_CELLS = {"yes", "true", "1", "partial", "y", "x"}


def _cell_true(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE_CELLS


def manual_prompt(criterion_id: str, title: str = "") -> str:
    text = MANUAL_PROMPTS.get(criterion_id)
    if text is None:
        text = f"Review {title or criterion_id} with assistive technology"
    return f"Manual verification required: {text}"


@dataclass(frozen=True)
class TestMatrix:
    """Which criteria run for a page, and which of them are manual-only.

    ``criteria=None`` means every registered criterion.
    """

    criteria: frozenset[str] | None = None
    manual: frozenset[str] = frozenset()

    __test__ = False

    def __post_init__(self) -> None:
        if self.criteria is not None:
            object.__setattr__(self, "criteria", frozenset(str(c).strip() for c in self.criteria))
        object.__setattr__(self, "manual", frozenset(str(c).strip() for c in self.manual))

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "TestMatrix":
        """Build a matrix from spreadsheet rows (``ID``, ``Testable``, ``RequiresManual``/``Manual``)."""
        criteria: set[str] = set()
        manual: set[str] = set()
        for row in rows:
            cid = str(row.get("ID") or row.get("id") or "").strip()
            if not cid:
                continue
            if _cell_true(row.get("RequiresManual") or row.get("Manual")):
                manual.add(cid)
                criteria.add(cid)
            elif "Testable" not in row or _cell_true(row.get("Testable")):
                criteria.add(cid)
        return cls(criteria=frozenset(criteria), manual=frozenset(manual))

    @classmethod
    def with_manual_defaults(cls) -> "TestMatrix":
        return cls(criteria=None, manual=MANUAL_CRITERIA)

    def includes(self, criterion_id: str) -> bool:
        if criterion_id in self.manual:
            return True
        return self.criteria is None or criterion_id in self.criteria

    def is_manual(self, criterion_id: str) -> bool:
        return criterion_id in self.manual

    def requested(self, available: Iterable[str]) -> list[str]:
        """Criterion ids a PageReport must enumerate, sorted numerically."""
        if self.criteria is None:
            ids = set(available) | set(self.manual)
        else:
            ids = set(self.criteria) | set(self.manual)
        return sorted(ids, key=criterion_sort_key)


DEFAULT_MATRIX = TestMatrix()
