# SPDX-License-Identifier: AGPL-3.0-only
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from ..config import AnalyzerConfig
from ..snapshot import Snapshot
from ..types import TestResult

AnalyzerFn = Callable[[Snapshot, AnalyzerConfig], Sequence[TestResult]]


@dataclass(frozen=True)
class AnalyzerSpec:
    name: str
    criteria: tuple[str, ...]
    run: AnalyzerFn


_TABLE: list[AnalyzerSpec] = []


def analyzer(name: str, *, criteria: Sequence[str]) -> Callable[[AnalyzerFn], AnalyzerFn]:
    """Register ``fn`` at the end of the ordered analyzer table."""

    def deco(fn: AnalyzerFn) -> AnalyzerFn:
        if any(spec.name == name for spec in _TABLE):
            raise ValueError(f"analyzer {name!r} is already registered")
        if not criteria:
            raise ValueError(f"analyzer {name!r} must cover at least one criterion")
        _TABLE.append(AnalyzerSpec(name=name, criteria=tuple(criteria), run=fn))
        return fn

    return deco


def registered_analyzers() -> tuple[AnalyzerSpec, ...]:
    return tuple(_TABLE)
