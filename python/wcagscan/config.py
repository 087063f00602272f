# SPDX-License-Identifier: AGPL-3.0-only
import tomllib
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

SCHEMA_MODES = ("raise", "warn")


@dataclass(frozen=True)
class AnalyzerConfig:
    """Thresholds shared by every analyzer.

    Defaults are the values the heuristics were tuned against; tests pin them
    through ``with_overrides`` to keep fixtures small.
    """

    # 2.4.10: more than N consecutive <p> siblings without a heading
    max_consecutive_paragraphs: int = 5
    # 2.4.10: more than N words under a single heading
    max_words_per_heading: int = 500
    # 2.4.3: gap between consecutive distinct positive tabindex values
    max_tabindex_gap: int = 1
    # 1.3.2: floated elements with more than 50 chars of text
    max_floated_blocks: int = 5
    # 1.3.2: absolutely positioned elements before the order check kicks in
    max_absolute_blocks: int = 3
    max_alt_chars: int = 150
    max_url_link_chars: int = 50
    # 2.4.9: link text shorter than this (and fewer than 3 words)
    min_link_text_chars: int = 15
    max_nbsp_run: int = 5
    max_issues_per_check: int = 20
    max_element_chars: int = 200
    max_description_chars: int = 300
    analyzer_timeout_s: float = 30.0
    schema_mode: str = "warn"

    def __post_init__(self) -> None:
        if self.schema_mode not in SCHEMA_MODES:
            raise ValueError(f"Unsupported schema mode {self.schema_mode!r}. Expected 'raise' or 'warn'.")
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
                raise ValueError(f"{f.name} must not be negative (got {value!r})")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "AnalyzerConfig":
        data = dict(data or {})
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"unknown analyzer thresholds: {', '.join(unknown)}")
        coerced: Dict[str, Any] = {}
        for name, value in data.items():
            default = getattr(cls, name)
            if isinstance(default, bool) or isinstance(default, str):
                coerced[name] = type(default)(value)
            elif isinstance(default, int):
                if isinstance(value, float) and not value.is_integer():
                    raise ValueError(f"{name} must be a whole number (got {value!r})")
                coerced[name] = int(value)
            elif isinstance(default, float):
                coerced[name] = float(value)
            else:
                coerced[name] = value
        return cls(**coerced)

    def with_overrides(self, **overrides: Any) -> "AnalyzerConfig":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = AnalyzerConfig()


def load_config(path: Optional[Path] = None) -> AnalyzerConfig:
    """Load thresholds from the ``[thresholds]`` table of wcagscan.toml."""
    if path is None:
        path = Path.cwd() / "wcagscan.toml"
        if not path.exists():
            return DEFAULT_CONFIG
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ValueError(f"Failed to parse {path}: {e}") from e
    return AnalyzerConfig.from_mapping(data.get("thresholds", {}))
