from __future__ import annotations

from wcagscan.matrix import DEFAULT_MATRIX, MANUAL_CRITERIA, TestMatrix, manual_prompt


def test_from_rows_reads_spreadsheet_flags() -> None:
    rows = [
        {"ID": "1.1.1", "Testable": "Yes", "RequiresManual": "No"},
        {"ID": "2.4.4", "Testable": "Partial", "RequiresManual": "Yes"},
        {"ID": "1.4.3", "Testable": "No", "RequiresManual": ""},
        {"id": "3.1.1", "Manual": "x"},
        {"ID": "", "Testable": "Yes"},
        {"ID": "4.1.2"},
    ]
    matrix = TestMatrix.from_rows(rows)
    assert matrix.criteria == frozenset({"1.1.1", "2.4.4", "3.1.1", "4.1.2"})
    assert matrix.manual == frozenset({"2.4.4", "3.1.1"})
    assert matrix.includes("1.1.1")
    assert not matrix.includes("1.4.3")
    assert matrix.is_manual("3.1.1")
    assert not matrix.is_manual("1.1.1")


def test_requested_orders_ids_numerically() -> None:
    matrix = TestMatrix(criteria=frozenset({"2.4.10", "2.4.2", "1.3.1"}), manual=frozenset({"1.2.2"}))
    assert matrix.requested(["4.1.2"]) == ["1.2.2", "1.3.1", "2.4.2", "2.4.10"]


def test_default_matrix_requests_whatever_is_available() -> None:
    assert DEFAULT_MATRIX.requested(["3.1.1", "1.1.1", "1.1.1"]) == ["1.1.1", "3.1.1"]
    assert DEFAULT_MATRIX.includes("9.9.9")


def test_manual_defaults_cover_known_prompts() -> None:
    matrix = TestMatrix.with_manual_defaults()
    assert matrix.criteria is None
    assert matrix.manual == MANUAL_CRITERIA
    assert "2.3.1" in matrix.requested([])


def test_manual_prompt_falls_back_to_title() -> None:
    assert manual_prompt("2.3.1").startswith("Manual verification required: Ensure no content flashes")
    assert manual_prompt("1.4.3", "Contrast (Minimum)") == (
        "Manual verification required: Review Contrast (Minimum) with assistive technology"
    )


def test_ids_are_stripped() -> None:
    matrix = TestMatrix(criteria=frozenset({" 1.1.1 "}), manual=frozenset({"2.4.4 "}))
    assert matrix.criteria == frozenset({"1.1.1"})
    assert matrix.manual == frozenset({"2.4.4"})
