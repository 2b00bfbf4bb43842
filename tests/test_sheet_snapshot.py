"""Tests for turning sheet rows into analysis records."""

from datetime import date

import pytest

from core.exceptions import AnalysisError
from models.enums import THEME_ORDER
from models.questions import ANSWER_LABELS, QUESTIONS, label_for, questions_for, theme_label
from services.google_sheets import SheetSyncEngine
from services.sheet_layout import SHEET_HEADERS, entry_to_row
from services.sheet_snapshot import build_snapshot

from conftest import FakeGateway, make_entry

TODAY = date(2024, 3, 31)


def rows_for(*entries):
    return [list(SHEET_HEADERS)] + [entry_to_row(e) for e in entries]


def test_keeps_only_the_last_thirty_days():
    """Thirty calendar days ending today, both ends included."""
    entries = [make_entry(f"2024-03-{day:02d}") for day in range(1, 32)]
    records = build_snapshot(rows_for(make_entry("2024-02-29"), *entries), TODAY)
    assert len(records) == 30
    assert records[0]["date"] == "2024-03-02"
    assert records[-1]["date"] == "2024-03-31"


def test_window_length_follows_days_argument():
    rows = rows_for(make_entry("2024-03-29"), make_entry("2024-03-30"), make_entry("2024-03-31"))
    assert [r["date"] for r in build_snapshot(rows, TODAY, days=2)] == ["2024-03-30", "2024-03-31"]


def test_future_rows_are_left_out():
    records = build_snapshot(rows_for(make_entry("2024-04-01")), TODAY)
    assert records == []


def test_records_are_sorted_by_date():
    rows = rows_for(make_entry("2024-03-20"), make_entry("2024-03-05"))
    assert [r["date"] for r in build_snapshot(rows, TODAY)] == ["2024-03-05", "2024-03-20"]


def test_record_carries_scores_answers_and_notes():
    entry = make_entry("2024-03-15", {"diet": {2: 0.25}, "dreaming": {0: -0.25}},
                       positives="Zdrowy obiad", negatives="Późno spać")
    record = build_snapshot(rows_for(entry), TODAY)[0]

    assert record["dayOfWeek"] == "piątek"
    assert record["totalScore"] == 0.0
    assert record["themeScores"]["Odżywianie"] == 0.25
    assert record["themeScores"]["Sen"] == -0.25
    diet_answer = record["questions"]["Odżywianie"][2]
    assert diet_answer == {
        "question": QUESTIONS["diet"][2],
        "score": 0.25,
        "answer": ANSWER_LABELS["diet"][2].positive,
    }
    assert record["questions"]["Sen"][1]["answer"] == "N/A"
    assert record["positives"] == "Zdrowy obiad"
    assert record["negatives"] == "Późno spać"


def test_serial_dates_and_decimal_commas_are_understood():
    row = entry_to_row(make_entry("2024-03-15"))
    row[0] = 45366
    row[2] = "1,5"
    record = build_snapshot([list(SHEET_HEADERS), row], TODAY)[0]
    assert record["date"] == "2024-03-15"
    assert record["totalScore"] == 1.5


def test_rows_with_bad_dates_are_skipped():
    row = entry_to_row(make_entry("2024-03-15"))
    row[0] = "?"
    assert build_snapshot([list(SHEET_HEADERS), row], TODAY) == []


def test_missing_date_column_is_an_analysis_error():
    with pytest.raises(AnalysisError, match="Nie można zlokalizować kolumny 'Date'"):
        build_snapshot([["Data", "Suma"], ["2024-03-15", 1.0]], TODAY)


def test_empty_sheet_gives_no_records():
    assert build_snapshot([], TODAY) == []


def test_short_rows_are_padded():
    record = build_snapshot([list(SHEET_HEADERS), ["2024-03-15"]], TODAY)[0]
    assert record["totalScore"] is None
    assert record["positives"] == ""
    assert record["dayOfWeek"] == "piątek"


def test_exported_entry_reads_back_with_same_totals_and_labels(sheets_config):
    entry = make_entry(
        "2024-03-15",
        {"dreaming": {0: 0.25, 7: -0.25}, "socialRelations": {3: 0.0, 4: 0.25}, "selfEducation": {1: -0.25}},
        positives="Rozmowa",
    )
    gateway = FakeGateway()
    SheetSyncEngine(sheets_config, gateway_factory=lambda config, readonly: gateway).export(entry)

    record = build_snapshot(gateway.rows, TODAY)[0]

    assert record["totalScore"] == entry.mood.total_score
    for theme in THEME_ORDER:
        label = theme_label(theme)
        assert record["themeScores"][label] == entry.scores[theme]
        for index, answer in enumerate(record["questions"][label]):
            assert answer["question"] == questions_for(theme)[index]
            assert answer["answer"] == label_for(theme, index, entry.get_answer(theme, index))
