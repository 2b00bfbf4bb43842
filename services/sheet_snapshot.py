# services/sheet_snapshot.py

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from core.exceptions import AnalysisError
from models.enums import THEME_ORDER
from models.questions import questions_for, theme_label
from services.sheet_layout import (
    ANSWER_SUFFIX,
    DATE_HEADER,
    NEGATIVES_HEADER,
    POSITIVES_HEADER,
    SCORE_SUFFIX,
    THEME_TOTAL_SUFFIX,
    TOTAL_HEADER,
    WEEKDAY_HEADER,
    MAX_QUESTION_TEXT,
)
from utils.datetime_utils import cell_to_date, weekday_name

logger = logging.getLogger(__name__)


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return None


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


class _Columns:
    """Header name -> column position, trimmed and case-insensitive"""

    def __init__(self, headers: Sequence[Any]):
        self.positions: Dict[str, int] = {}
        for position, name in enumerate(headers):
            key = str(name).strip().lower()
            self.positions.setdefault(key, position)

    def get(self, row: Sequence[Any], name: str) -> Any:
        position = self.positions.get(name.strip().lower())
        if position is None or position >= len(row):
            return None
        return row[position]

    def has(self, name: str) -> bool:
        return name.strip().lower() in self.positions


def row_to_record(columns: _Columns, row: Sequence[Any], day: date) -> Dict[str, Any]:
    """One day of sheet data as a structured record"""
    theme_scores: Dict[str, Optional[float]] = {}
    questions: Dict[str, List[Dict[str, Any]]] = {}

    for theme in THEME_ORDER:
        label = theme_label(theme)
        theme_scores[label] = _to_number(columns.get(row, f"{label}{THEME_TOTAL_SUFFIX}"))
        answers = []
        for question in questions_for(theme):
            prefix = f"{label} - {question[:MAX_QUESTION_TEXT]}"
            answers.append({
                'question': question,
                'score': _to_number(columns.get(row, prefix + SCORE_SUFFIX)),
                'answer': _to_text(columns.get(row, prefix + ANSWER_SUFFIX)),
            })
        questions[label] = answers

    weekday = _to_text(columns.get(row, WEEKDAY_HEADER)) or weekday_name(day)
    return {
        'date': day.isoformat(),
        'dayOfWeek': weekday,
        'totalScore': _to_number(columns.get(row, TOTAL_HEADER)),
        'themeScores': theme_scores,
        'questions': questions,
        'positives': _to_text(columns.get(row, POSITIVES_HEADER)),
        'negatives': _to_text(columns.get(row, NEGATIVES_HEADER)),
    }


def build_snapshot(rows: Sequence[Sequence[Any]], today: date, days: int = 30) -> List[Dict[str, Any]]:
    """Records for the last `days` calendar days including today, oldest first.

    rows is the raw sheet content with the header row first. Rows whose date
    cell cannot be parsed are skipped. A header without a Date column raises
    AnalysisError.
    """
    if not rows:
        return []
    columns = _Columns(rows[0])
    if not columns.has(DATE_HEADER):
        logger.error(f"❌ No '{DATE_HEADER}' column in sheet headers: {list(rows[0])!r}")
        raise AnalysisError(f"Nie można zlokalizować kolumny '{DATE_HEADER}'. Sprawdź nagłówki.")

    since = today - timedelta(days=days - 1)
    records = []
    for row in rows[1:]:
        day = cell_to_date(columns.get(row, DATE_HEADER))
        if day is None:
            logger.warning(f"⚠️ Skipping row with invalid date: {columns.get(row, DATE_HEADER)!r}")
            continue
        if since <= day <= today:
            records.append(row_to_record(columns, row, day))

    records.sort(key=lambda record: record['date'])
    logger.info(f"Prepared {len(records)} entr{'y' if len(records) == 1 else 'ies'} for analysis")
    return records
