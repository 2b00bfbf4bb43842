# services/sheet_layout.py

from typing import List, Union

from models.enums import THEME_ORDER
from models.mood import DailyEntry
from models.questions import label_for, questions_for, theme_label
from models.scores import coerce_question_score
from utils.datetime_utils import weekday_name

Cell = Union[str, float, int, None]

DATE_HEADER = "Date"
WEEKDAY_HEADER = "Dzień Tygodnia"
TOTAL_HEADER = "Suma Punktów"
POSITIVES_HEADER = "Pozytywy"
NEGATIVES_HEADER = "Negatywy"

THEME_TOTAL_SUFFIX = " - Wynik Ogólny"
SCORE_SUFFIX = " - Wynik"
ANSWER_SUFFIX = " - Odpowiedź"

MAX_QUESTION_TEXT = 100

# Positions inside a row
DATE_COLUMN = 0
WEEKDAY_COLUMN = 1
TOTAL_COLUMN = 2
FIRST_THEME_COLUMN = 3
FIRST_QUESTION_COLUMN = FIRST_THEME_COLUMN + len(THEME_ORDER)


def build_headers() -> List[str]:
    headers = [DATE_HEADER, WEEKDAY_HEADER, TOTAL_HEADER]
    for theme in THEME_ORDER:
        headers.append(f"{theme_label(theme)}{THEME_TOTAL_SUFFIX}")
    for theme in THEME_ORDER:
        label = theme_label(theme)
        for question in questions_for(theme):
            text = question[:MAX_QUESTION_TEXT]
            headers.append(f"{label} - {text}{SCORE_SUFFIX}")
            headers.append(f"{label} - {text}{ANSWER_SUFFIX}")
    headers.append(POSITIVES_HEADER)
    headers.append(NEGATIVES_HEADER)
    return headers


SHEET_HEADERS = build_headers()
COLUMN_COUNT = len(SHEET_HEADERS)


def question_columns(theme_position: int, question_index: int) -> tuple:
    """(score column, answer column) for a question"""
    score_column = FIRST_QUESTION_COLUMN + (theme_position * 8 + question_index) * 2
    return score_column, score_column + 1


def entry_to_row(entry: DailyEntry) -> List[Cell]:
    """Positional sheet row for one day, aligned with SHEET_HEADERS"""
    scores = entry.scores
    total = sum(scores.get(theme, 0.0) for theme in THEME_ORDER)

    row: List[Cell] = [entry.date, weekday_name(entry.date), round(total, 2)]
    row.extend(scores.get(theme, 0.0) for theme in THEME_ORDER)

    for theme in THEME_ORDER:
        answers = entry.detailed_scores.get(theme, {})
        for index in range(len(questions_for(theme))):
            score = coerce_question_score(answers.get(index))
            row.append(score if score is not None else 0)
            row.append(label_for(theme, index, score))

    row.append(entry.positives or "")
    row.append(entry.negatives or "")
    return row


def column_letter(column: int) -> str:
    """1-based column number to A1 letters (1 -> A, 27 -> AA)"""
    if column < 1:
        raise ValueError(f"Column must be >= 1 (got {column})")
    letters = ""
    while column:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


LAST_COLUMN = column_letter(COLUMN_COUNT)


def quote_sheet_name(sheet_name: str) -> str:
    if sheet_name.replace("_", "").isalnum():
        return sheet_name
    return "'" + sheet_name.replace("'", "''") + "'"


def row_range(row_number: int) -> str:
    """Full-width A1 range of one row, relative to the worksheet"""
    return f"A{row_number}:{LAST_COLUMN}{row_number}"
