# models/scores.py

from typing import Any, Optional

NEGATIVE = -0.25
NEUTRAL = 0.0
POSITIVE = 0.25

QUESTION_SCORES = (NEGATIVE, NEUTRAL, POSITIVE)


def coerce_question_score(value: Any) -> Optional[float]:
    """Returns the canonical QuestionScore or None when the value is not one"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    for score in QUESTION_SCORES:
        if number == score:
            return score
    return None
