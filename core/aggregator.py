#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Eunoia Journal - Score aggregation

Two stages:
- recompute(): per-theme sum of the eight answers (unanswered counts as 0)
- classify(): category from the AVERAGE of theme totals, while the displayed
  total is the SUM of theme totals
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from models.enums import THEME_ORDER, MoodCategory
from models.scores import coerce_question_score

QUESTION_INDICES = range(8)

BAD_THRESHOLD = -0.75
GOOD_THRESHOLD = 0.75


@dataclass(frozen=True)
class CalculatedMood:
    """Derived view of a day's mood; never persisted"""
    category: MoodCategory
    total_score: float
    average: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'total_score': self.total_score,
            'average': self.average,
        }


def theme_total(answers: Optional[Mapping[Any, Any]]) -> float:
    """Sum of one theme's answers over indices 0..7"""
    if not answers:
        return 0.0
    total = 0.0
    for index in QUESTION_INDICES:
        # JSON round-trips turn integer keys into strings
        raw = answers.get(index, answers.get(str(index)))
        score = coerce_question_score(raw)
        if score is not None:
            total += score
    return total


def recompute(detailed_scores: Optional[Mapping[str, Mapping[Any, Any]]]) -> Dict[str, float]:
    """ThemeScores for every fixed theme from DetailedScores"""
    detailed_scores = detailed_scores or {}
    return {theme: theme_total(detailed_scores.get(theme)) for theme in THEME_ORDER}


def classify(theme_scores: Optional[Mapping[str, float]]) -> CalculatedMood:
    """Overall mood category; thresholds are inclusive at +/-0.75"""
    values = [float(value or 0) for value in (theme_scores or {}).values()]
    total = sum(values)
    average = total / len(values) if values else 0.0

    if average <= BAD_THRESHOLD:
        category = MoodCategory.BAD
    elif average >= GOOD_THRESHOLD:
        category = MoodCategory.GOOD
    else:
        category = MoodCategory.NORMAL

    return CalculatedMood(category=category, total_score=round(total, 2), average=average)
