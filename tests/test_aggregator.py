"""Tests for theme totals and mood classification."""

import pytest

from core.aggregator import classify, recompute, theme_total
from models.enums import THEME_ORDER, MoodCategory


def all_themes(value):
    return {theme: value for theme in THEME_ORDER}


def test_theme_total_sums_answered_questions():
    """Unanswered questions count as zero."""
    assert theme_total({0: 0.25, 3: 0.25, 7: -0.25}) == 0.25
    assert theme_total({}) == 0.0
    assert theme_total(None) == 0.0


def test_theme_total_accepts_string_keys_and_ignores_invalid_values():
    assert theme_total({"0": 0.25, "1": 0.25}) == 0.5
    assert theme_total({0: 0.5, 1: "abc", 2: None, 3: 0.25}) == 0.25


def test_theme_total_ignores_indices_outside_range():
    assert theme_total({8: 0.25, -1: 0.25, 2: -0.25}) == -0.25


def test_recompute_covers_every_theme():
    scores = recompute({"diet": {0: 0.25, 1: 0.25}})
    assert list(scores) == THEME_ORDER
    assert scores["diet"] == 0.5
    assert all(scores[theme] == 0.0 for theme in THEME_ORDER if theme != "diet")


def test_recompute_full_positive_theme_reaches_max():
    scores = recompute({"training": {i: 0.25 for i in range(8)}})
    assert scores["training"] == 2.0


def test_all_positive_day_is_good():
    """Every question answered positively: 7 themes x 2.0."""
    mood = classify(recompute({theme: {i: 0.25 for i in range(8)} for theme in THEME_ORDER}))
    assert mood.category is MoodCategory.GOOD
    assert mood.total_score == 14.0
    assert mood.average == 2.0


def test_all_negative_day_is_bad():
    mood = classify(recompute({theme: {i: -0.25 for i in range(8)} for theme in THEME_ORDER}))
    assert mood.category is MoodCategory.BAD
    assert mood.total_score == -14.0


def test_empty_day_is_normal():
    mood = classify(recompute({}))
    assert mood.category is MoodCategory.NORMAL
    assert mood.total_score == 0.0
    assert mood.average == 0.0


def test_thresholds_are_inclusive():
    assert classify(all_themes(0.75)).category is MoodCategory.GOOD
    assert classify(all_themes(-0.75)).category is MoodCategory.BAD


def test_just_inside_thresholds_is_normal():
    assert classify(all_themes(0.7499999)).category is MoodCategory.NORMAL
    assert classify(all_themes(-0.7499999)).category is MoodCategory.NORMAL


def test_quarter_sums_hit_the_boundary_exactly():
    """Three positive answers in every theme gives an average of exactly 0.75."""
    detailed = {theme: {0: 0.25, 1: 0.25, 2: 0.25} for theme in THEME_ORDER}
    mood = classify(recompute(detailed))
    assert mood.average == 0.75
    assert mood.category is MoodCategory.GOOD


def test_displayed_total_is_sum_but_category_uses_average():
    """A sum above 0.75 does not make the day Good when the average is lower."""
    scores = all_themes(0.0)
    scores["diet"] = 2.0
    mood = classify(scores)
    assert mood.total_score == 2.0
    assert mood.average == pytest.approx(2.0 / 7)
    assert mood.category is MoodCategory.NORMAL


def test_empty_theme_scores_do_not_divide_by_zero():
    mood = classify({})
    assert mood.category is MoodCategory.NORMAL
    assert mood.average == 0.0


def test_raising_one_answer_never_lowers_the_category():
    order = [MoodCategory.BAD, MoodCategory.NORMAL, MoodCategory.GOOD]
    detailed = {theme: {i: -0.25 for i in range(8)} for theme in THEME_ORDER}
    previous = order.index(classify(recompute(detailed)).category)
    for theme in THEME_ORDER:
        for index in range(8):
            detailed[theme][index] = 0.25
            current = order.index(classify(recompute(detailed)).category)
            assert current >= previous
            previous = current
    assert order[previous] is MoodCategory.GOOD


def test_total_score_is_rounded_to_two_decimals():
    mood = classify({"a": 0.333333, "b": 0.333333})
    assert mood.total_score == 0.67


def test_theme_total_stays_within_two_points():
    assert theme_total({i: 0.25 for i in range(8)}) == 2.0
    assert theme_total({i: -0.25 for i in range(8)}) == -2.0
    assert theme_total({i: 0.25 for i in range(12)}) == 2.0
