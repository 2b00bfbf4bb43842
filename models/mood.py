# models/mood.py

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from core.aggregator import QUESTION_INDICES, CalculatedMood, classify, recompute
from core.exceptions import ValidationError
from models.enums import THEME_ORDER, NoteField
from models.scores import coerce_question_score


def validate_date_key(value: str) -> str:
    """Normalises a calendar day to YYYY-MM-DD"""
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def validate_theme(theme: str) -> str:
    if theme not in THEME_ORDER:
        raise ValidationError(f"Unknown theme {theme!r}. Valid themes: {', '.join(THEME_ORDER)}")
    return theme


def validate_question_index(index: int) -> int:
    if not isinstance(index, int) or isinstance(index, bool) or index not in QUESTION_INDICES:
        raise ValidationError(f"Question index must be 0-7 (got {index!r})")
    return index


def empty_detailed_scores() -> Dict[str, Dict[int, float]]:
    return {theme: {} for theme in THEME_ORDER}


@dataclass
class DailyEntry:
    """One calendar day: question answers, derived theme totals and notes"""
    date: str
    detailed_scores: Dict[str, Dict[int, float]] = field(default_factory=empty_detailed_scores)
    scores: Dict[str, float] = field(default_factory=dict)
    positives: str = ""
    negatives: str = ""

    def __post_init__(self):
        self.date = validate_date_key(self.date)
        self.detailed_scores = self._clean_detailed(self.detailed_scores)
        self.positives = self.positives or ""
        self.negatives = self.negatives or ""
        self.refresh_scores()

    @staticmethod
    def _clean_detailed(raw: Optional[Dict[str, Any]]) -> Dict[str, Dict[int, float]]:
        cleaned = empty_detailed_scores()
        for theme, answers in (raw or {}).items():
            if not isinstance(answers, dict):
                continue
            bucket = cleaned.setdefault(theme, {})
            for key, value in answers.items():
                try:
                    index = int(key)
                except (TypeError, ValueError):
                    continue
                score = coerce_question_score(value)
                if index in QUESTION_INDICES and score is not None:
                    bucket[index] = score
        return cleaned

    def refresh_scores(self) -> Dict[str, float]:
        """Re-derives theme totals; the only place scores is assigned"""
        self.scores = recompute(self.detailed_scores)
        return self.scores

    # ===== MUTATIONS =====

    def set_answer(self, theme: str, question_index: int, score: float) -> None:
        validate_theme(theme)
        validate_question_index(question_index)
        value = coerce_question_score(score)
        if value is None:
            raise ValidationError(f"Invalid question score: {score!r}")
        self.detailed_scores.setdefault(theme, {})[question_index] = value
        self.refresh_scores()

    def clear_answer(self, theme: str, question_index: int) -> None:
        validate_theme(theme)
        validate_question_index(question_index)
        self.detailed_scores.setdefault(theme, {}).pop(question_index, None)
        self.refresh_scores()

    def get_answer(self, theme: str, question_index: int) -> Optional[float]:
        return self.detailed_scores.get(theme, {}).get(question_index)

    def set_note(self, note_field: NoteField, text: str) -> None:
        setattr(self, note_field.value, text or "")

    def get_note(self, note_field: NoteField) -> str:
        return getattr(self, note_field.value)

    # ===== DERIVED =====

    @property
    def mood(self) -> CalculatedMood:
        return classify(self.scores)

    @property
    def answered_count(self) -> int:
        return sum(len(answers) for answers in self.detailed_scores.values())

    # ===== SERIALIZATION =====

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'scores': dict(self.scores),
            'detailedScores': {
                theme: {str(index): score for index, score in sorted(answers.items())}
                for theme, answers in self.detailed_scores.items()
            },
            'positives': self.positives,
            'negatives': self.negatives,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyEntry":
        # Stored totals are ignored and re-derived from the answers
        return cls(
            date=data['date'],
            detailed_scores=data.get('detailedScores') or data.get('detailed_scores') or {},
            positives=data.get('positives') or "",
            negatives=data.get('negatives') or "",
        )

    @classmethod
    def create_empty(cls, entry_date: str) -> "DailyEntry":
        return cls(date=entry_date)
