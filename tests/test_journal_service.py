"""Tests for journal edits persisted through the store."""

import pytest

from core.exceptions import ValidationError
from database.manager import EntryStore
from models.enums import MoodCategory, NoteField
from services.journal_service import JournalService, join_transcript


@pytest.fixture
def journal(tmp_path):
    return JournalService(EntryStore(tmp_path / "journal.json"))


def test_set_question_score_persists_immediately(journal, tmp_path):
    journal.set_question_score("2024-03-01", "diet", 3, 0.25)

    reopened = EntryStore(tmp_path / "journal.json").get("2024-03-01")
    assert reopened.get_answer("diet", 3) == 0.25
    assert reopened.scores["diet"] == 0.25


def test_clear_question_score(journal):
    journal.set_question_score("2024-03-01", "diet", 3, 0.25)
    entry = journal.clear_question_score("2024-03-01", "diet", 3)
    assert entry.get_answer("diet", 3) is None
    assert journal.get_entry("2024-03-01").scores["diet"] == 0.0


def test_set_note_accepts_field_name_or_enum(journal):
    journal.set_note("2024-03-01", "positives", "Trening")
    journal.set_note("2024-03-01", NoteField.NEGATIVES, "Stres")
    entry = journal.get_entry("2024-03-01")
    assert entry.positives == "Trening"
    assert entry.negatives == "Stres"


def test_set_note_rejects_unknown_field(journal):
    with pytest.raises(ValidationError):
        journal.set_note("2024-03-01", "summary", "text")


def test_append_transcript_joins_with_single_space(journal):
    journal.set_note("2024-03-01", "positives", "Spacer")
    entry = journal.append_transcript("2024-03-01", "positives", "  rozmowa z mamą ")
    assert entry.positives == "Spacer rozmowa z mamą"


def test_append_transcript_to_empty_note(journal):
    entry = journal.append_transcript("2024-03-01", "negatives", "zmęczenie")
    assert entry.negatives == "zmęczenie"


def test_empty_transcript_leaves_note_untouched(journal):
    journal.set_note("2024-03-01", "positives", "Spacer")
    entry = journal.append_transcript("2024-03-01", "positives", "   ")
    assert entry.positives == "Spacer"


def test_join_transcript():
    assert join_transcript("", "tekst") == "tekst"
    assert join_transcript(None, "tekst") == "tekst"
    assert join_transcript("a", "b") == "a b"
    assert join_transcript("a", "") == "a"


def test_mood_for_reflects_saved_answers(journal):
    for theme in ("dreaming", "moodScore", "training", "diet", "socialRelations", "familyRelations", "selfEducation"):
        for index in range(3):
            journal.set_question_score("2024-03-01", theme, index, 0.25)
    mood = journal.mood_for("2024-03-01")
    assert mood.category is MoodCategory.GOOD
    assert mood.total_score == 5.25
