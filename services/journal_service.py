# services/journal_service.py

import logging
from typing import Optional, Union

from core.aggregator import CalculatedMood
from core.exceptions import ValidationError
from database.manager import EntryStore
from models.enums import NoteField
from models.mood import DailyEntry

logger = logging.getLogger(__name__)


def _note_field(name: Union[NoteField, str]) -> NoteField:
    if isinstance(name, NoteField):
        return name
    try:
        return NoteField(name)
    except ValueError:
        raise ValidationError(f"Note field must be 'positives' or 'negatives' (got {name!r})")


def join_transcript(current: Optional[str], transcript: Optional[str]) -> str:
    """Appends a finished dictation to existing note text"""
    current = current or ""
    transcript = (transcript or "").strip()
    if not transcript:
        return current
    return (current + (" " if current else "") + transcript).strip()


class JournalService:
    """Every edit loads the entry, mutates it and persists it straight away"""

    def __init__(self, store: EntryStore):
        self.store = store

    def get_entry(self, entry_date: str) -> DailyEntry:
        return self.store.get(entry_date)

    def set_question_score(self, entry_date: str, theme: str, question_index: int, score: float) -> DailyEntry:
        entry = self.store.get(entry_date)
        entry.set_answer(theme, question_index, score)
        self.store.put(entry)
        logger.info(f"📝 {entry.date} {theme}[{question_index}] = {score:+.2f} (theme total {entry.scores[theme]:+.2f})")
        return entry

    def clear_question_score(self, entry_date: str, theme: str, question_index: int) -> DailyEntry:
        entry = self.store.get(entry_date)
        entry.clear_answer(theme, question_index)
        self.store.put(entry)
        logger.info(f"🧹 {entry.date} {theme}[{question_index}] cleared")
        return entry

    def set_note(self, entry_date: str, field: Union[NoteField, str], text: str) -> DailyEntry:
        note_field = _note_field(field)
        entry = self.store.get(entry_date)
        entry.set_note(note_field, text)
        self.store.put(entry)
        return entry

    def append_transcript(self, entry_date: str, field: Union[NoteField, str], transcript: str) -> DailyEntry:
        """Adds the final transcript of a dictation session to a note"""
        note_field = _note_field(field)
        entry = self.store.get(entry_date)
        if not (transcript or "").strip():
            logger.debug("Empty transcript ignored")
            return entry
        entry.set_note(note_field, join_transcript(entry.get_note(note_field), transcript))
        self.store.put(entry)
        logger.info(f"🎙️ Transcript appended to {note_field.value} for {entry.date}")
        return entry

    def mood_for(self, entry_date: str) -> CalculatedMood:
        return self.store.get(entry_date).mood
