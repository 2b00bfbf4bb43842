# handlers/utils.py

import logging
import sys
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, TextIO

from config import AppConfig
from core.exceptions import ValidationError
from database.manager import EntryStore
from models.enums import THEME_ORDER
from models.mood import DailyEntry
from models.questions import label_for, questions_for, theme_label
from services.ai_service import AnalysisService
from services.google_sheets import ExportResult, SheetSyncEngine
from services.journal_service import JournalService
from utils.datetime_utils import today_local, weekday_name
from utils.process_lock import ProcessLock

logger = logging.getLogger(__name__)

MOOD_EMOJI = {'Bad': "😞", 'Normal': "😐", 'Good': "😊"}


@dataclass
class CommandContext:
    """Everything a command needs, built once in main()"""
    config: AppConfig
    store: EntryStore
    journal: JournalService
    engine_factory: Callable[[], SheetSyncEngine]
    analysis_factory: Callable[[], AnalysisService]
    out: TextIO = field(default=sys.stdout)
    today: Optional[date] = None

    def today_date(self) -> date:
        return self.today or today_local(self.config.timezone)

    def resolve_date(self, raw: Optional[str]) -> str:
        """Missing date means today in the journal timezone"""
        return raw if raw else self.today_date().isoformat()

    def busy_lock(self) -> ProcessLock:
        return ProcessLock(self.config.storage.lock_path)

    def echo(self, text: str = "") -> None:
        print(text, file=self.out)


def parse_question_index(raw: str) -> int:
    """1-based on the command line, 0-based inside the journal"""
    try:
        number = int(raw)
    except ValueError:
        raise ValidationError(f"Question number must be an integer 1-8 (got {raw!r})")
    if not 1 <= number <= 8:
        raise ValidationError(f"Question number must be between 1 and 8 (got {number})")
    return number - 1


def format_entry(entry: DailyEntry, detailed: bool = True) -> str:
    mood = entry.mood
    lines = [
        f"📅 {entry.date} ({weekday_name(entry.date)})",
        f"{MOOD_EMOJI.get(mood.category.value, '')} Nastrój: {mood.category.value} "
        f"(suma {mood.total_score:+.2f}, średnia {mood.average:+.2f})",
        "",
    ]
    for theme in THEME_ORDER:
        lines.append(f"• {theme_label(theme)}: {entry.scores[theme]:+.2f}")
        if not detailed:
            continue
        for index, question in enumerate(questions_for(theme)):
            score = entry.get_answer(theme, index)
            if score is None:
                continue
            lines.append(f"    {index + 1}. {question} → {label_for(theme, index, score)} ({score:+.2f})")

    if entry.positives:
        lines.extend(["", f"➕ Pozytywy: {entry.positives}"])
    if entry.negatives:
        lines.extend(["", f"➖ Negatywy: {entry.negatives}"])
    return "\n".join(lines)


def format_export_result(result: ExportResult) -> str:
    if result.success:
        return f"✅ {result.message}"
    return f"❌ Błąd eksportu: {result.error}"
