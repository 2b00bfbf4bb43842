"""
Trend analysis of the last 30 days of sheet data through the OpenAI API
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

try:
    from openai import AsyncOpenAI, OpenAIError
    OPENAI_AVAILABLE = True
except ImportError:
    OPENAI_AVAILABLE = False

from config import AIConfig
from core.aggregator import classify
from core.exceptions import AnalysisError, EunoiaError
from services.google_sheets import SheetSyncEngine
from services.sheet_snapshot import build_snapshot

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "Brak danych z ostatnich 30 dni w arkuszu do analizy."

DEFAULT_QUESTION = "Jak zapowiadają się najbliższe dni pod względem nastawienia do życia?"

SYSTEM_PROMPT = "Jesteś uważnym analitykiem dziennika nastroju. Odpowiadasz po polsku, zwięźle i konkretnie."

PROMPT_TEMPLATE = """Przeanalizuj dostarczone dane z arkusza kalkulacyjnego z ostatnich {days} dni. Dane te zawierają codzienne zapisy dotyczące nastroju, w tym datę, dzień tygodnia, ogólny wynik punktowy, wyniki poszczególnych pryzmatów (Sen, Nastawienie, Fitness, Odżywianie, Relacje zewnętrzne, Relacje rodzinne, Rozwój intelektualny), szczegółowe odpowiedzi (punktowe i tekstowe) na pytania w ramach każdego pryzmatu oraz notatki "Pozytywy" i "Negatywy".

Dane wejściowe (JSON):
{data}

Na podstawie analizy WSZYSTKICH tych danych liczbowych i tekstowych, odpowiedz na pytanie: {question}
Twoja analiza powinna być w języku polskim. Skup się na identyfikacji wzorców, korelacji i potencjalnych czynników wpływających na nastawienie. Wskaż, które aspekty (pryzmaty, konkretne odpowiedzi, notatki) wydają się mieć największy wpływ. Zakończ prognozą lub sugestiami dotyczącymi utrzymania pozytywnego nastawienia lub poprawy w przypadku negatywnych trendów.
Unikaj tworzenia zbyt długich odpowiedzi, skup się na zwięzłych i konkretnych wnioskach."""


@dataclass
class AnalysisResult:
    success: bool
    analysis: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


def build_prompt(snapshot: List[Dict[str, Any]], question: Optional[str] = None, days: int = 30) -> str:
    question = (question or "").strip() or DEFAULT_QUESTION
    data = json.dumps(snapshot, ensure_ascii=False)
    return PROMPT_TEMPLATE.format(days=days, data=data, question=question)


class AnalysisService:
    """Structured snapshot in, prose out"""

    def __init__(self, ai_config: AIConfig, client: Any = None):
        self.config = ai_config
        self.client = client
        self.enabled = client is not None or (OPENAI_AVAILABLE and ai_config.enabled)

        if self.client is None and self.enabled:
            try:
                self.client = AsyncOpenAI(api_key=ai_config.openai_api_key, timeout=ai_config.request_timeout)
                logger.info("🤖 AI analysis initialised")
            except OpenAIError as e:
                logger.error(f"❌ AI initialisation failed: {e}")
                self.enabled = False
        elif not self.enabled:
            if not ai_config.openai_api_key:
                logger.warning("⚠️ AI analysis disabled (no OPENAI_API_KEY), local summary will be used")
            else:
                logger.warning("⚠️ AI analysis disabled (openai package unavailable)")

    async def analyze(self, snapshot: List[Dict[str, Any]], custom_prompt: Optional[str] = None,
                      days: int = 30) -> str:
        """Prose analysis of the snapshot; raises AnalysisError on failure"""
        if not snapshot:
            return NO_DATA_TEXT
        if not self.enabled:
            return self._get_fallback_analysis(snapshot)

        prompt = build_prompt(snapshot, custom_prompt, days)
        try:
            response = await self.client.chat.completions.create(
                model=self.config.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.config.openai_max_tokens,
                temperature=self.config.temperature,
            )
        except Exception as e:
            logger.error(f"❌ AI request failed: {e}")
            raise AnalysisError(f"AI analysis failed: {e}")

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise AnalysisError("AI analysis did not return a valid output.")
        return content.strip()

    async def analyze_sheet(self, engine: SheetSyncEngine, today: date, custom_prompt: Optional[str] = None,
                            days: int = 30) -> AnalysisResult:
        """Fetches the sheet, keeps the last `days` days and analyses them"""
        try:
            rows = engine.fetch_all_rows()
            if len(rows) < 2:
                return AnalysisResult(
                    success=False,
                    error="Brak wystarczających danych w arkuszu do analizy (potrzebny nagłówek i co najmniej jeden wiersz danych).",
                )
            snapshot = build_snapshot(rows, today, days)
            if not snapshot:
                return AnalysisResult(success=True, analysis=NO_DATA_TEXT, message=f"Brak danych z ostatnich {days} dni.")
            analysis = await self.analyze(snapshot, custom_prompt, days)
        except EunoiaError as e:
            logger.error(f"❌ Analysis failed ({type(e).__name__}): {e.message}")
            return AnalysisResult(success=False, error=e.message)

        message = f"Analiza AI zakończona. Przeanalizowano {len(snapshot)} wpisów."
        if not self.enabled:
            message = f"AI niedostępne, przygotowano podsumowanie lokalne z {len(snapshot)} wpisów."
        return AnalysisResult(success=True, analysis=analysis, message=message)

    def _get_fallback_analysis(self, snapshot: List[Dict[str, Any]]) -> str:
        """Plain statistical summary when the AI is unavailable"""
        totals = [r['totalScore'] for r in snapshot if r.get('totalScore') is not None]
        theme_sums: Dict[str, List[float]] = {}
        for record in snapshot:
            for label, value in (record.get('themeScores') or {}).items():
                if value is not None:
                    theme_sums.setdefault(label, []).append(value)

        lines = [f"📊 Wpisów: {len(snapshot)} ({snapshot[0]['date']} – {snapshot[-1]['date']})."]
        if totals:
            average_total = sum(totals) / len(totals)
            lines.append(f"Średnia suma punktów: {average_total:.2f}.")
            trend = totals[-1] - totals[0]
            if len(totals) > 1:
                direction = "rośnie" if trend > 0 else "spada" if trend < 0 else "jest stabilny"
                lines.append(f"Wynik od pierwszego do ostatniego dnia {direction} ({trend:+.2f}).")

        if theme_sums:
            averages = {label: sum(v) / len(v) for label, v in theme_sums.items()}
            best = max(averages, key=averages.get)
            worst = min(averages, key=averages.get)
            lines.append(f"Najmocniejszy pryzmat: {best} ({averages[best]:+.2f}).")
            lines.append(f"Najsłabszy pryzmat: {worst} ({averages[worst]:+.2f}).")
            mood = classify(averages)
            lines.append(f"Ogólne nastawienie w tym okresie: {mood.category.value}.")

        return "\n".join(lines)
