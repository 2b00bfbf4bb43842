import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

import pytz

from config import DEFAULT_TIMEZONE

# Spreadsheet serial 25569 is 1970-01-01; serial 0 is 1899-12-30
SHEETS_EPOCH = date(1899, 12, 30)
UNIX_EPOCH_SERIAL = 25569

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

POLISH_WEEKDAYS = [
    "poniedziałek",
    "wtorek",
    "środa",
    "czwartek",
    "piątek",
    "sobota",
    "niedziela",
]


def now_local(timezone: str = DEFAULT_TIMEZONE) -> datetime:
    return datetime.now(pytz.timezone(timezone))


def today_local(timezone: str = DEFAULT_TIMEZONE) -> date:
    return now_local(timezone).date()


def weekday_name(day: Union[date, str]) -> str:
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return POLISH_WEEKDAYS[day.weekday()]


# ===== DATE CELLS =====
# A date cell read from a sheet is either an ISO string, a numeric serial
# (when the sheet parsed the value as a date), or something unusable.

@dataclass(frozen=True)
class IsoString:
    value: str


@dataclass(frozen=True)
class SerialNumber:
    value: float


@dataclass(frozen=True)
class Unparseable:
    raw: Any


DateCell = Union[IsoString, SerialNumber, Unparseable]


def classify_date_cell(raw: Any) -> DateCell:
    if isinstance(raw, bool) or raw is None:
        return Unparseable(raw)
    if isinstance(raw, (int, float)):
        return SerialNumber(float(raw))
    if isinstance(raw, str):
        text = raw.strip()
        if ISO_DATE_RE.match(text):
            return IsoString(text)
        try:
            return SerialNumber(float(text.replace(",", ".")))
        except ValueError:
            return Unparseable(raw)
    return Unparseable(raw)


def iso_string_to_date(cell: IsoString) -> Optional[date]:
    try:
        return date.fromisoformat(cell.value)
    except ValueError:
        return None


def serial_number_to_date(cell: SerialNumber) -> Optional[date]:
    # Fractional part is the time of day
    if cell.value != cell.value or cell.value < 1:
        return None
    try:
        return SHEETS_EPOCH + timedelta(days=int(cell.value))
    except OverflowError:
        return None


def cell_to_date(raw: Any) -> Optional[date]:
    cell = classify_date_cell(raw)
    if isinstance(cell, IsoString):
        return iso_string_to_date(cell)
    if isinstance(cell, SerialNumber):
        return serial_number_to_date(cell)
    return None


def cell_to_date_key(raw: Any) -> Optional[str]:
    """Canonical YYYY-MM-DD for a sheet date cell, None when unparseable"""
    parsed = cell_to_date(raw)
    return parsed.isoformat() if parsed else None


def date_to_serial(day: date) -> int:
    return (day - SHEETS_EPOCH).days
