#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Eunoia Journal - Google Sheets synchronisation

Reconciles local daily entries with rows of a Google Sheet so that there is
at most one row per date:

1. read the header row
2. header mismatch -> clear the sheet and write the current headers
   (columns are positional, a stale layout cannot be reinterpreted)
3. otherwise index the existing rows by their date cell
4. known date -> full-row range update, new date -> append
5. commit: one batch update, then one append (INSERT_ROWS)

The two commit halves are independent. A failure of either half is raised
with its own error type and nothing already written is rolled back.
Concurrent exports against the same sheet are not coordinated here; callers
serialise them (see utils.process_lock).
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import gspread
from google.auth.exceptions import GoogleAuthError, RefreshError
from gspread.utils import InsertDataOption, ValueInputOption, ValueRenderOption

from config import SheetsConfig
from core.exceptions import (
    ConfigurationError,
    EunoiaError,
    SchemaDriftError,
    SheetAppendError,
    SheetAuthError,
    SheetError,
    SheetIOError,
    SheetNotFoundError,
    SheetPermissionError,
    SheetUpdateError,
)
from models.mood import DailyEntry
from services.sheet_layout import (
    COLUMN_COUNT,
    DATE_COLUMN,
    SHEET_HEADERS,
    Cell,
    entry_to_row,
    quote_sheet_name,
    row_range,
)
from utils.datetime_utils import IsoString, cell_to_date_key, classify_date_cell

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
READONLY_SCOPES = ['https://www.googleapis.com/auth/spreadsheets.readonly']

HEADER_RANGE = "A1:ZZ1"
DATE_VALUES_RANGE = "A2:A"
ALL_VALUES_RANGE = "A1:ZZ"


# ===== ERROR TRANSLATION =====

def _status_code(error: Exception) -> Optional[int]:
    code = getattr(error, 'code', None)
    if isinstance(code, int):
        return code
    response = getattr(error, 'response', None)
    status = getattr(response, 'status_code', None)
    return status if isinstance(status, int) else None


def translate_api_error(error: Exception, action: str) -> SheetError:
    """Maps gspread/google-auth failures onto the sheet error taxonomy"""
    if isinstance(error, SheetError):
        return error
    if isinstance(error, (RefreshError, GoogleAuthError)):
        return SheetAuthError(f"Authentication with Google failed while {action}. Check service account credentials.", details=str(error))
    if isinstance(error, (gspread.exceptions.SpreadsheetNotFound, gspread.exceptions.WorksheetNotFound)):
        return SheetNotFoundError(f"Spreadsheet or worksheet not found while {action}. Verify GOOGLE_SHEET_ID and GOOGLE_SHEET_NAME.", details=str(error))

    code = _status_code(error)
    if code == 401:
        return SheetAuthError(f"Google rejected the credentials while {action}.", details=str(error))
    if code == 403:
        return SheetPermissionError(f"Permission denied while {action}. Ensure the service account has Editor access to the sheet.", details=str(error))
    if code == 404:
        return SheetNotFoundError(f"Spreadsheet not found while {action}. Verify GOOGLE_SHEET_ID.", details=str(error))
    return SheetIOError(f"Failed {action}: {error}", details=str(error))


def _is_unparseable_range(error: Exception) -> bool:
    return _status_code(error) == 400 and 'Unable to parse range' in str(error)


@contextmanager
def api_call(action: str) -> Iterator[None]:
    try:
        yield
    except EunoiaError:
        raise
    except (gspread.exceptions.GSpreadException, GoogleAuthError) as e:
        raise translate_api_error(e, action) from e
    except (OSError, ValueError) as e:
        # requests/urllib3 connection failures are OSError subclasses
        raise SheetIOError(f"Failed {action}: {e}", details=str(e)) from e


# ===== GATEWAY =====

class SheetGateway:
    """Narrow view of one worksheet used by the sync engine"""

    title: str = ""

    def read_range(self, range_name: str) -> List[List[Any]]:
        raise NotImplementedError

    def read_ranges(self, ranges: Sequence[str]) -> List[List[List[Any]]]:
        return [self.read_range(r) for r in ranges]

    def read_absolute_range(self, range_name: str) -> List[List[Any]]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def write_header(self, headers: List[str]) -> None:
        raise NotImplementedError

    def batch_update(self, updates: List[Dict[str, Any]]) -> int:
        raise NotImplementedError

    def append_rows(self, rows: List[List[Cell]]) -> int:
        raise NotImplementedError


class GspreadSheetGateway(SheetGateway):
    """SheetGateway over a gspread Worksheet"""

    def __init__(self, worksheet: gspread.Worksheet, spreadsheet: gspread.Spreadsheet):
        self.worksheet = worksheet
        self.spreadsheet = spreadsheet
        self.title = worksheet.title

    def read_range(self, range_name: str) -> List[List[Any]]:
        try:
            with api_call(f"reading {range_name}"):
                values = self.worksheet.get(range_name, value_render_option=ValueRenderOption.unformatted)
        except SheetIOError as e:
            if e.__cause__ is not None and _is_unparseable_range(e.__cause__):
                logger.warning(f"⚠️ Range {range_name} is not readable yet, treating it as empty")
                return []
            raise
        return [list(row) for row in values]

    def read_ranges(self, ranges: Sequence[str]) -> List[List[List[Any]]]:
        if not ranges:
            return []
        with api_call("reading existing rows"):
            results = self.worksheet.batch_get(list(ranges), value_render_option=ValueRenderOption.unformatted)
        return [[list(row) for row in value_range] for value_range in results]

    def read_absolute_range(self, range_name: str) -> List[List[Any]]:
        with api_call(f"reading {range_name}"):
            response = self.spreadsheet.values_get(range_name)
        return response.get('values', [])

    def clear(self) -> None:
        with api_call(f"clearing sheet '{self.title}' for format update"):
            self.worksheet.clear()

    def write_header(self, headers: List[str]) -> None:
        with api_call(f"writing headers to sheet '{self.title}'"):
            missing_columns = len(headers) - self.worksheet.col_count
            if missing_columns > 0:
                self.worksheet.add_cols(missing_columns)
            self.worksheet.update(
                range_name="A1",
                values=[headers],
                value_input_option=ValueInputOption.user_entered,
            )

    def batch_update(self, updates: List[Dict[str, Any]]) -> int:
        response = self.worksheet.batch_update(updates, value_input_option=ValueInputOption.user_entered)
        return int((response or {}).get('totalUpdatedRows') or len(updates))

    def append_rows(self, rows: List[List[Cell]]) -> int:
        response = self.worksheet.append_rows(
            rows,
            value_input_option=ValueInputOption.user_entered,
            insert_data_option=InsertDataOption.insert_rows,
            table_range="A1",
        )
        updates = (response or {}).get('updates') or {}
        return int(updates.get('updatedRows') or len(rows))


def open_worksheet(sheets_config: SheetsConfig, readonly: bool = False) -> GspreadSheetGateway:
    """Authorises the service account and opens the configured worksheet"""
    sheets_config.validate()
    try:
        client = gspread.service_account_from_dict(
            sheets_config.service_account_info(),
            scopes=READONLY_SCOPES if readonly else SCOPES,
        )
    except (ValueError, GoogleAuthError) as e:
        raise ConfigurationError(f"Could not load service account credentials: {e}")

    with api_call(f"opening spreadsheet {sheets_config.spreadsheet_id}"):
        spreadsheet = client.open_by_key(sheets_config.spreadsheet_id)
        try:
            worksheet = spreadsheet.worksheet(sheets_config.sheet_name)
        except gspread.exceptions.WorksheetNotFound:
            if readonly:
                raise SheetNotFoundError(f"Worksheet '{sheets_config.sheet_name}' does not exist in the spreadsheet.")
            logger.info(f"📄 Worksheet '{sheets_config.sheet_name}' not found, creating it")
            worksheet = spreadsheet.add_worksheet(title=sheets_config.sheet_name, rows=1000, cols=COLUMN_COUNT)
    logger.info(f"🔗 Connected to sheet '{worksheet.title}'")
    return GspreadSheetGateway(worksheet, spreadsheet)


# ===== RESULTS =====

@dataclass
class ExportResult:
    success: bool
    rows_appended: int = 0
    rows_updated: int = 0
    message: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    migrated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'rowsAppended': self.rows_appended,
            'rowsUpdated': self.rows_updated,
            'message': self.message,
            'error': self.error,
        }


@dataclass
class SyncPlan:
    """What one export is going to write"""
    updates: List[Dict[str, Any]] = field(default_factory=list)
    appends: List[List[Cell]] = field(default_factory=list)
    unchanged: int = 0
    migrated: bool = False
    had_headers: bool = False


@dataclass
class TestReadResult:
    success: bool
    data: Optional[List[List[Any]]] = None
    error: Optional[str] = None
    details: Optional[str] = None


# ===== CELL COMPARISON =====

def _normalize_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, (int, float)):
        return round(float(value), 6)
    text = str(value)
    try:
        return round(float(text.replace(",", ".")), 6) if text.strip() else ""
    except ValueError:
        return text


def _cells_equal(want: Cell, have: Any) -> bool:
    if _normalize_cell(want) == _normalize_cell(have):
        return True
    # USER_ENTERED turns date-looking text (e.g. a note "2024-01-01") into a serial
    if isinstance(want, str) and isinstance(classify_date_cell(want), IsoString):
        key = cell_to_date_key(want)
        return key is not None and key == cell_to_date_key(have)
    return False


def rows_equal(expected: Sequence[Cell], actual: Sequence[Any]) -> bool:
    """True when a sheet row already holds exactly the serialised entry"""
    if len(actual) > len(expected):
        if any(_normalize_cell(v) != "" for v in actual[len(expected):]):
            return False
    padded = list(actual[:len(expected)]) + [""] * (len(expected) - len(actual))
    for position, (want, have) in enumerate(zip(expected, padded)):
        if position == DATE_COLUMN:
            if cell_to_date_key(want) != cell_to_date_key(have):
                return False
        elif not _cells_equal(want, have):
            return False
    return True


# ===== ENGINE =====

GatewayFactory = Callable[[SheetsConfig, bool], SheetGateway]


class SheetSyncEngine:
    """Date-keyed upsert of daily entries into one worksheet"""

    def __init__(self, sheets_config: SheetsConfig, gateway_factory: Optional[GatewayFactory] = None):
        self.config = sheets_config
        self.gateway_factory = gateway_factory or open_worksheet
        self.headers = list(SHEET_HEADERS)

    def _connect(self, readonly: bool = False) -> SheetGateway:
        self.config.validate()
        return self.gateway_factory(self.config, readonly)

    # ----- header reconciliation -----

    def read_headers(self, gateway: SheetGateway) -> List[str]:
        rows = gateway.read_range(HEADER_RANGE)
        if not rows or not rows[0]:
            return []
        return [str(cell).strip() for cell in rows[0]]

    def check_headers(self, existing: List[str]) -> None:
        """Raises SchemaDriftError unless the layout matches cell for cell"""
        expected = [h.strip() for h in self.headers]
        if existing != expected:
            raise SchemaDriftError(expected, existing)

    def reconcile_headers(self, gateway: SheetGateway) -> SyncPlan:
        plan = SyncPlan()
        existing = self.read_headers(gateway)

        if not existing:
            logger.info(f"📋 Sheet '{gateway.title}' has no header row, writing it")
            gateway.write_header(self.headers)
            return plan

        try:
            self.check_headers(existing)
        except SchemaDriftError as drift:
            logger.warning(
                f"⚠️ Header mismatch in sheet '{gateway.title}' "
                f"(expected {len(drift.expected)} columns, found {len(drift.found)}). "
                f"The sheet will be cleared and rewritten with the new format."
            )
            gateway.clear()
            plan.migrated = True
            gateway.write_header(self.headers)
            return plan

        logger.debug("Headers match the sheet")
        plan.had_headers = True
        return plan

    # ----- row indexing -----

    def index_rows(self, gateway: SheetGateway) -> Dict[str, int]:
        """Date key -> 1-based sheet row for every parseable date cell"""
        index: Dict[str, int] = {}
        for offset, row in enumerate(gateway.read_range(DATE_VALUES_RANGE)):
            row_number = offset + 2
            raw = row[0] if row else None
            if raw is None or raw == "":
                continue
            key = cell_to_date_key(raw)
            if key is None:
                logger.warning(f"⚠️ Could not parse date at row {row_number}: {raw!r}")
                continue
            if key in index:
                logger.warning(f"⚠️ Duplicate date {key} at rows {index[key]} and {row_number}, keeping the first")
                continue
            index[key] = row_number
        logger.debug(f"Found {len(index)} dated rows in the sheet")
        return index

    # ----- planning -----

    def plan(self, gateway: SheetGateway, rows: List[List[Cell]]) -> SyncPlan:
        plan = self.reconcile_headers(gateway)
        if not plan.had_headers:
            # Fresh or just migrated sheet: nothing to match against
            plan.appends.extend(rows)
            return plan

        index = self.index_rows(gateway)
        matched = [(row, index[str(row[DATE_COLUMN])]) for row in rows if str(row[DATE_COLUMN]) in index]
        current_rows = gateway.read_ranges([row_range(number) for _, number in matched])
        current_by_number = {
            number: (values[0] if values else [])
            for (_, number), values in zip(matched, current_rows)
        }

        for row in rows:
            key = str(row[DATE_COLUMN])
            number = index.get(key)
            if number is None:
                plan.appends.append(row)
                logger.debug(f"Queued for append: {key}")
            elif rows_equal(row, current_by_number.get(number, [])):
                plan.unchanged += 1
                logger.debug(f"Row {number} for {key} is already up to date")
            else:
                plan.updates.append({'range': row_range(number), 'values': [row]})
                logger.debug(f"Queued for update: {key} at row {number}")
        return plan

    # ----- commit -----

    def commit(self, gateway: SheetGateway, plan: SyncPlan) -> ExportResult:
        rows_updated = 0
        rows_appended = 0

        if plan.updates:
            try:
                with api_call("updating rows"):
                    rows_updated = gateway.batch_update(plan.updates)
            except SheetError as e:
                raise self._half_failure(SheetUpdateError, "Failed to update rows", e)
            logger.info(f"✅ Batch update done, {rows_updated} row(s) updated")

        if plan.appends:
            try:
                with api_call("appending rows"):
                    rows_appended = gateway.append_rows(plan.appends)
            except SheetError as e:
                prefix = "Failed to append new data"
                if rows_updated:
                    prefix += f" ({rows_updated} row(s) were already updated)"
                raise self._half_failure(SheetAppendError, prefix, e)
            logger.info(f"✅ Append done, {rows_appended} row(s) added")

        return ExportResult(
            success=True,
            rows_appended=rows_appended,
            rows_updated=rows_updated,
            message=self.summary_message(plan, rows_updated, rows_appended, gateway.title),
            migrated=plan.migrated,
        )

    @staticmethod
    def _half_failure(error_class, prefix: str, error: SheetError) -> SheetError:
        # Auth/permission/not-found keep their type, plain I/O gets the half-specific one
        if type(error) in (SheetIOError, SheetUpdateError, SheetAppendError):
            failure = error_class(f"{prefix}: {error.message}", details=error.details)
        else:
            failure = type(error)(f"{prefix}: {error.message}", details=error.details)
        return failure

    @staticmethod
    def summary_message(plan: SyncPlan, rows_updated: int, rows_appended: int, sheet_name: str) -> str:
        parts = []
        if rows_updated > 0:
            parts.append(f"{rows_updated} wiersz(y) zaktualizowano")
        if rows_appended > 0:
            parts.append(f"{rows_appended} wiersz(y) dodano")

        if parts:
            message = ", ".join(parts) + "."
        elif plan.unchanged > 0:
            message = "Dane z aplikacji są już aktualne w arkuszu."
        elif not plan.updates and not plan.appends and plan.unchanged == 0:
            message = "Brak danych do wysłania."
        else:
            message = "Nie wprowadzono żadnych zmian w arkuszu."

        if plan.migrated:
            message = f"Arkusz '{sheet_name}' został zaktualizowany do nowego formatu. {message}"
        return message

    # ----- public API -----

    def sync_entries(self, entries: Sequence[DailyEntry]) -> ExportResult:
        """Upserts entries; raises typed errors on failure"""
        rows = self._unique_rows(entries)
        gateway = self._connect()
        logger.info(f"📤 Exporting {len(rows)} entr{'y' if len(rows) == 1 else 'ies'} to sheet '{gateway.title}'")
        plan = self.plan(gateway, rows)
        logger.info(f"Rows to update: {len(plan.updates)}, rows to append: {len(plan.appends)}, unchanged: {plan.unchanged}")
        result = self.commit(gateway, plan)
        logger.info(f"📊 Export finished. {result.message}")
        return result

    def export(self, entry: Optional[DailyEntry]) -> ExportResult:
        """Exports one entry and reports the outcome instead of raising"""
        if entry is None:
            return ExportResult(success=False, error="Brak danych dla wybranego dnia do wyeksportowania.", error_type='ValidationError')
        return self.export_entries([entry])

    def export_entries(self, entries: Sequence[DailyEntry]) -> ExportResult:
        try:
            return self.sync_entries(entries)
        except EunoiaError as e:
            logger.error(f"❌ Export failed ({type(e).__name__}): {e.message}")
            return ExportResult(success=False, error=e.message, error_type=type(e).__name__)

    @staticmethod
    def _unique_rows(entries: Sequence[DailyEntry]) -> List[List[Cell]]:
        by_date: Dict[str, List[Cell]] = {}
        for entry in entries:
            by_date[entry.date] = entry_to_row(entry)
        return [by_date[key] for key in sorted(by_date)]

    def fetch_all_rows(self) -> List[List[Any]]:
        """Whole worksheet (header first), for trend analysis"""
        gateway = self._connect(readonly=True)
        rows = gateway.read_range(ALL_VALUES_RANGE)
        logger.info(f"📥 Read {len(rows)} row(s) from sheet '{gateway.title}'")
        return rows

    def test_read(self, range_name: Optional[str] = None) -> TestReadResult:
        """Diagnostic read of a small range"""
        target = range_name or "A1:A1"
        try:
            gateway = self._connect(readonly=True)
            if "!" not in target:
                target = f"{quote_sheet_name(gateway.title)}!{target}"
            data = gateway.read_absolute_range(target)
        except EunoiaError as e:
            logger.error(f"❌ Test read of {target} failed: {e.message}")
            return TestReadResult(success=False, error=e.message, details=e.details)
        logger.info(f"🔎 Test read of {target} returned {len(data)} row(s)")
        return TestReadResult(success=True, data=data)
