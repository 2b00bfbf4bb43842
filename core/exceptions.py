#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Eunoia Journal - Exceptions
Error taxonomy shared by storage, sheet sync and analysis
"""

from typing import Optional


class EunoiaError(Exception):
    """Base error; every subclass carries a single human-readable message"""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(EunoiaError):
    """Missing or malformed settings; raised before any I/O"""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class ValidationError(EunoiaError):
    """Invalid user input (date, theme, question index, score)"""
    pass


class StorageError(EunoiaError):
    """Local persistence failure"""
    pass


# ===== REMOTE SHEET =====

class SheetError(EunoiaError):
    """Base class for remote sheet failures"""
    pass


class SheetAuthError(SheetError):
    """Service account credentials were rejected"""
    pass


class SheetPermissionError(SheetError):
    """The service account lacks access to the spreadsheet"""
    pass


class SheetNotFoundError(SheetError):
    """Spreadsheet or worksheet does not exist"""
    pass


class SheetIOError(SheetError):
    """Generic network/protocol failure, message passed through"""
    pass


class SheetUpdateError(SheetIOError):
    """The batch update half of a commit failed"""
    pass


class SheetAppendError(SheetIOError):
    """The append half of a commit failed"""
    pass


class SchemaDriftError(SheetError):
    """Remote header row no longer matches the expected layout.

    Used internally to trigger the clear-and-rewrite migration; it is never
    surfaced to the caller as a failure.
    """

    def __init__(self, expected: list, found: list):
        super().__init__(
            f"Header mismatch: expected {len(expected)} columns, found {len(found)}"
        )
        self.expected = expected
        self.found = found


# ===== ANALYSIS =====

class AnalysisError(EunoiaError):
    """Trend analysis could not be produced"""
    pass


class BusyError(EunoiaError):
    """Another export or analysis is already running"""
    pass
