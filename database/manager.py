# database/manager.py

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, List

from core.exceptions import StorageError, ValidationError
from models.mood import DailyEntry, validate_date_key

logger = logging.getLogger(__name__)


class EntryStore:
    """Local collection of daily entries kept in one JSON file keyed by date"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    # ===== FILE I/O =====

    def _read_all(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise StorageError(f"Cannot read journal file {self.path}: {e}")

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Journal file {self.path} is corrupted: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Journal file {self.path} has unexpected format")
        return data

    def _write_all(self, data: Dict[str, Dict[str, Any]]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Cannot save journal file {self.path}: {e}")

    # ===== PUBLIC API =====

    def get(self, entry_date: str) -> DailyEntry:
        """Stored entry for the day or a fresh zero entry (not saved yet)"""
        key = validate_date_key(entry_date)
        with self._lock:
            raw = self._read_all().get(key)
        if raw is None:
            logger.debug(f"No entry for {key}, creating an empty one")
            return DailyEntry.create_empty(key)
        try:
            return DailyEntry.from_dict({**raw, 'date': key})
        except (KeyError, TypeError, AttributeError) as e:
            raise StorageError(f"Stored entry for {key} is malformed: {e}")

    def put(self, entry: DailyEntry) -> None:
        """Replaces whatever was stored for entry.date"""
        with self._lock:
            data = self._read_all()
            data[entry.date] = entry.to_dict()
            self._write_all(data)
        logger.debug(f"💾 Entry {entry.date} saved")

    def list(self) -> List[DailyEntry]:
        with self._lock:
            data = self._read_all()
        entries = []
        for key, raw in data.items():
            try:
                entries.append(DailyEntry.from_dict({**raw, 'date': key}))
            except (KeyError, TypeError, AttributeError, ValidationError) as e:
                raise StorageError(f"Stored entry for {key} is malformed: {e}")
        return entries

    def exists(self, entry_date: str) -> bool:
        key = validate_date_key(entry_date)
        with self._lock:
            return key in self._read_all()
