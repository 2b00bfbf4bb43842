#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Eunoia Journal - daily mood journal

Seven themes of eight questions scored -/0/+, an overall mood category,
upsert sync into a Google Sheet and AI trend analysis over the last 30 days.
"""

import json
import logging
import sys
from typing import List, Optional

from config import AppConfig, load_config
from core.exceptions import ConfigurationError, EunoiaError
from database.manager import EntryStore
from handlers.router import build_parser
from handlers.utils import CommandContext
from services.ai_service import AnalysisService
from services.google_sheets import SheetSyncEngine
from services.journal_service import JournalService
from utils.logger import setup_logger

logger = logging.getLogger("eunoia")


def build_context(app_config: AppConfig, out=None) -> CommandContext:
    store = EntryStore(app_config.storage.path)
    return CommandContext(
        config=app_config,
        store=store,
        journal=JournalService(store),
        engine_factory=lambda: SheetSyncEngine(app_config.sheets),
        analysis_factory=lambda: AnalysisService(app_config.ai),
        out=out or sys.stdout,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config()
    except ConfigurationError as e:
        print(f"❌ Błąd konfiguracji: {e.message}", file=sys.stderr)
        return 1

    setup_logger(app_config)

    if args.config:
        print(json.dumps(app_config.to_dict(), ensure_ascii=False, indent=2))
        return 0
    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    ctx = build_context(app_config)
    try:
        return args.func(ctx, args)
    except EunoiaError as e:
        logger.error(f"❌ {type(e).__name__}: {e.message}")
        print(f"❌ {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("⌨️ Interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
