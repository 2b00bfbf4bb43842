# handlers/commands/sync.py

import argparse
import json
import logging

from handlers.utils import CommandContext, format_export_result

logger = logging.getLogger(__name__)


def export_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Upserts one day, or every stored day with --all"""
    if args.all:
        entries = ctx.store.list()
        if not entries:
            ctx.echo("❌ Brak zapisanych dni do wyeksportowania.")
            return 1
    else:
        entry_date = ctx.resolve_date(args.date)
        if not ctx.store.exists(entry_date):
            logger.warning(f"⚠️ No stored entry for {entry_date}, exporting an empty day")
        entries = [ctx.store.get(entry_date)]

    with ctx.busy_lock():
        result = ctx.engine_factory().export_entries(entries)

    if args.json:
        ctx.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        ctx.echo(format_export_result(result))
    return 0 if result.success else 1


def test_read_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    result = ctx.engine_factory().test_read(args.range)
    if not result.success:
        ctx.echo(f"❌ Odczyt testowy nie powiódł się: {result.error}")
        return 1
    ctx.echo(json.dumps(result.data, ensure_ascii=False))
    return 0


def register_sync_commands(subparsers) -> None:
    export = subparsers.add_parser("export", help="Upsert entries into the Google Sheet")
    export.add_argument("date", nargs="?", help="YYYY-MM-DD, defaults to today")
    export.add_argument("--all", action="store_true", help="Export every stored day")
    export.add_argument("--json", action="store_true", help="Print the raw result")
    export.set_defaults(func=export_command)

    test_read = subparsers.add_parser("test-read", help="Read a small range to check access")
    test_read.add_argument("range", nargs="?", help="A1 range, defaults to A1:A1")
    test_read.set_defaults(func=test_read_command)
