# handlers/router.py

import argparse

from handlers.commands.analysis import register_analysis_commands
from handlers.commands.entry import register_entry_commands
from handlers.commands.sync import register_sync_commands


def register_commands(subparsers) -> None:
    """Attaches every command to the CLI"""
    register_entry_commands(subparsers)
    register_sync_commands(subparsers)
    register_analysis_commands(subparsers)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eunoia",
        description="Eunoia - daily mood journal with Google Sheets sync and AI trend analysis",
    )
    parser.add_argument("--config", action="store_true", help="Print the effective configuration and exit")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    register_commands(subparsers)
    return parser
