"""Tests for the command line entry point."""

import io
from datetime import date

import pytest

import main
from config import load_config
from handlers.router import build_parser
from handlers.utils import CommandContext
from database.manager import EntryStore
from services.ai_service import AnalysisService
from services.google_sheets import SheetSyncEngine
from services.journal_service import JournalService
from services.sheet_layout import SHEET_HEADERS

from conftest import FakeGateway, FakeOpenAIClient


@pytest.fixture
def cli(tmp_path, sheets_config):
    """Runs a command line against a temporary journal and an in-memory sheet"""
    config = load_config({'DATA_DIR': str(tmp_path)})
    config.sheets = sheets_config
    store = EntryStore(config.storage.path)
    gateway = FakeGateway()
    out = io.StringIO()
    ctx = CommandContext(
        config=config,
        store=store,
        journal=JournalService(store),
        engine_factory=lambda: SheetSyncEngine(config.sheets, gateway_factory=lambda c, readonly: gateway),
        analysis_factory=lambda: AnalysisService(config.ai, client=FakeOpenAIClient("Stabilnie.")),
        out=out,
        today=date(2024, 3, 1),
    )

    def run(*argv):
        args = build_parser().parse_args(list(argv))
        code = args.func(ctx, args)
        return code, out.getvalue()

    run.store = store
    run.gateway = gateway
    return run


def test_score_and_show(cli):
    code, _ = cli("score", "2024-03-01", "diet", "1", "+")
    assert code == 0
    assert cli.store.get("2024-03-01").get_answer("diet", 0) == 0.25

    code, output = cli("show", "2024-03-01")
    assert code == 0
    assert "Odżywianie: +0.25" in output
    assert "piątek" in output


def test_clear_command(cli):
    cli("score", "2024-03-01", "diet", "2", "-")
    code, _ = cli("clear", "2024-03-01", "diet", "2")
    assert code == 0
    assert cli.store.get("2024-03-01").get_answer("diet", 1) is None


def test_note_and_dictate(cli, monkeypatch):
    cli("note", "2024-03-01", "positives", "Dobry", "trening")
    monkeypatch.setattr("sys.stdin", io.StringIO("i spacer\n"))
    code, _ = cli("dictate", "2024-03-01", "positives")
    assert code == 0
    assert cli.store.get("2024-03-01").positives == "Dobry trening i spacer"


def test_show_defaults_to_today(cli):
    code, output = cli("show", "--brief")
    assert code == 0
    assert "2024-03-01" in output


def test_questions_lists_answer_options(cli):
    code, output = cli("questions", "dreaming")
    assert code == 0
    assert "Sen (dreaming)" in output
    assert output.count("\n  ") == 8


def test_export_writes_to_sheet(cli):
    cli("score", "2024-03-01", "training", "1", "+")
    code, output = cli("export", "2024-03-01")
    assert code == 0
    assert "1 wiersz(y) dodano" in output
    assert cli.gateway.rows[0] == SHEET_HEADERS

    code, output = cli("export", "2024-03-01")
    assert code == 0
    assert "Dane z aplikacji są już aktualne w arkuszu." in output


def test_export_all_with_empty_journal_fails(cli):
    code, output = cli("export", "--all")
    assert code == 1


def test_analyze_prints_model_output(cli):
    cli("export", "2024-03-01")
    code, output = cli("analyze", "--prompt", "Jak", "śpię?")
    assert code == 0
    assert "Stabilnie." in output


def test_main_reports_validation_errors(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.delenv("LOG_TO_FILE", raising=False)
    code = main.main(["score", "2024-03-01", "diet", "9", "+"])
    assert code == 1
    assert "between 1 and 8" in capsys.readouterr().err


def test_main_without_command_prints_help(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    assert main.main([]) == 1
