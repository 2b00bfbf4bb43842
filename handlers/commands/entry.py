# handlers/commands/entry.py

import argparse
import sys

from models.enums import NoteField, THEME_ORDER
from models.questions import ANSWER_LABELS, questions_for, parse_score_token, theme_label
from core.exceptions import ValidationError
from handlers.utils import CommandContext, format_entry, parse_question_index


def show_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    entry = ctx.journal.get_entry(ctx.resolve_date(args.date))
    ctx.echo(format_entry(entry, detailed=not args.brief))
    return 0


def score_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    try:
        score = parse_score_token(args.value)
    except ValueError as e:
        raise ValidationError(str(e))
    index = parse_question_index(args.question)
    entry = ctx.journal.set_question_score(ctx.resolve_date(args.date), args.theme, index, score)
    ctx.echo(f"✅ {theme_label(args.theme)} #{index + 1}: {score:+.2f} "
             f"(wynik pryzmatu {entry.scores[args.theme]:+.2f}, nastrój {entry.mood.category.value})")
    return 0


def clear_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    index = parse_question_index(args.question)
    entry = ctx.journal.clear_question_score(ctx.resolve_date(args.date), args.theme, index)
    ctx.echo(f"🧹 {theme_label(args.theme)} #{index + 1} wyczyszczone "
             f"(wynik pryzmatu {entry.scores[args.theme]:+.2f})")
    return 0


def note_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    text = " ".join(args.text)
    entry = ctx.journal.set_note(ctx.resolve_date(args.date), args.field, text)
    ctx.echo(f"📝 Zapisano notatkę '{args.field}' dla {entry.date}")
    return 0


def dictate_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Final transcript arrives on stdin and is appended to the note"""
    stream = args.input if args.input is not None else sys.stdin
    transcript = stream.read()
    entry = ctx.journal.append_transcript(ctx.resolve_date(args.date), args.field, transcript)
    if not transcript.strip():
        ctx.echo("ℹ️ Pusta transkrypcja, notatka bez zmian")
    else:
        ctx.echo(f"🎙️ Dodano transkrypcję do '{args.field}' dla {entry.date}")
    return 0


def questions_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    themes = [args.theme] if args.theme else THEME_ORDER
    for theme in themes:
        ctx.echo(f"{theme_label(theme)} ({theme})")
        labels = ANSWER_LABELS.get(theme, [])
        for index, question in enumerate(questions_for(theme)):
            line = f"  {index + 1}. {question}"
            if index < len(labels):
                option = labels[index]
                line += f"  [- {option.negative} | 0 {option.neutral} | + {option.positive}]"
            ctx.echo(line)
    return 0


def register_entry_commands(subparsers) -> None:
    show = subparsers.add_parser("show", help="Show the entry for a day")
    show.add_argument("date", nargs="?", help="YYYY-MM-DD, defaults to today")
    show.add_argument("--brief", action="store_true", help="Theme totals only")
    show.set_defaults(func=show_command)

    score = subparsers.add_parser("score", help="Answer one question")
    score.add_argument("date")
    score.add_argument("theme", choices=THEME_ORDER)
    score.add_argument("question", help="Question number 1-8")
    score.add_argument("value", help="'-', '0', '+' or -0.25 / 0 / 0.25")
    score.set_defaults(func=score_command)

    clear = subparsers.add_parser("clear", help="Mark a question as unanswered")
    clear.add_argument("date")
    clear.add_argument("theme", choices=THEME_ORDER)
    clear.add_argument("question", help="Question number 1-8")
    clear.set_defaults(func=clear_command)

    note = subparsers.add_parser("note", help="Replace a note")
    note.add_argument("date")
    note.add_argument("field", choices=[f.value for f in NoteField])
    note.add_argument("text", nargs="*")
    note.set_defaults(func=note_command)

    dictate = subparsers.add_parser("dictate", help="Append a dictated transcript read from stdin")
    dictate.add_argument("date")
    dictate.add_argument("field", choices=[f.value for f in NoteField])
    dictate.set_defaults(func=dictate_command, input=None)

    questions = subparsers.add_parser("questions", help="List questions and answer options")
    questions.add_argument("theme", nargs="?", choices=THEME_ORDER)
    questions.set_defaults(func=questions_command)
