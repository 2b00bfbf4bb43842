# handlers/commands/analysis.py

import argparse
import asyncio

from handlers.utils import CommandContext


async def _run_analysis(ctx: CommandContext, prompt):
    service = ctx.analysis_factory()
    return await service.analyze_sheet(
        ctx.engine_factory(),
        ctx.today_date(),
        custom_prompt=prompt,
        days=ctx.config.analysis_days,
    )


def analyze_command(ctx: CommandContext, args: argparse.Namespace) -> int:
    prompt = " ".join(args.prompt) if args.prompt else None
    with ctx.busy_lock():
        result = asyncio.run(_run_analysis(ctx, prompt))

    if not result.success:
        ctx.echo(f"❌ Błąd analizy: {result.error}")
        return 1
    ctx.echo(f"🤖 {result.message}")
    ctx.echo()
    ctx.echo(result.analysis)
    return 0


def register_analysis_commands(subparsers) -> None:
    analyze = subparsers.add_parser("analyze", help="Trend analysis of the last 30 days in the sheet")
    analyze.add_argument("--prompt", nargs="+", help="Own question instead of the default one")
    analyze.set_defaults(func=analyze_command)
