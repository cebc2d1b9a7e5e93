"""Command-line interface: dashboard, editor, and insights views."""

import asyncio
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mindmate.app import AppState
from mindmate.client import AnalysisClient
from mindmate.config import MindMateConfig, load_config, merge_cli_overrides
from mindmate.errors import MindMateError
from mindmate.insights import dashboard_stats, local_day, mood_category, mood_timeline
from mindmate.models import Analysis, View
from mindmate.store import EntryStore, FileKeyValueStore

app = typer.Typer(
    name="mindmate",
    help="Write journal entries and get AI feedback on mood and thought patterns.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from mindmate import __version__

        console.print(f"mindmate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .mindmate.toml file."),
    ] = None,
    data_dir: Annotated[
        Optional[Path],
        typer.Option("--data-dir", help="Directory holding saved entries."),
    ] = None,
    api_url: Annotated[
        Optional[str],
        typer.Option("--api-url", help="Analysis endpoint URL."),
    ] = None,
    api_timeout: Annotated[
        Optional[float],
        typer.Option("--api-timeout", min=0, help="Analysis request timeout in seconds."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """MindMate - AI-assisted journaling."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_config(config_path)
    ctx.obj = merge_cli_overrides(
        config, data_dir=data_dir, api_url=api_url, api_timeout=api_timeout
    )


def build_store(config: MindMateConfig) -> EntryStore:
    return EntryStore(FileKeyValueStore(config.storage.path), key=config.storage.key)


def build_client(config: MindMateConfig) -> AnalysisClient:
    return AnalysisClient(config.api)


def _start(ctx: typer.Context, view: View) -> tuple[MindMateConfig, AppState]:
    config: MindMateConfig = ctx.obj or load_config()
    state = AppState.start(build_store(config))
    state.set_view(view)
    return config, state


def _fmt_day(value: date | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:%A, %B} {value.day}, {value.year}"


def _truncate(text: str, width: int = 60) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= width else flat[: width - 1] + "…"


def _render_analysis(analysis: Analysis) -> None:
    """Print the analysis cards shown after a successful analyze."""
    color = mood_category(analysis.mood).color
    console.print(Panel(escape(analysis.mood), title="Mood", border_style=color))
    console.print(Panel(escape(analysis.summary), title="Summary", border_style="blue"))
    console.print(Panel(escape(analysis.tip), title="Wellness Tip", border_style="green"))

    if analysis.cognitive_distortions:
        lines = [
            "Being aware of thought patterns is the first step to reframing them. "
            "Here's what we spotted:",
            "",
        ]
        for d in analysis.cognitive_distortions:
            lines.append(f"[bold]{escape(d.name)}[/bold]")
            if d.example:
                lines.append(f'  [italic]"{escape(d.example)}"[/italic]')
            if d.explanation:
                lines.append(f"  {escape(d.explanation)}")
        console.print(
            Panel("\n".join(lines), title="Thought Patterns Noticed", border_style="dark_orange")
        )

    console.print(
        Panel(escape(analysis.reflection_prompt), title="Next Reflection", border_style="magenta")
    )


@app.command()
def dashboard(ctx: typer.Context) -> None:
    """Show entry stats, the latest reflection prompt, and recent entries."""
    _config, state = _start(ctx, View.DASHBOARD)
    stats = dashboard_stats(state.entries)

    if stats.latest_reflection_prompt:
        console.print(
            Panel(
                escape(stats.latest_reflection_prompt),
                title="A prompt for your next reflection",
                border_style="magenta",
            )
        )

    console.print(f"[bold]Total Entries:[/bold] {stats.total_entries}")
    console.print(f"[bold]Last Entry:[/bold] {_fmt_day(stats.last_entry_date)}")
    console.print()

    if not stats.recent_entries:
        console.print("[yellow]You have no journal entries yet.[/yellow]")
        console.print("Write your first entry with: mindmate write")
        return

    table = Table(title="Recent Entries")
    table.add_column("Date")
    table.add_column("Mood")
    table.add_column("Entry")
    for entry in stats.recent_entries:
        color = mood_category(entry.analysis.mood).color
        table.add_row(
            _fmt_day(local_day(entry)),
            f"[{color}]{escape(entry.analysis.mood)}[/{color}]",
            escape(_truncate(entry.text)),
        )
    console.print(table)


@app.command()
def write(
    ctx: typer.Context,
    text: Annotated[
        Optional[str],
        typer.Argument(help="Entry text. Read from stdin or prompted for when omitted."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Save without asking."),
    ] = False,
) -> None:
    """Write an entry, analyze it, and save it."""
    config, state = _start(ctx, View.EDITOR)

    if text is None:
        if not sys.stdin.isatty():
            text = sys.stdin.read()
        else:
            text = typer.prompt("How are you feeling today?", default="", show_default=False)
    state.draft.text = text

    client = build_client(config)
    try:
        with console.status("Analyzing your thoughts..."):
            analysis = asyncio.run(state.analyze_draft(client))
    except MindMateError:
        console.print(f"[red]Error:[/red] {state.draft.error}")
        raise typer.Exit(1)

    console.print()
    console.print("[bold]Analysis Results[/bold]")
    _render_analysis(analysis)

    if not yes and not typer.confirm("Save this entry?", default=True):
        console.print("[yellow]Entry discarded.[/yellow]")
        return

    entry = state.save_draft()
    console.print(f"[green]Saved entry {entry.id}[/green]")


@app.command()
def insights(
    ctx: typer.Context,
    days: Annotated[
        int,
        typer.Option("--days", "-d", min=1, help="Size of the trailing window in days."),
    ] = 7,
) -> None:
    """Show the mood timeline for the last few days."""
    _config, state = _start(ctx, View.INSIGHTS)
    timeline = mood_timeline(state.entries, days=days)

    if not timeline:
        console.print(f"[yellow]No entries in the last {days} days.[/yellow]")
        return

    table = Table(title=f"Mood Timeline (Last {days} Days)")
    table.add_column("Day")
    table.add_column("Entries", justify="right")
    table.add_column("Moods")
    for day in timeline:
        moods = ", ".join(
            f"[{mood_category(m).color}]{escape(m)}[/{mood_category(m).color}] ×{n}"
            for m, n in day.moods.items()
        )
        table.add_row(f"{day.day:%b} {day.day.day}", str(day.total), moods)
    console.print(table)


if __name__ == "__main__":
    app()
