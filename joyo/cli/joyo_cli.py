"""
Joyo CLI - terminal host for the kanji drill.

Drives the session engine with keyboard (pointer-equivalent) input and renders
it with rich. The engine itself does not depend on this module.

Usage:
    joyo study             # New & mixed cards
    joyo review            # Review mistakes
    joyo stats -s 安       # Card list with status, filtered
    joyo reset             # Forget all progress
    joyo replay poses.jsonl  # Run a landmark recording through gesture control
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import Settings, get_settings
from joyo.core.cards import Card, load_catalog
from joyo.core.errors import CatalogLoadError, GestureModeError
from joyo.core.modes import Screen
from joyo.delivery.scheduler import EventScheduler
from joyo.delivery.state_store import BlobStore, JsonFileBlobStore, MemoryBlobStore
from joyo.engine.context import SessionContext
from joyo.engine.dispatcher import ActionDispatcher, Control, enable_gesture_mode
from joyo.gesture.camera import GestureController
from joyo.gesture.confirmation import GestureConfirmationTimer
from joyo.gesture.landmarks import LandmarkSet
from joyo.study.stats import card_rows, summarize

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="joyo",
    help="漢 Joyo Kanji drill with hands-free pose control",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

OPTION_KEYS = {
    "1": Control.OPTION_1,
    "2": Control.OPTION_2,
    "3": Control.OPTION_3,
    "4": Control.OPTION_4,
}


def configure_logging(settings: Settings) -> None:
    """Route loguru output according to settings."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)


def build_context(settings: Settings, store: BlobStore | None = None) -> SessionContext:
    try:
        catalog = load_catalog(settings.catalog_path)
    except CatalogLoadError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    store = store if store is not None else JsonFileBlobStore(settings.data_dir)
    return SessionContext.from_settings(settings, store, catalog)


# =============================================================================
# Rendering
# =============================================================================


def _option_label(card: Card) -> str:
    return f"[bold blue]ON[/bold blue] {card.on_text}   [bold green]KUN[/bold green] {card.kun_text}"


def render_home(ctx: SessionContext) -> None:
    summary = summarize(ctx.tracker.record, ctx.catalog)
    table = Table(box=box.MINIMAL, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Mastered", f"{summary.mastered} / {summary.total} ({summary.mastered_percent:.0f}%)")
    table.add_row("Needs Review", f"{summary.needs_review}")
    console.print(Panel(table, title="[bold]常用漢字 Joyo Kanji Mastery[/bold]", border_style="blue"))


def render_card(ctx: SessionContext) -> None:
    session = ctx.session
    card = session.current_card
    header = f"Card {session.state.index + 1} / {len(session.queue)}"

    if session.state.flipped:
        body = Table(box=box.SIMPLE, show_header=True)
        body.add_column("On-yomi", style="blue")
        body.add_column("Kun-yomi", style="green")
        body.add_row(card.on_text, card.kun_text)
        examples = "  ".join(card.examples[:4])
        console.print(Panel(body, title=f"{header}  {card.display_char}", subtitle=examples))
    else:
        console.print(Panel(f"[bold]{card.display_char}[/bold]", title=header, padding=(1, 4)))

    if session.answered:
        if session.last_answer_correct:
            console.print("[green]✓ Correct! Great job. Keep it up![/green]")
        else:
            console.print("[red]✗ Incorrect. Review the correct reading above.[/red]")

    for i, option in enumerate(session.options, start=1):
        style = ""
        if session.answered and option.id == card.id:
            style = "green"
        elif session.answered and option.id == session.state.selected_option_id:
            style = "red"
        line = f"[{i}] {_option_label(option)}"
        console.print(f"[{style}]{line}[/{style}]" if style else line)


def render_complete(ctx: SessionContext) -> None:
    summary = ctx.session.summary()
    console.print(
        Panel(
            f"You've reviewed {summary.total} cards.\n"
            f"[green]{summary.correct} correct[/green]  [red]{summary.incorrect} incorrect[/red]",
            title="[bold]Session Complete![/bold]",
            border_style="green",
        )
    )


def render_stats(ctx: SessionContext, query: str = "") -> None:
    rows = card_rows(ctx.tracker.record, ctx.catalog, query)
    table = Table(title="Kanji List", box=box.SIMPLE_HEAVY)
    table.add_column("Char")
    table.add_column("On")
    table.add_column("Kun")
    table.add_column("Examples", overflow="ellipsis", max_width=40)
    table.add_column("Status")
    for row in rows:
        table.add_row(
            row.card.display_char,
            ", ".join(row.card.on),
            ", ".join(row.card.kun),
            ", ".join(row.card.examples),
            f"[{row.status.color}]{row.status.display_name}[/{row.status.color}]",
        )
    if rows:
        console.print(table)
    else:
        console.print(f'[dim]No Kanji found matching "{query}"[/dim]')


# =============================================================================
# Interactive Loop
# =============================================================================


def _run_quiz(ctx: SessionContext, start: Control) -> None:
    dispatcher = ActionDispatcher(ctx)
    dispatcher.on_pointer(start)
    if ctx.notice:
        console.print(f"[yellow]{ctx.notice}[/yellow]")
    if ctx.screen is not Screen.QUIZ:
        return

    while ctx.screen is Screen.QUIZ:
        ctx.scheduler.run_due()
        if ctx.session.complete:
            render_complete(ctx)
            return

        render_card(ctx)
        if ctx.session.answered:
            choice = Prompt.ask("[dim]n=next, f=flip, h=home[/dim]", default="n")
        else:
            choice = Prompt.ask("[dim]1-4=answer, f=flip, h=home[/dim]")
        choice = choice.strip().lower()

        if choice in OPTION_KEYS:
            dispatcher.on_pointer(OPTION_KEYS[choice])
            if ctx.session.answered:
                # Let the feedback show before the details flip in
                time.sleep(ctx.auto_flip_delay_ms / 1000)
        elif choice == "n":
            dispatcher.on_pointer(Control.NEXT)
        elif choice == "f":
            dispatcher.on_pointer(Control.FLIP)
        elif choice == "h":
            dispatcher.on_pointer(Control.HOME)


@app.command()
def study() -> None:
    """Start learning: new cards first, topped up with mistakes."""
    ctx = build_context(get_settings())
    render_home(ctx)
    _run_quiz(ctx, Control.START_LEARNING)


@app.command()
def review() -> None:
    """Review every card you have answered wrong."""
    ctx = build_context(get_settings())
    _run_quiz(ctx, Control.START_REVIEW)


@app.command()
def stats(
    search: Annotated[
        str, typer.Option("--search", "-s", help="Filter by char, reading or example")
    ] = "",
) -> None:
    """Show every card with its status."""
    ctx = build_context(get_settings())
    render_home(ctx)
    render_stats(ctx, search)


@app.command()
def reset(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Reset all progress."""
    if not force and not typer.confirm("Are you sure you want to reset all progress?"):
        console.print("Reset cancelled.")
        raise typer.Exit(0)
    ctx = build_context(get_settings())
    dispatcher = ActionDispatcher(ctx)
    dispatcher.on_pointer(Control.RESET)
    console.print(f"[green]{ctx.notice}[/green]")


# =============================================================================
# Gesture Replay
# =============================================================================


class RecordingCamera:
    """Camera source backed by a JSON-lines landmark recording."""

    def __init__(self, path: Path):
        self.path = path
        self._handle = open(path, encoding="utf-8")
        self.now_ms = 0.0
        self.exhausted = False

    def read(self) -> tuple[Any, int] | None:
        for line in self._handle:
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            self.now_ms = float(record["t"])
            return record.get("landmarks"), int(record["t"])
        self.exhausted = True
        return None

    def release(self) -> None:
        self._handle.close()


class RecordedLandmarks:
    """Landmark provider for recorded frames: the frame already is the landmark data."""

    def detect(self, frame: Any, timestamp_ms: int) -> LandmarkSet | None:
        if not frame:
            return None
        return LandmarkSet.from_mapping(frame)


@app.command()
def replay(
    recording: Annotated[Path, typer.Argument(help="JSON-lines file of {t, landmarks} frames")],
    persist: Annotated[
        bool, typer.Option("--persist", help="Write answers to your real progress")
    ] = False,
) -> None:
    """Feed a pose recording through gesture control and print what it triggers."""
    settings = get_settings()
    if not recording.exists():
        console.print(f"[red]Recording not found: {recording}[/red]")
        raise typer.Exit(1)

    ctx = build_context(settings, store=None if persist else MemoryBlobStore())
    dispatcher = ActionDispatcher(ctx)
    camera = RecordingCamera(recording)
    # Recording timestamps stand in for the wall clock
    ctx.scheduler = EventScheduler(clock=lambda: camera.now_ms)
    fired: list[tuple[int, str, str]] = []

    def on_confirmed(label):
        command = dispatcher.on_gesture(label)
        fired.append((int(camera.now_ms), label.value, command.action.value if command else "-"))

    controller = GestureController(
        camera_factory=lambda: camera,
        provider_factory=RecordedLandmarks,
        on_confirmed=on_confirmed,
        timer=GestureConfirmationTimer(hold_ms=settings.hold_ms, clock=lambda: camera.now_ms),
        thresholds=settings.get_pose_thresholds(),
    )
    if not enable_gesture_mode(controller, ctx):
        console.print(f"[red]{ctx.notice}[/red]")
        raise typer.Exit(1)

    try:
        while not camera.exhausted:
            controller.step_frame()
            controller.step_tick()
            ctx.scheduler.run_due()
    except GestureModeError as e:
        console.print(f"[red]{e.notice}[/red] ({e})")
        raise typer.Exit(1) from e
    finally:
        controller.disable()

    table = Table(title="Confirmed gestures", box=box.MINIMAL)
    table.add_column("t (ms)", justify="right")
    table.add_column("Pose")
    table.add_column("Action")
    for ts, label, action in fired:
        table.add_row(str(ts), label, action)
    console.print(table)
    console.print(f"Final screen: [bold]{ctx.screen.display_name}[/bold]")


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    run()
