from __future__ import annotations
import logging
import time
from contextlib import contextmanager
from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.text import Text

from trackwork.errors import TrackWorkError
from trackwork.logutil import setup_logging
from trackwork.models import WorkRecord, now_local
from trackwork.report import filter_month, format_hm, format_hms, render
from trackwork.settings import get_settings, resolve_storage_path
from trackwork.store import RecordStore

log = logging.getLogger(__name__)

# seconds between redraws in `live`
LIVE_TICK = 1.0

app = typer.Typer(
    add_completion=False, no_args_is_help=True, help="A simple work tracker."
)
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


@app.callback()
def main(
    ctx: typer.Context,
    file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="Storage file (overrides TRACK_WORK_FILE and the default location)",
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Print debugging information"
    ),
):
    settings = get_settings()
    setup_logging(logging.DEBUG if debug else settings.log_level)
    log.debug("options: file=%r debug=%r settings=%r", file, debug, settings)
    ctx.obj = {"file": file, "settings": settings}


@contextmanager
def _reported_errors():
    try:
        yield
    except TrackWorkError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=e.exit_code)


def _store(ctx: typer.Context) -> RecordStore:
    path = resolve_storage_path(ctx.obj["file"], ctx.obj["settings"])
    return RecordStore(path)


def _print_report(
    records: Iterable[WorkRecord],
    month: int = 0,
    all_: bool = False,
    uncompressed: bool = False,
) -> None:
    now = now_local()
    if not all_:
        records = filter_month(records, month, now.date())
    for line in render(records, now, uncompressed):
        console.print(line, markup=False)


@app.command()
def start(
    ctx: typer.Context,
    objective: str = typer.Argument("", help="What this session is about"),
):
    """Start tracking work now."""
    with _reported_errors():
        store = _store(ctx)
        record = store.start(objective)
        console.print(
            f"[green]Tracking work started at {record.start:%Y-%m-%d %H:%M}[/green]"
        )
        _print_report(store.read())


app.command("now", hidden=True)(start)


@app.command()
def stop(
    ctx: typer.Context,
    objective: str = typer.Argument(
        "", help="Replace the session's objective when closing it"
    ),
):
    """Stop the currently tracked session."""
    with _reported_errors():
        store = _store(ctx)
        record = store.stop(objective or None)
        console.print(
            f"[green]Tracking finished at {record.end:%Y-%m-%d %H:%M}"
            f" ({format_hm(record.duration())})[/green]"
        )
        _print_report(store.read())


@app.command()
def live(
    ctx: typer.Context,
    objective: str = typer.Argument("", help="What this session is about"),
):
    """Show the running session's duration; Ctrl-C stops the session."""
    with _reported_errors():
        store = _store(ctx)
        record = store.current()
        if record is None:
            record = store.start(objective)
            console.print(f"Tracking work starting now {record.start:%Y-%m-%d %H:%M}")
        else:
            console.print(f"Tracking work started at {record.start:%Y-%m-%d %H:%M}")

        try:
            with Live(console=console, auto_refresh=False) as view:
                while True:
                    elapsed = now_local() - record.start
                    view.update(Text(f"Duration: {format_hms(elapsed)}"), refresh=True)
                    time.sleep(LIVE_TICK)
        except KeyboardInterrupt:
            pass

        store.stop(objective or None)
        console.print("Tracking finished")
        _print_report(store.read())


@app.command()
def info(
    ctx: typer.Context,
    month: int = typer.Option(
        0, "--month", "-m", min=0, help="Show data from <month> months ago"
    ),
    all_: bool = typer.Option(False, "--all", "-a", help="Show all tracked dates"),
    uncompressed: bool = typer.Option(
        False,
        "--uncompressed",
        "-u",
        help="One line per session instead of one line per day",
    ),
):
    """Display time worked; defaults to the current month, one line per day."""
    with _reported_errors():
        store = _store(ctx)
        _print_report(store.records(), month, all_, uncompressed)


app.command("report", hidden=True)(info)


if __name__ == "__main__":
    app()
