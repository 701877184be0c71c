"""Inspect running timers and stop them for a user."""

from typing import Optional

import typer
from rich.table import Table

from projecthub.db.repositories import time_repo
from projecthub.errors import NotFound
from projecthub.utils.dates import ensure_utc, parse_datetime, utcnow

from .shared import console, logger


def check_timers(
    stop_user: Optional[str] = typer.Option(None, "--stop-user", help="Stop every running timer of this user ID"),
) -> None:
    """List running timers; optionally stop one user's timers."""
    log = logger.bind(command="check-timers")
    timers = time_repo.list_running_timers()
    log.info("check_timers.found", count=len(timers))

    table = Table(title=f"Running timers ({len(timers)})")
    table.add_column("Entry ID", style="cyan")
    table.add_column("User")
    table.add_column("Project ID", style="dim")
    table.add_column("Description")
    table.add_column("Started")
    table.add_column("Elapsed (s)", justify="right")
    now = utcnow()
    for timer in timers:
        started = parse_datetime(timer["startTime"])
        elapsed = int((now - ensure_utc(started)).total_seconds()) if started else 0
        user = timer["user"] or {}
        table.add_row(
            timer["id"],
            f"{user.get('name')} <{user.get('email')}>",
            timer["projectId"],
            timer["description"],
            timer["startTime"] or "",
            str(elapsed),
        )
    console.print(table)

    if stop_user:
        try:
            stopped = time_repo.stop_running_for_user(stop_user)
        except NotFound as e:
            console.print(f"[red]{e.message}: {stop_user}[/red]")
            raise typer.Exit(1) from e
        console.print(f"[green]Stopped {stopped} running timer(s) for {stop_user}.[/green]")
