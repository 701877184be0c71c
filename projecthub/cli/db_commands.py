"""Database commands: create the schema, load demo data."""

import typer
from sqlalchemy import select

from projecthub.db import get_session, init_db, reset_db
from projecthub.db.models import User
from projecthub.db.seed_data import seed_demo_data

from .shared import console, logger


def init_database() -> None:
    """Create all tables (no-op for tables that already exist)."""
    init_db()
    logger.bind(command="init-db").info("init_db.done")
    console.print("[green]Database ready.[/green]")


def seed(
    reset: bool = typer.Option(False, "--reset", help="Drop and recreate every table before seeding"),
) -> None:
    """Load the demo data set (users, projects, email threads, timelines, tasks)."""
    log = logger.bind(command="seed", reset=reset)
    if reset:
        reset_db()
        console.print("[yellow]All tables dropped and recreated.[/yellow]")
    with get_session() as session:
        if session.scalars(select(User).limit(1)).first() is not None:
            console.print("[red]Database already has data; use --reset to reseed.[/red]")
            log.warning("seed.not_empty")
            raise typer.Exit(1)
        seed_demo_data(session)
    log.info("seed.done")
    console.print("[green]Demo data loaded.[/green]")
