"""CLI commands: one module per concern (serve, database, timers, users, import)."""

from typer import Typer

from projecthub.cli import db_commands, import_file, serve_mode, timers, users

app = Typer(help="ProjectHub: projects, time tracking and email timelines")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command(name="init-db")(db_commands.init_database)
    app.command()(db_commands.seed)
    app.command(name="check-timers")(timers.check_timers)
    app.command(name="check-users")(users.check_users)
    app.command(name="import-file")(import_file.import_file)


register_commands()
