"""Inspect users and flag addresses stored more than once."""

from collections import Counter

from rich.table import Table

from projecthub.db.repositories import users_repo

from .shared import console, logger


def check_users() -> None:
    """Print every user; duplicate email addresses (case-insensitive) are highlighted."""
    users = users_repo.list_users()
    counts = Counter(u["email"].lower() for u in users)
    duplicates = sorted(email for email, n in counts.items() if n > 1)
    logger.bind(command="check-users").info("check_users.found", count=len(users), duplicates=len(duplicates))

    table = Table(title=f"Users ({len(users)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column("Threads", justify="right")
    table.add_column("Created")
    for user in sorted(users, key=lambda u: u["createdAt"] or ""):
        email = user["email"]
        style = "red" if email.lower() in duplicates else None
        table.add_row(
            user["id"],
            user["name"] or "",
            email,
            user["role"],
            str(len(user["emailParticipations"])),
            user["createdAt"] or "",
            style=style,
        )
    console.print(table)
    if duplicates:
        console.print(f"[red]Duplicate addresses: {', '.join(duplicates)}[/red]")
    else:
        console.print("[green]No duplicate addresses.[/green]")
