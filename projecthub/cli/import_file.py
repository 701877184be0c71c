"""Import an email thread from a JSON file through the same pipeline as POST /api/email-import."""

import json
from pathlib import Path

import typer
from pydantic import ValidationError

from projecthub.errors import ApiError
from projecthub.models.email_import import EmailImportRequest
from projecthub.services.importer import import_email_thread

from .shared import console, logger


def import_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with {source, data, options}"),
    timeline: bool = typer.Option(False, "--timeline", help="Generate a timeline after import"),
    allow_duplicate: bool = typer.Option(False, "--allow-duplicate", help="Skip the duplicate thread check"),
) -> None:
    """Import one email thread from a JSON file."""
    log = logger.bind(command="import-file", path=str(path))
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        request = EmailImportRequest.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Invalid import file: {e}[/red]")
        log.error("import_file.invalid", error=str(e))
        raise typer.Exit(1) from e

    if timeline:
        request.options.auto_generate_timeline = True
    if allow_duplicate:
        request.options.allow_duplicate = True

    try:
        result = import_email_thread(request)
    except ApiError as e:
        console.print(f"[red]{e.status_code} {e.message}[/red]")
        for detail in e.details or []:
            console.print(f"  - {detail}")
        if e.extra:
            console.print(f"  {e.extra}")
        log.warning("import_file.rejected", status=e.status_code, error=e.message)
        raise typer.Exit(1) from e

    thread = result["thread"]
    console.print(f"[green]{result['message']}[/green]")
    console.print(f"  Thread: {thread['id']} ({thread['threadId']})")
    console.print(f"  Subject: {thread['subject']}")
    console.print(f"  Messages imported: {result['importedMessages']}")
    if result["timeline"]:
        console.print(f"  Timeline: {result['timeline']['id']} ({len(result['timeline']['events'])} events)")
