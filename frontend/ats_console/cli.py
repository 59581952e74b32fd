"""
ATS console client

Command line front end for the candidate API: list, inspect, create and update
candidates and manage their documents.
"""
import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console

from ats_console.api import (
    MAX_FILE_SIZE,
    ApiError,
    CandidateApiService,
    format_file_size,
    guess_mime_type,
    is_valid_file_type,
)
from ats_console.config import ClientSettings
from ats_console.forms import candidate_form, to_payload
from ats_console.store import CandidateListStore
from ats_console.views import (
    STATUS_LABELS,
    candidate_panel,
    candidate_table,
    documents_table,
    pagination_line,
)

app = typer.Typer(
    name="ats-console",
    help="LTI ATS console client",
    add_completion=False,
)
console = Console()


def _api() -> CandidateApiService:
    settings = ClientSettings()
    return CandidateApiService(settings.ATS_API_URL, timeout=settings.ATS_API_TIMEOUT)


@app.callback()
def main():
    """Configure client logging from ``LOG_LEVEL``"""
    level = logging.getLevelName(ClientSettings().LOG_LEVEL.upper())
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level if isinstance(level, int) else logging.WARNING),
    )


@contextmanager
def _reporting_errors():
    try:
        yield
    except ApiError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        if isinstance(e.details, list):
            for detail in e.details:
                console.print(f"  [dim]{detail.get('field')}[/dim]: {detail.get('message')}")
        raise typer.Exit(1)


@app.command()
def health():
    """Check that the API server is up."""
    with _reporting_errors():
        body = _api().health_check()
    console.print(f"[green]✓[/green] {body.get('message')} (version {body.get('version')})")


@app.command("list")
def list_candidates(
    page: int = typer.Option(1, "--page", "-p"),
    limit: int = typer.Option(10, "--limit", "-l"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Match name or email"),
    status: Optional[str] = typer.Option(None, "--status", help=", ".join(STATUS_LABELS)),
    sort_by: str = typer.Option("createdAt", "--sort-by", help="createdAt, lastName or email"),
    sort_order: str = typer.Option("desc", "--sort-order", help="asc or desc"),
):
    """List candidates."""
    store = CandidateListStore(
        _api(),
        {
            "page": page,
            "limit": limit,
            "search": search,
            "status": status,
            "sortBy": sort_by,
            "sortOrder": sort_order,
        },
    )
    with _reporting_errors():
        candidates = store.fetch()

    if not candidates:
        console.print("[yellow]No candidates found.[/yellow]")
        return
    console.print(candidate_table(candidates))
    console.print(pagination_line(store.pagination))


@app.command()
def show(candidate_id: int = typer.Argument(..., help="Candidate ID")):
    """Show a candidate with education, experience and documents."""
    with _reporting_errors():
        body = _api().get_candidate(candidate_id)
    console.print(candidate_panel(body["data"]))


@app.command()
def create(
    first_name: Optional[str] = typer.Option(None, "--first-name"),
    last_name: Optional[str] = typer.Option(None, "--last-name"),
    email: Optional[str] = typer.Option(None, "--email"),
    phone: Optional[str] = typer.Option(None, "--phone"),
    address: Optional[str] = typer.Option(None, "--address"),
    notes: Optional[str] = typer.Option(None, "--notes"),
    from_file: Optional[Path] = typer.Option(
        None, "--from-file", help="JSON file with the candidate, education and experience"
    ),
):
    """Create a candidate."""
    created = {}

    def submit(values):
        with _reporting_errors():
            created.update(_api().create_candidate(to_payload(values))["data"])

    form = candidate_form(on_submit=submit)
    if from_file:
        form.set_values(json.loads(from_file.read_text(encoding="utf-8")))
    options = {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "phone": phone,
        "address": address,
        "notes": notes,
    }
    form.set_values({key: value for key, value in options.items() if value is not None})

    if not form.submit():
        for field, message in form.errors.items():
            console.print(f"[red]{field}[/red]: {message}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Created candidate #{created['id']}")
    console.print(candidate_panel(created))


@app.command("set-status")
def set_status(
    candidate_id: int = typer.Argument(..., help="Candidate ID"),
    status: str = typer.Argument(..., help=", ".join(STATUS_LABELS)),
):
    """Change a candidate's status."""
    with _reporting_errors():
        body = _api().update_candidate(candidate_id, {"status": status})
    console.print(f"[green]✓[/green] Candidate #{candidate_id} is now {STATUS_LABELS.get(body['data']['status'])}")


@app.command()
def delete(
    candidate_id: int = typer.Argument(..., help="Candidate ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a candidate and all of its documents."""
    if not yes and not typer.confirm(f"Delete candidate #{candidate_id}?"):
        raise typer.Abort()
    with _reporting_errors():
        body = _api().delete_candidate(candidate_id)
    console.print(f"[green]✓[/green] {body.get('message')}")


@app.command()
def upload(
    candidate_id: int = typer.Argument(..., help="Candidate ID"),
    path: Path = typer.Argument(..., help="PDF or DOCX file"),
    document_type: str = typer.Option("cv", "--type", "-t"),
):
    """Upload a document for a candidate."""
    if not path.is_file():
        console.print(f"[red]Error: File does not exist: {path}[/red]")
        raise typer.Exit(1)

    mime_type = guess_mime_type(path.name)
    if not is_valid_file_type(mime_type):
        console.print("[red]Error: Only PDF and DOCX files are accepted.[/red]")
        raise typer.Exit(1)
    size = path.stat().st_size
    if size > MAX_FILE_SIZE:
        console.print(
            f"[red]Error: File is {format_file_size(size)}; "
            f"the limit is {format_file_size(MAX_FILE_SIZE)}.[/red]"
        )
        raise typer.Exit(1)

    with _reporting_errors():
        body = _api().upload_document(
            candidate_id, path.name, path.read_bytes(), mime_type=mime_type, document_type=document_type
        )
    document = body["data"]
    console.print(
        f"[green]✓[/green] Uploaded {document['originalName']} "
        f"({format_file_size(document['fileSize'])}) as document #{document['id']}"
    )


@app.command()
def documents(candidate_id: int = typer.Argument(..., help="Candidate ID")):
    """List a candidate's documents."""
    with _reporting_errors():
        body = _api().get_candidate_documents(candidate_id)
    if not body.get("data"):
        console.print("[yellow]No documents.[/yellow]")
        return
    console.print(documents_table(body["data"]))


@app.command("delete-document")
def delete_document(
    candidate_id: int = typer.Argument(..., help="Candidate ID"),
    document_id: int = typer.Argument(..., help="Document ID"),
):
    """Delete one of a candidate's documents."""
    with _reporting_errors():
        body = _api().delete_document(candidate_id, document_id)
    console.print(f"[green]✓[/green] {body.get('message')}")


if __name__ == "__main__":
    app()
