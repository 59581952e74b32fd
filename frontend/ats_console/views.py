"""
Rich renderables for candidates and documents
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ats_console.api import format_file_size
from ats_console.filters import ELLIPSIS, visible_pages

STATUS_LABELS = {
    "active": "Active",
    "in_review": "In Review",
    "hired": "Hired",
    "rejected": "Rejected",
    "archived": "Archived",
}

STATUS_STYLES = {
    "active": "blue",
    "in_review": "yellow",
    "hired": "green",
    "rejected": "red",
    "archived": "dim",
}


def status_label(status: str) -> Text:
    return Text(STATUS_LABELS.get(status, status), style=STATUS_STYLES.get(status, "dim"))


def format_date(value: Optional[Union[str, date, datetime]]) -> str:
    """``"2024-03-05T10:00:00Z"`` -> ``"5 Mar 2024"``; missing dates render as ``-``"""
    if not value:
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return f"{value.day} {value.strftime('%b %Y')}"


def _period(entry: Dict[str, Any]) -> str:
    end = "Present" if entry.get("isCurrent") else format_date(entry.get("endDate"))
    return f"{format_date(entry.get('startDate'))} - {end}"


def _full_name(candidate: Dict[str, Any]) -> str:
    return f"{candidate.get('firstName', '')} {candidate.get('lastName', '')}".strip()


def candidate_table(candidates: List[Dict[str, Any]]) -> Table:
    table = Table(title="Candidates")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Email")
    table.add_column("Status")
    table.add_column("Latest experience")
    table.add_column("CV")
    table.add_column("Added")

    for candidate in candidates:
        experience = (candidate.get("experience") or [None])[0]
        latest = f"{experience['position']} @ {experience['company']}" if experience else "-"
        table.add_row(
            str(candidate["id"]),
            _full_name(candidate),
            candidate.get("email", ""),
            status_label(candidate.get("status", "")),
            latest,
            "yes" if candidate.get("documents") else "-",
            format_date(candidate.get("createdAt")),
        )
    return table


def pagination_line(pagination: Dict[str, int]) -> Text:
    current = pagination.get("page", 1)
    text = Text()
    for page in visible_pages(current, pagination.get("totalPages", 0)):
        if page == ELLIPSIS:
            text.append(" ... ", style="dim")
        elif page == current:
            text.append(f" [{page}] ", style="bold")
        else:
            text.append(f" {page} ")
    text.append(f"  ({pagination.get('total', 0)} candidates)", style="dim")
    return text


def documents_table(documents: List[Dict[str, Any]]) -> Table:
    table = Table(title="Documents")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Uploaded")
    for document in documents:
        table.add_row(
            str(document["id"]),
            document.get("originalName", ""),
            document.get("documentType", ""),
            format_file_size(document.get("fileSize", 0)),
            format_date(document.get("uploadedAt")),
        )
    return table


def candidate_panel(candidate: Dict[str, Any]) -> Panel:
    """Full detail view: contact data, education, experience and documents"""
    summary = Table.grid(padding=(0, 2))
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Email", candidate.get("email", ""))
    summary.add_row("Phone", candidate.get("phone") or "-")
    summary.add_row("Address", candidate.get("address") or "-")
    summary.add_row("Status", status_label(candidate.get("status", "")))
    summary.add_row("Added", format_date(candidate.get("createdAt")))
    if candidate.get("notes"):
        summary.add_row("Notes", candidate["notes"])

    education = Table(title="Education")
    education.add_column("Institution")
    education.add_column("Degree")
    education.add_column("Period")
    for entry in candidate.get("education") or []:
        degree = ", ".join(filter(None, [entry.get("degree"), entry.get("fieldOfStudy")]))
        education.add_row(entry.get("institution", ""), degree or "-", _period(entry))

    experience = Table(title="Experience")
    experience.add_column("Company")
    experience.add_column("Position")
    experience.add_column("Period")
    for entry in candidate.get("experience") or []:
        experience.add_row(entry.get("company", ""), entry.get("position", ""), _period(entry))

    return Panel(
        Group(summary, education, experience, documents_table(candidate.get("documents") or [])),
        title=f"#{candidate['id']} {_full_name(candidate)}",
    )
