#!/usr/bin/env python3
"""
Command-line interface for the Gmail Fluent API.

This module provides a command-line interface using Typer for rendering
search queries and browsing a mailbox with stored credentials.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from gfa.auth import credentials_usable, load_credentials
from gfa.config import Settings, get_settings, load_settings
from gfa.filters import GmailFilter
from gfa.gmail import GmailClient

# Create Typer app
app = typer.Typer(
    name="Gmail Fluent API",
    help="Build Gmail search queries and browse a mailbox",
    add_completion=False,
)

# Rich console for pretty output
console = Console()

# Configure logger
logger = logging.getLogger(__name__)


@app.callback()
def configure(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (JSON)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
) -> None:
    """Load settings and configure logging."""
    settings = load_settings(config_file)
    level = (log_level or settings.app.log_level.value).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def apply_filters(
    search: GmailFilter,
    from_: Optional[List[str]] = None,
    to: Optional[List[str]] = None,
    label: Optional[List[str]] = None,
    is_: Optional[List[str]] = None,
    subject: Optional[str] = None,
    before: Optional[str] = None,
    after: Optional[str] = None,
    exact: Optional[str] = None,
    raw: Optional[str] = None,
) -> GmailFilter:
    """Apply command line filter options; repeated options are OR'ed."""
    if from_:
        search.from_(from_)
    if to:
        search.to(to)
    if label:
        search.label(label)
    if is_:
        search.is_(is_)
    if subject:
        search.subject(subject)
    if before:
        search.before(before)
    if after:
        search.after(after)
    if exact:
        search.match_exact(exact)
    if raw:
        search.raw_query(raw)
    return search


FROM_OPTION = typer.Option(None, "--from", help="Sender address (repeatable)")
TO_OPTION = typer.Option(None, "--to", help="Recipient address (repeatable)")
LABEL_OPTION = typer.Option(None, "--label", help="Label name (repeatable)")
IS_OPTION = typer.Option(None, "--is", help="State such as unread or starred (repeatable)")
SUBJECT_OPTION = typer.Option(None, "--subject", help="Words in the subject")
BEFORE_OPTION = typer.Option(None, "--before", help="Only mail before this date")
AFTER_OPTION = typer.Option(None, "--after", help="Only mail after this date")
EXACT_OPTION = typer.Option(None, "--exact", help="Exact phrase")
RAW_OPTION = typer.Option(None, "--raw", help="Raw query, overrides every other filter")


@app.command("query")
def render_query(
    from_: Optional[List[str]] = FROM_OPTION,
    to: Optional[List[str]] = TO_OPTION,
    label: Optional[List[str]] = LABEL_OPTION,
    is_: Optional[List[str]] = IS_OPTION,
    subject: Optional[str] = SUBJECT_OPTION,
    before: Optional[str] = BEFORE_OPTION,
    after: Optional[str] = AFTER_OPTION,
    exact: Optional[str] = EXACT_OPTION,
    raw: Optional[str] = RAW_OPTION,
) -> None:
    """Print the Gmail search query for the given filters."""
    try:
        search = apply_filters(
            GmailFilter(), from_, to, label, is_, subject, before, after, exact, raw
        )
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}", style="red")
        raise typer.Exit(code=1)

    console.print(search.render_query(), markup=False, highlight=False)


@app.command("messages")
def list_messages(
    from_: Optional[List[str]] = FROM_OPTION,
    to: Optional[List[str]] = TO_OPTION,
    label: Optional[List[str]] = LABEL_OPTION,
    is_: Optional[List[str]] = IS_OPTION,
    subject: Optional[str] = SUBJECT_OPTION,
    before: Optional[str] = BEFORE_OPTION,
    after: Optional[str] = AFTER_OPTION,
    exact: Optional[str] = EXACT_OPTION,
    raw: Optional[str] = RAW_OPTION,
    max_results: Optional[int] = typer.Option(None, "--max-results", "-n", help="Page size"),
    page_token: Optional[str] = typer.Option(None, "--page-token", help="Page to fetch"),
) -> None:
    """List one page of messages matching the filters."""
    try:
        client = GmailClient.from_settings(get_settings())
        resource = apply_filters(
            client.messages(), from_, to, label, is_, subject, before, after, exact, raw
        )
        if max_results:
            resource.max_results(max_results)
        page = resource.list(page_token)
    except Exception as e:
        logger.error(f"Failed to list messages: {e}")
        console.print(f"[bold red]Error:[/bold red] {str(e)}", style="red")
        raise typer.Exit(code=1)

    table = Table(title=f"Messages (page {page.page or 1}, about {page.total or 0} total)")
    table.add_column("Date", style="yellow")
    table.add_column("From", style="cyan")
    table.add_column("Subject", style="green")
    table.add_column("Attachments", style="magenta")

    for message in page:
        table.add_row(
            message.date.strftime("%Y-%m-%d %H:%M") if message.date else "",
            str(message.from_),
            message.subject,
            str(len(message.attachments)),
        )

    console.print(table)
    if page.next_page_token:
        console.print(f"Next page token: {page.next_page_token}", markup=False)


@app.command("labels")
def list_labels() -> None:
    """List the labels of the mailbox."""
    try:
        client = GmailClient.from_settings(get_settings())
        labels = client.labels().list()
    except Exception as e:
        logger.error(f"Failed to list labels: {e}")
        console.print(f"[bold red]Error:[/bold red] {str(e)}", style="red")
        raise typer.Exit(code=1)

    table = Table(title="Labels")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Type", style="yellow")
    table.add_column("Unread", style="magenta")

    for label in labels:
        table.add_row(
            label.id,
            label.name,
            str(label.type),
            str(label.messages_unread) if label.messages_unread is not None else "",
        )

    console.print(table)


@app.command("auth")
def check_auth() -> None:
    """Check whether the stored credentials can be used."""
    settings = get_settings()
    try:
        credentials = load_credentials(settings.auth)
    except Exception as e:
        console.print(f"[bold red]✗ Not authenticated:[/bold red] {str(e)}", style="red")
        raise typer.Exit(code=1)

    table = Table(title="Authentication Status")
    table.add_column("Token File", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Expires", style="yellow")
    table.add_column("Refresh Token", style="magenta")

    usable = credentials_usable(credentials)
    table.add_row(
        str(settings.auth.token_path),
        "✓ Valid" if usable else "✗ Invalid",
        credentials.expiry.isoformat() if credentials.expiry else "N/A",
        "Present" if credentials.refresh_token else "Missing",
    )
    console.print(table)

    if not usable:
        raise typer.Exit(code=1)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    settings: Settings = get_settings()

    table = Table(title=f"{settings.app.app_name} v{settings.app.version}")
    table.add_column("Component", style="cyan")
    table.add_column("Version/Status", style="green")

    table.add_row("Python", sys.version.split()[0])
    table.add_row("Environment", settings.app.environment.value)
    table.add_row("Log Level", settings.app.log_level.value)
    table.add_row("User", settings.gmail.user_id)
    table.add_row(
        "Pub/Sub Topic",
        settings.gmail.pub_sub_topic or "Not configured",
    )

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
