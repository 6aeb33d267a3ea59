"""Mini README: Entry point CLI for launching the Team Budget service.

This script exposes a Typer CLI with two commands: ``run`` starts the FastAPI
application with configurable host, port and production flags, and ``sports``
lists the registered sports with their cost fields. Settings come from
``TEAMBUDGET_`` environment variables when available.
"""

from __future__ import annotations

import typer
import uvicorn

from teambudget.configuration import get_settings
from teambudget.logging_utils import configure_root_logger, level_for_environment
from teambudget.sports import REGISTRY

cli = typer.Typer(help="Launch and manage the Team Budget service.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    # Browsers cannot open the 0.0.0.0 sentinel, so point them at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Team Budget on "
        f"{effective_host}:{effective_port}.\n"
        "API docs are available at "
        f"http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "teambudget.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def sports() -> None:
    """List registered sports and the cost fields that make up their totals."""

    for entry in REGISTRY.sports_list():
        config = REGISTRY.get_config(entry["key"])
        marker = " (default)" if entry["key"] == REGISTRY.default_key else ""
        typer.echo(f"{entry['icon']} {entry['name']} [{entry['key']}]{marker}")
        for expense_field in config.ordered_fields:
            counted = "" if expense_field.counts_toward_total else " (not counted)"
            typer.echo(f"    - {expense_field.label}{counted}")


if __name__ == "__main__":
    cli()
