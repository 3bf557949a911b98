#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for Notekeeper. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action init-db
    python run.py --action config
    python run.py --action token --user alice
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notekeeper.core.logging import get_logger, log_with_source, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "init-db", "config", "token", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
@click.option(
    "--user",
    default=None,
    help="User id to issue a token for (for token action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    user: str | None,
) -> None:
    """
    Notekeeper Entry Point.

    Run the API server, create the database schema, view configuration,
    or issue a development access token.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Create tables in the configured database
        python run.py --action init-db

        # View loaded configuration
        python run.py --action config

        # Issue a bearer token for local testing
        python run.py --action token --user alice
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "init-db":
        init_db(logger)
    elif action == "config":
        show_config(logger)
    elif action == "token":
        issue_token(logger, user)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server."""
    from notekeeper.core.config import get_server_address

    configured_host, configured_port = get_server_address()
    server_host = host or configured_host
    server_port = port or configured_port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notekeeper.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger) -> None:
    """Create the database schema for all models."""
    from notekeeper.core.database import create_schema, dispose_engine
    from notekeeper.core.exceptions import ApplicationError
    from sqlalchemy.exc import SQLAlchemyError

    async def _run() -> None:
        try:
            await create_schema()
        finally:
            await dispose_engine()

    try:
        asyncio.run(_run())
    except (SQLAlchemyError, ApplicationError, OSError) as e:
        logger.error("Schema creation failed", extra={"error": str(e)})
        click.echo(click.style(f"Error creating schema: {e}", fg="red"))
        sys.exit(1)

    log_with_source(logger, "cli", "info", "Database schema created")
    click.echo(click.style("Database schema created.", fg="green"))


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:\n")

    try:
        from notekeeper.core.config import get_app_config

        app_config = get_app_config()
        sections = {
            "Application Settings": app_config.application,
            "Database Settings": app_config.database,
            "Logging Settings": app_config.logging,
            "Security Settings": app_config.security,
            "Note Settings": app_config.notes,
        }

        for title, section in sections.items():
            click.echo(f"{title} (from YAML):")
            click.echo("-" * 40)
            _echo_mapping(section.model_dump(), indent=2)
            click.echo()

        logger.info("Configuration displayed successfully")

    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def _echo_mapping(values: dict, indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def issue_token(logger, user: str | None) -> None:
    """Print an access token for a user id."""
    if not user:
        click.echo(click.style("Error: --user is required for the token action.", fg="red"), err=True)
        sys.exit(2)

    from notekeeper.core.security import create_access_token

    token = create_access_token(user)
    logger.info("Access token issued", extra={"user_id": user})
    click.echo(token)


def show_info(logger) -> None:
    """Display application information."""
    from notekeeper.core.config import get_app_config

    app_settings = get_app_config().application
    click.echo(f"{app_settings.name}")
    click.echo("=" * 40)
    click.echo(f"Version: {app_settings.version}")
    click.echo(f"Description: {app_settings.description}")
    click.echo(f"Environment: {app_settings.environment}")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the API server")
    click.echo("  --action init-db  Create the database schema")
    click.echo("  --action config   Display configuration")
    click.echo("  --action token    Issue an access token (requires --user)")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
