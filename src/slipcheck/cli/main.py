"""Main CLI entry point."""

import dataclasses

import click

from slipcheck.config import AppConfig, configure_logging
from slipcheck.database.factories import create_database
from slipcheck.domain.errors import ConfigurationError

# Import and register all commands at module level
from slipcheck.cli.commands import (
    settings,
    donations,
    verify,
    serve,
    donate,
    promptpay,
)

# Commands that never touch the ledger
LOCAL_COMMANDS = {"donate", "gate"}


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides SLIPCHECK_DB_PATH environment variable)",
    envvar="SLIPCHECK_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="SLIPCHECK_DATABASE_URL",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="SLIPCHECK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str):
    """Slipcheck - donation slip verification.

    Verifies PromptPay transfer slips with Slip2Go, records accepted
    donations and manages the donation settings.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    try:
        config = AppConfig.from_env()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    config = dataclasses.replace(
        config,
        database_path=db_path or config.database_path,
        database_url=database_url or config.database_url,
        log_level=log_level.upper(),
    )
    ctx.obj["config"] = config

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and ctx.invoked_subcommand not in LOCAL_COMMANDS:
        db = create_database(config.database_url, config.database_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
settings.register_commands(cli)
donations.register_commands(cli)
verify.register_commands(cli)
serve.register_commands(cli)
donate.register_commands(cli)
promptpay.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
