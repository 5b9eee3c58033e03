"""Main CLI entry point."""

import click
from ledgerbook.database.factories import DB_PATH_ENV_VAR, create_sqlite_database
from ledgerbook.logging_config import configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    organization,
    account,
    transfer,
    schedule,
    adjustment,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Log engine activity to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerbook - Double-entry ledger for accounts, transfers and schedules.

    Track cash, vendor, credit card and customer accounts, record transfers
    between them, and generate transfers automatically from schedules.
    """
    ctx.ensure_object(dict)
    configure_logging("DEBUG" if verbose else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
organization.register_commands(cli)
account.register_commands(cli)
transfer.register_commands(cli)
schedule.register_commands(cli)
adjustment.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
