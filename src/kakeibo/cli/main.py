"""Main CLI entry point."""

import click
from kakeibo.database.factories import create_database
from kakeibo.logging_config import setup_logging

# Import and register all commands at module level
from kakeibo.cli.commands import (
    account,
    category,
    transaction,
    transfer,
    settlement,
    recurring,
    quick_entry,
    reconcile,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KAKEIBO_DB_PATH environment variable)",
    envvar="KAKEIBO_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="KAKEIBO_LOG_LEVEL",
    help="Log level (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Kakeibo - household ledger.

    Record income and expenses against accounts, settle card bills and
    advances later, and keep every account balance in sync with its
    transaction history.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(app_log_level=log_level)
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
transfer.register_commands(cli)
settlement.register_commands(cli)
recurring.register_commands(cli)
quick_entry.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
