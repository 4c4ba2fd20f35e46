"""CLI error handling helpers."""

import click

from kakeibo.domain.errors import DomainError, StorageError

# Errors a command reports as "Error: ..." with exit code 1
CLI_ERRORS = (DomainError, StorageError)


def handle_domain_error(ctx: click.Context, error: DomainError | StorageError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
