"""Account lookup for command arguments."""

from __future__ import annotations

import click
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.domain.account import AccountService
from kakeibo.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Turn an ACCOUNT argument (name or ID) into an account ID.

    Unknown accounts end the command with "Error: ..." and exit code 1.
    """
    try:
        return resolve_account(account_service, account)
    except CLI_ERRORS as exc:
        handle_domain_error(ctx, exc)
