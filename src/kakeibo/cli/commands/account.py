"""Account management commands."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount, parse_amount_or_exit
from kakeibo.domain.account import AccountService
from kakeibo.domain.entities import ACCOUNT_TYPES
from kakeibo.utils.date_parser import parse_date


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="bank", help="Account type (default: bank)"
)
@click.option("--opening-balance", default="0", help="Balance on the opening date (default: 0)")
@click.option("--opening-date", help="Date the account starts tracking from (YYYY-MM-DD)")
@click.pass_context
def create_account(ctx, name: str, account_type: str, opening_balance: str, opening_date: str | None):
    """Create a new account.

    Examples:
        kakeibo account create "Wallet" --type cash
        kakeibo account create "Main Bank" --opening-balance 100000 --opening-date 2024-01-01
    """
    service = AccountService(ctx.obj["db"])
    balance = parse_amount_or_exit(ctx, opening_balance, "opening balance")

    start = None
    if opening_date:
        try:
            start = parse_date(opening_date)
        except ValueError as e:
            click.echo(f"Error: Invalid opening date: {e}", err=True)
            ctx.exit(1)

    try:
        account_id = service.create_account(
            name=name, account_type=account_type, opening_balance=balance, opening_date=start
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
        click.echo(f"Opening balance: {format_amount(balance)}")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts with their current balances."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type:6s} | "
            f"Balance: {format_amount(acc.current_balance)}{status}"
        )


@account_group.command("set-opening")
@click.argument("account", metavar="ACCOUNT")
@click.option("--balance", "opening_balance", required=True, help="Opening balance")
@click.option("--date", "opening_date", help="Opening date (YYYY-MM-DD); omit to clear")
@click.pass_context
def set_opening(ctx, account: str, opening_balance: str, opening_date: str | None):
    """Change an account's opening balance and date, then recompute its balance.

    ACCOUNT can be an account name or ID.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    balance = parse_amount_or_exit(ctx, opening_balance, "opening balance")

    start = None
    if opening_date:
        try:
            start = parse_date(opening_date)
        except ValueError as e:
            click.echo(f"Error: Invalid opening date: {e}", err=True)
            ctx.exit(1)

    try:
        new_balance = service.update_opening(account_id, balance, start)
        click.echo(f"Updated opening state of account {account_id}")
        click.echo(f"Current balance: {format_amount(new_balance)}")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str):
    """Deactivate an account (its history is kept)."""
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.deactivate_account(account_id)
        click.echo(f"Deactivated account {account_id}")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
