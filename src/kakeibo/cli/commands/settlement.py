"""Settlement commands for deferred payables and receivables."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount, parse_amount_or_exit
from kakeibo.domain.account import AccountService
from kakeibo.domain.cash_settlement import CashSettlementService
from kakeibo.utils.date_parser import parse_date


def _settlement_target(ctx, account: str | None):
    if not account:
        return None
    return resolve_account_or_exit(ctx, AccountService(ctx.obj["db"]), account)


def _parse_date_or_exit(ctx, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)


@click.group()
def settlement_group():
    """Settle deferred transactions."""
    pass


@settlement_group.command("pay")
@click.argument("transaction_ids", nargs=-1, type=int, required=True)
@click.option("--account", help="Account the cash moved through (default: each transaction's own)")
@click.option("--date", "settlement_date", default="today", help="Settlement date (default: today)")
@click.pass_context
def pay(ctx, transaction_ids: tuple[int, ...], account: str | None, settlement_date: str):
    """Settle one or more transactions in full.

    Examples:
        kakeibo settlement pay 12 13 --account Bank
        kakeibo settlement pay 7 --date 2024-03-27
    """
    service = CashSettlementService(ctx.obj["db"])
    account_id = _settlement_target(ctx, account)
    parsed_date = _parse_date_or_exit(ctx, settlement_date)

    try:
        balances = service.settle(transaction_ids, account_id, parsed_date)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Settled {len(transaction_ids)} transaction(s) on {parsed_date}")
    _echo_balances(ctx, balances)


@settlement_group.command("partial")
@click.argument("transaction_id", type=int)
@click.argument("amount")
@click.option("--account", help="Account the cash moved through (default: the transaction's own)")
@click.option("--date", "settlement_date", default="today", help="Settlement date (default: today)")
@click.pass_context
def partial(ctx, transaction_id: int, amount: str, account: str | None, settlement_date: str):
    """Settle part of a transaction."""
    service = CashSettlementService(ctx.obj["db"])
    account_id = _settlement_target(ctx, account)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    parsed_date = _parse_date_or_exit(ctx, settlement_date)

    try:
        txn = service.settle_partial(transaction_id, parsed_amount, account_id, parsed_date)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Settled {format_amount(parsed_amount)} of transaction {txn.id}")
    click.echo(f"  Settled so far: {format_amount(txn.settled_amount)} / {format_amount(txn.total_amount)}")
    if txn.is_cash_settled:
        click.echo("  Fully settled")
    else:
        click.echo(f"  Remaining: {format_amount(txn.total_amount - txn.settled_amount)}")


@settlement_group.command("undo")
@click.argument("transaction_ids", nargs=-1, type=int, required=True)
@click.pass_context
def undo(ctx, transaction_ids: tuple[int, ...]):
    """Return transactions to the unsettled state."""
    service = CashSettlementService(ctx.obj["db"])

    try:
        balances = service.unsettle(transaction_ids)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Unsettled {len(transaction_ids)} transaction(s)")
    _echo_balances(ctx, balances)


@settlement_group.command("list")
@click.option("--settled", is_flag=True, help="Show settled transactions instead of open ones")
@click.pass_context
def list_settlements(ctx, settled: bool):
    """List payables and receivables grouped by account."""
    service = CashSettlementService(ctx.obj["db"])
    groups = service.list_groups(settled=settled)

    if not groups:
        click.echo("Nothing to settle." if not settled else "No settled transactions.")
        return

    for group in groups:
        label = "Payable" if group.kind == "payable" else "Receivable"
        click.echo(f"\n{label}: {group.account_name} ({format_amount(group.total_amount)})")
        click.echo("-" * 70)
        for item in group.items:
            amount = item.total_amount if settled else item.remaining_amount
            due = f"due {item.payment_date}" if item.payment_date else "no due date"
            click.echo(
                f"{item.transaction_id:5d} | {item.date} | {due:18s} | "
                f"{format_amount(amount):>12s} | {item.description or ''}"
            )


@settlement_group.command("overdue")
@click.pass_context
def overdue(ctx):
    """List unsettled transactions past their payment date."""
    service = CashSettlementService(ctx.obj["db"])
    items = service.list_overdue()

    if not items:
        click.echo("No overdue settlements.")
        return

    click.echo(f"\n{len(items)} overdue settlement(s):")
    click.echo("-" * 80)
    for item in items:
        click.echo(
            f"{item.transaction_id:5d} | due {item.payment_date} | {item.days_overdue:3d} days | "
            f"{item.account_name:15s} | {format_amount(item.remaining_amount):>12s} | "
            f"{item.description or ''}"
        )


def _echo_balances(ctx, balances: dict[int, int]) -> None:
    names = {acc.id: acc.name for acc in AccountService(ctx.obj["db"]).list_accounts()}
    for account_id, balance in balances.items():
        click.echo(f"  {names.get(account_id, account_id)}: {format_amount(balance)}")


def register_commands(cli):
    """Register settlement commands with main CLI."""
    cli.add_command(settlement_group, name="settlement")
