"""Transaction commands: add, list, show and delete."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount, parse_lines_or_exit
from kakeibo.domain.account import AccountService
from kakeibo.domain.category import CategoryService
from kakeibo.domain.transaction import TransactionService
from kakeibo.utils.date_parser import month_range, parse_date


def _parse_date_or_exit(ctx: click.Context, value: str, label: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--date", "txn_date", default="today", help="Accrual date (default: today)")
@click.option("--payment-date", help="Scheduled payment date for deferred transactions")
@click.option(
    "--line",
    "lines",
    type=(str, str),
    multiple=True,
    required=True,
    metavar="TYPE AMOUNT",
    help="Line as TYPE AMOUNT (income, expense, asset/advance, liability/loan); repeatable",
)
@click.option("--category", help="Category path applied to every line (e.g., 'Food > Groceries')")
@click.option("--description", help="Transaction description")
@click.option(
    "--cash-settled/--deferred",
    "is_cash_settled",
    default=True,
    help="Whether cash moved immediately (default) or settles later",
)
@click.option("--settlement-account", help="Account that settles the transaction, if different")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_date: str,
    payment_date: str | None,
    lines: tuple[tuple[str, str], ...],
    category: str | None,
    description: str | None,
    is_cash_settled: bool,
    settlement_account: str | None,
):
    """Add a transaction.

    Examples:
        kakeibo add --account Wallet --line expense 1200 --description "Lunch"
        kakeibo add --account Card --deferred --payment-date 2024-03-27 --line expense 5000
        kakeibo add --account Bank --line income 250000 --category "Salary"
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    category_service = CategoryService(db)
    service = TransactionService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    settlement_account_id = None
    if settlement_account:
        settlement_account_id = resolve_account_or_exit(ctx, account_service, settlement_account)

    accrual = _parse_date_or_exit(ctx, txn_date, "date")
    payment = _parse_date_or_exit(ctx, payment_date, "payment date") if payment_date else None

    category_id = None
    if category:
        try:
            category_id = category_service.require_category_by_path(category).id
        except CLI_ERRORS as e:
            handle_domain_error(ctx, e)

    line_inputs = parse_lines_or_exit(ctx, lines, category_id)

    try:
        transaction_id = service.create_transaction(
            account_id=account_id,
            date=accrual,
            payment_date=payment,
            lines=line_inputs,
            description=description,
            is_cash_settled=is_cash_settled,
            settlement_account_id=settlement_account_id,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    txn = service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Total: {format_amount(txn.total_amount)}")
    click.echo(f"  Status: {'settled' if txn.is_cash_settled else 'deferred'}")
    if description:
        click.echo(f"  Description: {description}")


@click.group()
def transaction_group():
    """View and delete transactions."""
    pass


@transaction_group.command("list")
@click.option("--account", help="Account name or ID (matches either side of a settlement)")
@click.option("--month", help="Month to show (YYYY-MM, this-month, last-month)")
@click.option("--unsettled", is_flag=True, help="Only transactions not yet cash settled")
@click.pass_context
def list_transactions(ctx, account: str | None, month: str | None, unsettled: bool):
    """List transactions in date order."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    start = end = None
    if month:
        try:
            start, end = month_range(month)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        involving_account_id=account_id,
        is_cash_settled=False if unsettled else None,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    names = {acc.id: acc.name for acc in account_service.list_accounts()}
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 90)
    for txn in transactions:
        status = "settled" if txn.is_cash_settled else f"open {format_amount(txn.total_amount - txn.settled_amount)}"
        click.echo(
            f"{txn.id:5d} | {txn.date} | {names.get(txn.account_id, 'Unknown'):15s} | "
            f"{format_amount(txn.total_amount):>12s} | {status:18s} | {txn.description or ''}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction with its lines and settlement state."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    try:
        txn = service.require_transaction(transaction_id)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    names = {acc.id: acc.name for acc in account_service.list_accounts()}
    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    if txn.payment_date:
        click.echo(f"  Payment date: {txn.payment_date}")
    click.echo(f"  Account: {names.get(txn.account_id, 'Unknown')} (ID: {txn.account_id})")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    click.echo(f"  Total: {format_amount(txn.total_amount)}")
    click.echo(f"  Cash settled: {'yes' if txn.is_cash_settled else 'no'}")
    click.echo(f"  Settled amount: {format_amount(txn.settled_amount)}")
    if txn.settlement_account_id is not None:
        click.echo(
            f"  Settlement account: {names.get(txn.settlement_account_id, 'Unknown')}"
            f" (ID: {txn.settlement_account_id})"
        )
    if txn.settlement_date:
        click.echo(f"  Settlement date: {txn.settlement_date}")
    click.echo("  Lines:")
    for line in txn.lines:
        click.echo(f"    {line.line_type:9s} {format_amount(line.amount)}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction and recompute affected balances."""
    service = TransactionService(ctx.obj["db"])

    try:
        service.require_transaction(transaction_id)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(add_transaction)
    cli.add_command(transaction_group, name="transaction")
