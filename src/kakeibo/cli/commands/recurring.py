"""Recurring transaction commands."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount, parse_lines_or_exit
from kakeibo.domain.account import AccountService
from kakeibo.domain.category import CategoryService
from kakeibo.domain.recurring import RecurringService
from kakeibo.utils.date_parser import parse_date


@click.group()
def recurring_group():
    """Manage recurring transactions (rent, subscriptions, salary)."""
    pass


@recurring_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--day", type=click.IntRange(1, 31), help="Day of month (default: 1, clamped to month end)")
@click.option(
    "--delay",
    type=int,
    default=0,
    help="Days from accrual to payment (0 = paid immediately, negative = no payment date)",
)
@click.option(
    "--line",
    "lines",
    type=(str, str),
    multiple=True,
    required=True,
    metavar="TYPE AMOUNT",
    help="Line as TYPE AMOUNT; repeatable",
)
@click.option("--category", help="Category path applied to every line")
@click.option("--description", help="Description for registered transactions (default: NAME)")
@click.pass_context
def create_recurring(
    ctx,
    name: str,
    account: str,
    day: int | None,
    delay: int,
    lines: tuple[tuple[str, str], ...],
    category: str | None,
    description: str | None,
):
    """Create a recurring transaction template.

    Examples:
        kakeibo recurring create Rent --account Bank --day 27 --line expense 85000
        kakeibo recurring create Netflix --account Card --day 5 --delay 57 --line expense 1490
    """
    db = ctx.obj["db"]
    service = RecurringService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    category_id = None
    if category:
        try:
            category_id = CategoryService(db).require_category_by_path(category).id
        except CLI_ERRORS as e:
            handle_domain_error(ctx, e)

    line_inputs = parse_lines_or_exit(ctx, lines, category_id)

    try:
        recurring_id = service.create_recurring(
            name=name,
            account_id=account_id,
            lines=line_inputs,
            day_of_month=day,
            payment_delay_days=delay,
            description=description,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created recurring transaction '{name}' (ID: {recurring_id})")


@recurring_group.command("list")
@click.pass_context
def list_recurring(ctx):
    """List recurring transactions and whether they are registered this month."""
    db = ctx.obj["db"]
    service = RecurringService(db)
    items = service.list_recurring()

    if not items:
        click.echo("No recurring transactions found.")
        return

    registered = service.registered_this_month()
    names = {acc.id: acc.name for acc in AccountService(db).list_accounts()}
    click.echo(f"\nFound {len(items)} recurring transaction(s):")
    click.echo("-" * 80)
    for item in items:
        status = "registered" if item.id in registered else "pending"
        day = item.day_of_month or 1
        click.echo(
            f"{item.id:4d} | {item.name:20s} | {names.get(item.account_id, '-'):12s} | "
            f"day {day:2d} | {format_amount(item.total_amount):>10s} | {status}"
        )


@recurring_group.command("register")
@click.argument("recurring_id", type=int)
@click.option("--force", is_flag=True, help="Register even if already registered this month")
@click.option("--date", "today", help="Register for the month of this date (default: today)")
@click.pass_context
def register_recurring(ctx, recurring_id: int, force: bool, today: str | None):
    """Record this month's transaction for a recurring template."""
    service = RecurringService(ctx.obj["db"])

    reference = None
    if today:
        try:
            reference = parse_date(today)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    try:
        transaction_id = service.register(recurring_id, today=reference, allow_duplicate=force)
        item = service.require_recurring(recurring_id)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    txn = service.transactions.require_transaction(transaction_id)
    click.echo(f"Registered '{item.name}' as transaction {transaction_id}")
    click.echo(f"  Date: {txn.date}")
    if txn.payment_date:
        click.echo(f"  Payment date: {txn.payment_date}")
    click.echo(f"  Status: {'settled' if txn.is_cash_settled else 'deferred'}")


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
