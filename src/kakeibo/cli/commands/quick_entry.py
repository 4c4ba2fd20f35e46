"""Quick entry commands."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount, parse_amount_or_exit
from kakeibo.domain.account import AccountService
from kakeibo.domain.category import CategoryService
from kakeibo.domain.errors import NotFoundError
from kakeibo.domain.quick_entry import QuickEntryService
from kakeibo.utils.date_parser import parse_date


def _resolve_entry(service: QuickEntryService, entry: str) -> int:
    found = service.find_by_name(entry)
    if found is not None:
        return found.id
    try:
        entry_id = int(entry)
    except ValueError:
        raise NotFoundError(f"Quick entry '{entry}' not found")
    return service.require_quick_entry(entry_id).id


@click.group()
def quick_group():
    """One-tap shortcuts for frequent transactions."""
    pass


@quick_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "line_type", default="expense", help="Line type (default: expense)")
@click.option("--category", help="Category path")
@click.option("--counterparty", help="Shop or person")
@click.option("--description", help="Transaction description (default: NAME)")
@click.pass_context
def create_quick_entry(
    ctx,
    name: str,
    account: str,
    line_type: str,
    category: str | None,
    counterparty: str | None,
    description: str | None,
):
    """Create a quick entry.

    Example:
        kakeibo quick create Coffee --account Wallet --category "Food > Cafe"
    """
    db = ctx.obj["db"]
    service = QuickEntryService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        category_id = CategoryService(db).require_category_by_path(category).id if category else None
        entry_id = service.create_quick_entry(
            name=name,
            account_id=account_id,
            line_type=line_type,
            category_id=category_id,
            counterparty=counterparty,
            description=description,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created quick entry '{name}' (ID: {entry_id})")


@quick_group.command("list")
@click.option("--limit", type=int, default=10, help="Maximum entries to show (default: 10)")
@click.pass_context
def list_quick_entries(ctx, limit: int):
    """List quick entries, most used first."""
    service = QuickEntryService(ctx.obj["db"])
    entries = service.list_quick_entries(limit=limit)

    if not entries:
        click.echo("No quick entries found.")
        return

    for entry in entries:
        click.echo(f"{entry.id:4d} | {entry.name:20s} | {entry.line_type:9s} | used {entry.use_count}x")


@quick_group.command("use")
@click.argument("entry")
@click.argument("amount")
@click.option("--date", "entry_date", default="today", help="Transaction date (default: today)")
@click.pass_context
def use_quick_entry(ctx, entry: str, amount: str, entry_date: str):
    """Record a transaction from a quick entry (name or ID)."""
    service = QuickEntryService(ctx.obj["db"])
    parsed_amount = parse_amount_or_exit(ctx, amount)

    try:
        parsed_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        entry_id = _resolve_entry(service, entry)
        transaction_id = service.use(entry_id, parsed_amount, today=parsed_date)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id} ({format_amount(parsed_amount)})")


def register_commands(cli):
    """Register quick entry commands with main CLI."""
    cli.add_command(quick_group, name="quick")
