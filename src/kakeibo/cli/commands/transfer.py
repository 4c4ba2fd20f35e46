"""Transfer command."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount, parse_amount_or_exit
from kakeibo.domain.account import AccountService
from kakeibo.domain.category import CategoryService
from kakeibo.domain.transfer import TransferService
from kakeibo.utils.date_parser import parse_date


@click.command("transfer")
@click.argument("from_account")
@click.argument("to_account")
@click.argument("amount")
@click.option("--fee", default="0", help="Transfer fee charged to the source account")
@click.option("--date", "transfer_date", default="today", help="Transfer date (default: today)")
@click.option("--description", help="Description (default: 'FROM → TO')")
@click.option("--category", help="Category path for the transfer lines")
@click.option("--fee-category", help="Category path for the fee line")
@click.pass_context
def transfer(
    ctx,
    from_account: str,
    to_account: str,
    amount: str,
    fee: str,
    transfer_date: str,
    description: str | None,
    category: str | None,
    fee_category: str | None,
):
    """Move money between two accounts.

    Examples:
        kakeibo transfer Bank Wallet 10000
        kakeibo transfer Bank Savings 50000 --fee 220 --date 2024-03-25
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    category_service = CategoryService(db)
    service = TransferService(db)

    from_id = resolve_account_or_exit(ctx, account_service, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, to_account)
    parsed_amount = parse_amount_or_exit(ctx, amount)
    parsed_fee = parse_amount_or_exit(ctx, fee, "fee")

    try:
        parsed_date = parse_date(transfer_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        category_id = category_service.require_category_by_path(category).id if category else None
        fee_category_id = (
            category_service.require_category_by_path(fee_category).id if fee_category else None
        )
        result = service.create_transfer(
            from_account_id=from_id,
            to_account_id=to_id,
            amount=parsed_amount,
            transfer_date=parsed_date,
            fee=parsed_fee,
            description=description,
            category_id=category_id,
            fee_category_id=fee_category_id,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transferred {format_amount(parsed_amount)} on {parsed_date}")
    if parsed_fee:
        click.echo(f"  Fee: {format_amount(parsed_fee)}")
    click.echo(f"  {from_account}: {format_amount(result.from_balance)}")
    click.echo(f"  {to_account}: {format_amount(result.to_balance)}")


def register_commands(cli):
    """Register transfer command with main CLI."""
    cli.add_command(transfer)
