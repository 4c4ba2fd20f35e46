"""Balance reconciliation commands."""

import click
from kakeibo.cli.account_resolution import resolve_account_or_exit
from kakeibo.cli.error_handling import CLI_ERRORS, handle_domain_error
from kakeibo.cli.formatting import format_amount
from kakeibo.domain.account import AccountService
from kakeibo.domain.balance import opening_state
from kakeibo.domain.reconciliation import ReconciliationService


@click.command("reconcile")
@click.argument("account")
@click.option("--history", is_flag=True, help="Show the settled movements behind the balance")
@click.pass_context
def reconcile(ctx, account: str, history: bool):
    """Recompute one account's balance from its transactions.

    Example:
        kakeibo reconcile Bank --history
    """
    db = ctx.obj["db"]
    service = ReconciliationService(db)
    account_service = AccountService(db, service)
    account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        before = account_service.require_account(account_id)
        balance = service.reconcile_account(account_id)
        steps = service.account_history(account_id) if history else []
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    if history:
        opening_balance, opening_date = opening_state(before)
        click.echo(f"Opening balance: {format_amount(opening_balance)} on {opening_date}")
        for step in steps:
            click.echo(
                f"  {step.effect.effective_date} | txn {step.effect.transaction_id:5d} | "
                f"{format_amount(step.effect.signed_amount):>12s} | {format_amount(step.balance):>12s}"
            )

    if before.current_balance == balance:
        click.echo(f"{before.name}: {format_amount(balance)} (in sync)")
    else:
        click.echo(
            f"{before.name}: {format_amount(before.current_balance)} -> {format_amount(balance)} (corrected)"
        )


@click.command("audit")
@click.option("--dry-run", is_flag=True, help="Report drift without correcting it")
@click.option("--include-inactive", is_flag=True, help="Also audit deactivated accounts")
@click.pass_context
def audit(ctx, dry_run: bool, include_inactive: bool):
    """Recompute every account balance and correct any drift."""
    service = ReconciliationService(ctx.obj["db"])

    reported = 0
    failed = 0
    try:
        for drift in service.iter_reconcile_all(include_inactive=include_inactive, dry_run=dry_run):
            reported += 1
            if drift.error:
                failed += 1
                status = f"error: {drift.error}"
            elif drift.persisted:
                status = "updated"
            else:
                status = "dry run"
            click.echo(f"\n{drift.account_name} (ID: {drift.account_id})")
            click.echo(f"  Opening: {format_amount(drift.opening_balance)} on {drift.opening_date}")
            click.echo(f"  Stored: {format_amount(drift.stored_balance)}")
            click.echo(f"  Calculated: {format_amount(drift.calculated_balance)}")
            click.echo(f"  Difference: {format_amount(drift.difference)}")
            click.echo(f"  Status: {status}")
    except KeyboardInterrupt:
        click.echo(f"\nInterrupted after {reported} drifted account(s); earlier corrections are kept.", err=True)
        ctx.exit(130)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)

    if reported == 0:
        click.echo("All balances are in sync.")
        return

    click.echo(f"\n{reported} account(s) drifted, {failed} failed to update.")
    if failed:
        ctx.exit(1)


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile)
    cli.add_command(audit)
