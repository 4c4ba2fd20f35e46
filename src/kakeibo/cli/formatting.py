"""Output formatting helpers shared by CLI commands."""

from typing import Optional

import click

from kakeibo.domain.entities import TransactionLineInput
from kakeibo.utils.amount_parser import parse_amount


def format_amount(amount: Optional[int]) -> str:
    """Format an amount as yen, e.g. ¥1,200 or -¥300."""
    if amount is None:
        return "-"
    if amount < 0:
        return f"-¥{-amount:,}"
    return f"¥{amount:,}"


def parse_amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> int:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_lines_or_exit(
    ctx: click.Context, lines: tuple[tuple[str, str], ...], category_id: Optional[int] = None
) -> list[TransactionLineInput]:
    """Turn repeated ``--line TYPE AMOUNT`` options into line inputs."""
    parsed = []
    for line_type, amount in lines:
        parsed.append(
            TransactionLineInput(
                amount=parse_amount_or_exit(ctx, amount, "line amount"),
                line_type=line_type,
                category_id=category_id,
            )
        )
    return parsed
