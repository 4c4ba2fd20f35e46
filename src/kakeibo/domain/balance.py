"""Balance recomputation from settlement effects."""

from datetime import date
from typing import Iterable, Optional

from kakeibo.domain.entities import Account, BalanceStep, SettlementEffect

OPENING_DATE_SENTINEL = date(1900, 1, 1)


def opening_state(account: Optional[Account]) -> tuple[int, date]:
    """Return (opening_balance, opening_date), defaulting missing values.

    A missing account or missing opening fields never block recomputation:
    the balance starts at 0 from the sentinel date.
    """
    if account is None:
        return 0, OPENING_DATE_SENTINEL
    opening_balance = account.opening_balance if account.opening_balance is not None else 0
    opening_date = account.opening_date or OPENING_DATE_SENTINEL
    return opening_balance, opening_date


def relevant_effects(
    account: Optional[Account], effects: Iterable[SettlementEffect], account_id: Optional[int] = None
) -> list[SettlementEffect]:
    """Filter effects to those targeting the account on or after its opening date."""
    target_id = account.id if account is not None else account_id
    _, opening_date = opening_state(account)
    return [
        effect
        for effect in effects
        if effect.account_id == target_id and effect.effective_date >= opening_date
    ]


def recompute_balance(
    account: Optional[Account], effects: Iterable[SettlementEffect], account_id: Optional[int] = None
) -> int:
    """Compute the authoritative balance of an account.

    Args:
        account: Account entity (None falls back to a zero opening state)
        effects: Settlement effects from any transactions; only those
            targeting this account are used
        account_id: Account ID to filter on when ``account`` is None

    Returns:
        Opening balance plus every relevant signed effect
    """
    balance, _ = opening_state(account)
    for effect in relevant_effects(account, effects, account_id):
        balance += effect.signed_amount
    return balance


def replay_balance(
    account: Optional[Account], effects: Iterable[SettlementEffect], account_id: Optional[int] = None
) -> list[BalanceStep]:
    """Replay relevant effects in date order, recording the running balance."""
    balance, _ = opening_state(account)
    ordered = sorted(
        relevant_effects(account, effects, account_id),
        key=lambda effect: (effect.effective_date, effect.transaction_id),
    )
    steps = []
    for effect in ordered:
        balance += effect.signed_amount
        steps.append(BalanceStep(effect=effect, balance=balance))
    return steps
