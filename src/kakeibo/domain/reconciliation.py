"""Balance reconciliation.

Recomputes account balances from the full transaction history and writes the
result back to the cached ``current_balance`` field. Every writer that can
change a settlement effect calls into this service afterwards; nothing else
modifies ``current_balance``.
"""

from collections import defaultdict
from typing import Iterable, Iterator, Optional

from kakeibo.database.base import Database
from kakeibo.domain.balance import opening_state, recompute_balance, replay_balance
from kakeibo.domain.entities import Account, BalanceDrift, BalanceStep, SettlementEffect
from kakeibo.domain.errors import (
    BalanceComputeError,
    BalancePersistError,
    NotFoundError,
    StorageError,
    account_not_found,
)
from kakeibo.domain.settlement import classify_transactions
from kakeibo.logging_config import get_logger

logger = get_logger(__name__)


class ReconciliationService:
    """Service that keeps cached account balances in sync with the ledger."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def _load_account(self, account_id: int) -> Account:
        try:
            account = self.db.get_account(account_id)
        except StorageError as exc:
            raise BalanceComputeError(
                f"Could not load account {account_id}: {exc}", account_id=account_id
            ) from exc
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _account_effects(self, account_id: int) -> list[SettlementEffect]:
        """Settlement effects of every transaction touching the account."""
        try:
            transactions = self.db.list_transactions(involving_account_id=account_id)
        except StorageError as exc:
            raise BalanceComputeError(
                f"Could not load transactions for account {account_id}: {exc}",
                account_id=account_id,
            ) from exc
        return classify_transactions(transactions)

    def calculate_balance(self, account_id: int) -> int:
        """Recompute an account's balance without persisting it.

        Raises:
            NotFoundError: If the account doesn't exist
            BalanceComputeError: If account or transactions could not be read
        """
        account = self._load_account(account_id)
        return recompute_balance(account, self._account_effects(account_id))

    def account_history(self, account_id: int) -> list[BalanceStep]:
        """Chronological replay of an account's settled movements."""
        account = self._load_account(account_id)
        return replay_balance(account, self._account_effects(account_id))

    def reconcile_account(self, account_id: int) -> int:
        """Recompute an account's balance and store it if it drifted.

        Args:
            account_id: Account ID

        Returns:
            The recomputed balance

        Raises:
            NotFoundError: If the account doesn't exist
            BalanceComputeError: If account or transactions could not be read
            BalancePersistError: If the corrected balance could not be written
        """
        account = self._load_account(account_id)
        balance = recompute_balance(account, self._account_effects(account_id))

        if account.current_balance != balance:
            try:
                self.db.update_account_balance(account_id, balance)
            except StorageError as exc:
                raise BalancePersistError(
                    f"Computed balance {balance} for account {account_id} but could not store it: {exc}",
                    account_id=account_id,
                    balance=balance,
                ) from exc
            logger.info(
                "Corrected balance of account %s (%s): %s -> %s",
                account_id,
                account.name,
                account.current_balance,
                balance,
            )
        return balance

    def reconcile_accounts(self, account_ids: Iterable[Optional[int]]) -> dict[int, int]:
        """Reconcile each distinct account ID, ignoring None.

        Returns:
            Mapping of account ID to recomputed balance
        """
        balances: dict[int, int] = {}
        for account_id in account_ids:
            if account_id is None or account_id in balances:
                continue
            balances[account_id] = self.reconcile_account(account_id)
        return balances

    def iter_reconcile_all(
        self, include_inactive: bool = False, dry_run: bool = False
    ) -> Iterator[BalanceDrift]:
        """Audit every account, yielding one entry per drifted account.

        Each correction is committed before the next account is processed, so
        stopping the iteration early keeps the corrections already made.

        Args:
            include_inactive: Also audit deactivated accounts
            dry_run: Report drift without writing corrections

        Raises:
            BalanceComputeError: If accounts or transactions could not be read
        """
        try:
            accounts = self.db.list_accounts(include_inactive=include_inactive)
            transactions = self.db.list_transactions()
        except StorageError as exc:
            raise BalanceComputeError(f"Could not load ledger for audit: {exc}") from exc

        effects_by_account: dict[int, list[SettlementEffect]] = defaultdict(list)
        for effect in classify_transactions(transactions):
            effects_by_account[effect.account_id].append(effect)

        drifted = 0
        failed = 0
        for account in accounts:
            calculated = recompute_balance(account, effects_by_account.get(account.id, ()))
            if account.current_balance == calculated:
                continue

            drifted += 1
            opening_balance, opening_date = opening_state(account)
            persisted = False
            error = None
            if not dry_run:
                try:
                    self.db.update_account_balance(account.id, calculated)
                    persisted = True
                    logger.info(
                        "Corrected balance of account %s (%s): %s -> %s",
                        account.id,
                        account.name,
                        account.current_balance,
                        calculated,
                    )
                except (StorageError, NotFoundError) as exc:
                    failed += 1
                    error = str(exc)
                    logger.exception("Failed to store corrected balance for account %s", account.id)

            yield BalanceDrift(
                account_id=account.id,
                account_name=account.name,
                opening_balance=opening_balance,
                opening_date=opening_date,
                stored_balance=account.current_balance,
                calculated_balance=calculated,
                difference=calculated - (account.current_balance or 0),
                persisted=persisted,
                error=error,
            )

        logger.info(
            "Audited %d accounts: %d drifted, %d failed to update", len(accounts), drifted, failed
        )

    def reconcile_all(
        self, include_inactive: bool = False, dry_run: bool = False
    ) -> list[BalanceDrift]:
        """Audit and repair every account, returning the drift report."""
        return list(self.iter_reconcile_all(include_inactive=include_inactive, dry_run=dry_run))
