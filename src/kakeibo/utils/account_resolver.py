"""Utility for resolving account names to IDs."""

from kakeibo.domain.account import AccountService
from kakeibo.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise NotFoundError(f"Account ID {account} not found")
        return account

    # Names take precedence so an account called "2024" stays reachable
    for acc in account_service.list_accounts():
        if acc.name == account:
            return acc.id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        raise NotFoundError(f"Account '{account}' not found")

    if account_service.get_account(account_id) is None:
        raise NotFoundError(f"Account ID {account_id} not found")
    return account_id
