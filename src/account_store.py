from typing import Dict, Iterator, Optional

from models import ClientAccount


class AccountStore:
    """
    Client accounts for one run, keyed by client id.
    Accounts are created on first reference and kept in insertion order.
    Not thread-safe: the engine that owns the store applies entries one at a time.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def snapshot(self) -> Iterator[ClientAccount]:
        """Lazily yield every account in the order it was first referenced."""
        return iter(self._accounts.values())

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts
