"""
Storage interfaces for accounts and the transaction log.

The engine only talks to these; SQL repositories and the in-memory
stores used in tests both implement them.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from khata_ledger.domain.models import Account, NewTransaction, Role, Transaction


class IdentityStore(ABC):
    """Account persistence"""

    @abstractmethod
    def add(self, account: Account) -> Account:
        """
        Persist a new account.

        Raises:
            DuplicateIdentity: If the identifier is already taken
        """

    @abstractmethod
    def get(self, identifier: str) -> Optional[Account]:
        """Fetch an account by identifier, or None"""

    @abstractmethod
    def list_by_role(self, role: Role) -> List[Account]:
        """All accounts with the given role, ordered by identifier"""


class LedgerStore(ABC):
    """Append-only transaction log"""

    @abstractmethod
    def append(self, draft: NewTransaction) -> Transaction:
        """Insert a transaction and return it with its assigned id"""

    @abstractmethod
    def find(self, business_id: str, customer_id: Optional[str] = None) -> List[Transaction]:
        """Transactions for a business, optionally narrowed to one customer"""
