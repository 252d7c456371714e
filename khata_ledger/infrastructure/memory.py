"""In-memory stores implementing the storage interfaces (used by tests and local demos)"""

import threading
from dataclasses import asdict
from typing import Dict, List, Optional

from khata_ledger.domain.exceptions import DuplicateIdentity
from khata_ledger.domain.models import Account, NewTransaction, Role, Transaction
from khata_ledger.domain.stores import IdentityStore, LedgerStore


class InMemoryIdentityStore(IdentityStore):
    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.Lock()

    def add(self, account: Account) -> Account:
        # check-and-insert under one lock so racing signups cannot both win
        with self._lock:
            if account.identifier in self._accounts:
                raise DuplicateIdentity()
            self._accounts[account.identifier] = account
        return account

    def get(self, identifier: str) -> Optional[Account]:
        return self._accounts.get(identifier)

    def list_by_role(self, role: Role) -> List[Account]:
        return sorted(
            (a for a in self._accounts.values() if a.role is role),
            key=lambda a: a.identifier,
        )


class InMemoryLedgerStore(LedgerStore):
    def __init__(self):
        self._transactions: List[Transaction] = []
        self._lock = threading.Lock()

    def append(self, draft: NewTransaction) -> Transaction:
        with self._lock:
            txn = Transaction(id=len(self._transactions) + 1, **asdict(draft))
            self._transactions.append(txn)
        return txn

    def find(self, business_id: str, customer_id: Optional[str] = None) -> List[Transaction]:
        return [
            t
            for t in list(self._transactions)
            if t.business_id == business_id and (customer_id is None or t.customer_id == customer_id)
        ]
