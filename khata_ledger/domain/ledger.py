"""Ledger engine - records transactions and derives balances and history views"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, List, Optional

from khata_ledger.domain.balances import balances_by_customer, compute_balance
from khata_ledger.domain.exceptions import Forbidden, InvalidTransactionKind, ValidationError
from khata_ledger.domain.history import apply_window
from khata_ledger.domain.models import (
    CustomerBalance,
    EnrichedTransaction,
    HistoryWindow,
    Identity,
    NewTransaction,
    ReadPolicy,
    Role,
    Transaction,
    TransactionKind,
)
from khata_ledger.domain.stores import IdentityStore, LedgerStore
from khata_ledger.utils.date_utils import utcnow

# Largest amount the ledger stores exactly
MAX_INTEGER_DIGITS = 30
MAX_FRACTION_DIGITS = 8


@dataclass(frozen=True)
class LedgerPolicy:
    """Behaviour switches that differed between deployments of the service"""

    allow_negative_balance: bool = True
    read_policy: ReadPolicy = ReadPolicy.COUNTERPARTY


def parse_amount(value: Any) -> Decimal:
    """
    Convert a wire amount into a positive Decimal.

    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError()
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Amount must be a number") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if amount.adjusted() >= MAX_INTEGER_DIGITS or amount.as_tuple().exponent < -MAX_FRACTION_DIGITS:
        raise ValidationError(
            f"Amount must have at most {MAX_INTEGER_DIGITS} integer and {MAX_FRACTION_DIGITS} decimal digits"
        )
    return amount


def parse_kind(value: Any) -> TransactionKind:
    try:
        return TransactionKind(value)
    except ValueError:
        raise InvalidTransactionKind() from None


class LedgerEngine:
    """Authorization-gated operations over the append-only transaction log"""

    def __init__(
        self,
        identities: IdentityStore,
        transactions: LedgerStore,
        policy: LedgerPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.identities = identities
        self.transactions = transactions
        self.policy = policy or LedgerPolicy()
        self.clock = clock

    def authorize(self, caller: Identity, business_id: str, customer_id: str) -> None:
        """Caller must be one of the two parties"""
        if caller.identifier not in (business_id, customer_id):
            raise Forbidden()

    def record_transaction(
        self,
        caller: Identity,
        business_id: Optional[str],
        customer_id: Optional[str],
        kind: Any,
        amount: Any,
        description: Optional[str] = None,
        photo: Optional[str] = None,
    ) -> Transaction:
        """
        Validate, authorize and append a transaction.

        Nothing is written unless every check passes.
        """
        if not business_id or not customer_id or not kind or amount in (None, ""):
            raise ValidationError()
        parsed_amount = parse_amount(amount)
        parsed_kind = parse_kind(kind)
        self.authorize(caller, business_id, customer_id)

        draft = NewTransaction(
            business_id=business_id,
            customer_id=customer_id,
            kind=parsed_kind,
            amount=parsed_amount,
            description=description or "",
            photo=photo or None,
            timestamp=self.clock(),
        )
        return self.transactions.append(draft)

    def get_balance(self, caller: Identity, business_id: str, customer_id: str) -> Decimal:
        self.authorize(caller, business_id, customer_id)
        history = self.transactions.find(business_id, customer_id)
        return compute_balance(history, self.policy.allow_negative_balance)

    def list_customers_for_owner(self, caller: Identity, business_id: str) -> List[CustomerBalance]:
        """Every customer with at least one transaction, ordered by customer id"""
        if caller.identifier != business_id:
            raise Forbidden()

        history = self.transactions.find(business_id)
        balances = balances_by_customer(history, self.policy.allow_negative_balance)

        result = []
        for customer_id, balance in balances.items():
            name, photo = self._display(customer_id)
            result.append(
                CustomerBalance(
                    customer_id=customer_id,
                    customer_name=name,
                    customer_photo=photo,
                    balance=balance,
                )
            )
        return result

    def list_transactions(
        self,
        caller: Identity,
        business_id: str,
        customer_id: Optional[str] = None,
        window: HistoryWindow = HistoryWindow.LATEST,
    ) -> List[EnrichedTransaction]:
        self._authorize_read(caller, business_id, customer_id)

        history = self.transactions.find(business_id, customer_id or None)
        ordered = apply_window(history, window, self.clock())

        # Each identifier is looked up once per request
        cache: dict = {}
        enriched = []
        for txn in ordered:
            for identifier in (txn.customer_id, txn.business_id):
                if identifier not in cache:
                    cache[identifier] = self._display(identifier)
            customer_name, customer_photo = cache[txn.customer_id]
            business_name, business_photo = cache[txn.business_id]
            enriched.append(
                EnrichedTransaction(
                    transaction=txn,
                    customer_name=customer_name,
                    customer_photo=customer_photo,
                    business_name=business_name,
                    business_photo=business_photo,
                )
            )
        return enriched

    def _authorize_read(self, caller: Identity, business_id: str, customer_id: Optional[str]) -> None:
        if caller.identifier == business_id:
            return

        policy = self.policy.read_policy
        if policy is ReadPolicy.COUNTERPARTY and customer_id and caller.identifier == customer_id:
            return
        if policy is ReadPolicy.ANY_CUSTOMER and caller.role is Role.CUSTOMER:
            return
        raise Forbidden()

    def _display(self, identifier: str) -> tuple[str, Optional[str]]:
        """Name and photo for an identifier, falling back to the raw id"""
        account = self.identities.get(identifier)
        if account is None:
            return identifier, None
        return account.name, account.photo
