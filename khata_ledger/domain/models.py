"""Domain models - pure Python dataclasses and enums representing ledger entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Account role, fixed at signup"""

    CUSTOMER = "customer"
    OWNER = "owner"


class TransactionKind(str, Enum):
    """Direction of money between customer and business"""

    CREDIT_TAKEN = "Credit Taken"  # customer owes more
    PAYMENT_MADE = "Payment Made"  # customer paid back


class HistoryWindow(str, Enum):
    """Sort/window options for transaction history"""

    LATEST = "latest"
    OLDEST = "oldest"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"


class ReadPolicy(str, Enum):
    """Who may list a business's transactions"""

    OWNER_ONLY = "owner_only"
    COUNTERPARTY = "counterparty"
    ANY_CUSTOMER = "any_customer"


@dataclass(frozen=True)
class Account:
    """Registered user; never exposes the password itself"""

    identifier: str
    password_hash: str
    role: Role
    name: str
    photo: Optional[str] = None


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as carried by the bearer token"""

    identifier: str
    role: Role
    name: str
    photo: Optional[str] = None


@dataclass(frozen=True)
class NewTransaction:
    """Validated transaction waiting for the store to assign an id"""

    business_id: str
    customer_id: str
    kind: TransactionKind
    amount: Decimal
    description: str
    photo: Optional[str]
    timestamp: datetime


@dataclass(frozen=True)
class Transaction:
    """Recorded, immutable ledger entry"""

    id: int
    business_id: str
    customer_id: str
    kind: TransactionKind
    amount: Decimal
    description: str
    photo: Optional[str]
    timestamp: datetime


@dataclass(frozen=True)
class CustomerBalance:
    """Per-customer balance as seen by a business owner"""

    customer_id: str
    customer_name: str
    customer_photo: Optional[str]
    balance: Decimal


@dataclass(frozen=True)
class EnrichedTransaction:
    """Transaction with both counterparties' display attributes"""

    transaction: Transaction
    customer_name: str
    customer_photo: Optional[str]
    business_name: str
    business_photo: Optional[str]
