"""Data access layer for accounts and ledger transactions"""

import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from khata_ledger.infrastructure.database.models import AccountRecord, TransactionRecord
from khata_ledger.domain.exceptions import DuplicateIdentity, InternalFailure
from khata_ledger.domain.models import Account, NewTransaction, Role, Transaction, TransactionKind
from khata_ledger.domain.stores import IdentityStore, LedgerStore
from khata_ledger.utils.date_utils import ensure_utc

logger = logging.getLogger(__name__)


def to_account(record: AccountRecord) -> Account:
    return Account(
        identifier=record.identifier,
        password_hash=record.password_hash,
        role=Role(record.role),
        name=record.name,
        photo=record.photo,
    )


def to_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        business_id=record.business_id,
        customer_id=record.customer_id,
        kind=TransactionKind(record.kind),
        amount=record.amount,
        description=record.description or "",
        photo=record.photo,
        timestamp=ensure_utc(record.created_at),
    )


class AccountRepository(IdentityStore):
    """Repository for registered accounts"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, account: Account) -> Account:
        """Insert an account; the primary key rejects duplicate identifiers"""
        if self.db.get(AccountRecord, account.identifier) is not None:
            raise DuplicateIdentity()

        self.db.add(
            AccountRecord(
                identifier=account.identifier,
                password_hash=account.password_hash,
                role=account.role.value,
                name=account.name,
                photo=account.photo,
            )
        )
        try:
            self.db.commit()
        except IntegrityError as e:
            # lost a race against a concurrent signup for the same identifier
            self.db.rollback()
            raise DuplicateIdentity() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Account insert failed: {e}")
            raise InternalFailure() from e
        return account

    def get(self, identifier: str) -> Optional[Account]:
        try:
            record = self.db.get(AccountRecord, identifier)
        except SQLAlchemyError as e:
            logger.error(f"Account lookup failed: {e}")
            raise InternalFailure() from e
        return to_account(record) if record else None

    def list_by_role(self, role: Role) -> List[Account]:
        try:
            records = (
                self.db.query(AccountRecord)
                .filter(AccountRecord.role == role.value)
                .order_by(AccountRecord.identifier)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Account listing failed: {e}")
            raise InternalFailure() from e
        return [to_account(r) for r in records]


class TransactionRepository(LedgerStore):
    """Repository for the append-only transaction log"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, draft: NewTransaction) -> Transaction:
        record = TransactionRecord(
            business_id=draft.business_id,
            customer_id=draft.customer_id,
            kind=draft.kind.value,
            amount=draft.amount,
            description=draft.description,
            photo=draft.photo,
            created_at=draft.timestamp,
        )
        self.db.add(record)
        try:
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction insert failed: {e}")
            raise InternalFailure() from e
        return to_transaction(record)

    def find(self, business_id: str, customer_id: Optional[str] = None) -> List[Transaction]:
        query = self.db.query(TransactionRecord).filter(TransactionRecord.business_id == business_id)
        if customer_id is not None:
            query = query.filter(TransactionRecord.customer_id == customer_id)
        try:
            records = query.order_by(TransactionRecord.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Transaction query failed: {e}")
            raise InternalFailure() from e
        return [to_transaction(r) for r in records]
