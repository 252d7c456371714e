"""Integration tests for the SQL repositories"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session, sessionmaker

from khata_ledger.domain.exceptions import DuplicateIdentity
from khata_ledger.domain.models import Account, NewTransaction, Role, TransactionKind
from khata_ledger.infrastructure.database.models import AccountRecord
from khata_ledger.infrastructure.database.repositories import AccountRepository, TransactionRepository


def test_account_roundtrip(db: Session):
    repo = AccountRepository(db)
    repo.add(Account("B1", "hash", Role.OWNER, "Corner Shop", "blob"))

    assert repo.get("B1") == Account("B1", "hash", Role.OWNER, "Corner Shop", "blob")
    assert repo.get("nobody") is None


def test_duplicate_identifier_rejected(db: Session):
    repo = AccountRepository(db)
    repo.add(Account("C1", "hash", Role.CUSTOMER, "Asha"))

    with pytest.raises(DuplicateIdentity):
        repo.add(Account("C1", "other", Role.OWNER, "Someone"))


def test_concurrent_signup_loses_at_insert(db: Session, monkeypatch):
    """A row committed by another session after the lookup still fails as a duplicate"""
    other = sessionmaker(bind=db.get_bind())()
    try:
        other.add(AccountRecord(identifier="C1", password_hash="first", role="customer", name="Asha"))
        other.commit()
    finally:
        other.close()

    repo = AccountRepository(db)
    # the lookup ran before the other session committed
    monkeypatch.setattr(db, "get", lambda *args, **kwargs: None)

    with pytest.raises(DuplicateIdentity):
        repo.add(Account("C1", "second", Role.OWNER, "Someone"))

    monkeypatch.undo()
    stored = repo.get("C1")
    assert stored.password_hash == "first"
    assert stored.role is Role.CUSTOMER


def test_transaction_amount_stored_exactly(db: Session):
    repo = TransactionRepository(db)

    recorded = repo.append(
        NewTransaction(
            business_id="B1",
            customer_id="C1",
            kind=TransactionKind.CREDIT_TAKEN,
            amount=Decimal("999999999999999999999999999999.99999999"),
            description="",
            photo=None,
            timestamp=datetime(2024, 5, 15, 10, 0, tzinfo=timezone.utc),
        )
    )

    assert recorded.id == 1
    assert repo.find("B1", "C1")[0].amount == Decimal("999999999999999999999999999999.99999999")
