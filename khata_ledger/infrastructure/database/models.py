"""SQLAlchemy ORM models for accounts and the transaction log"""

from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class ExactDecimal(TypeDecorator):
    """Stores Decimal as text so SQLite never rounds through a float

    Sized for a signed 30.8-digit amount, the bound parse_amount enforces.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class AccountRecord(Base):
    """Registered user; identifier is the primary key so duplicates fail at insert"""

    __tablename__ = "accounts"

    identifier = Column(Text, primary_key=True)
    password_hash = Column(Text, nullable=False)
    role = Column(String(16), nullable=False, index=True)
    name = Column(Text, nullable=False)
    photo = Column(Text, nullable=True)


class TransactionRecord(Base):
    """Append-only ledger entry between a business and a customer"""

    __tablename__ = "ledger_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Text, nullable=False, index=True)
    customer_id = Column(Text, nullable=False, index=True)
    kind = Column(String(32), nullable=False)
    amount = Column(ExactDecimal, nullable=False)
    description = Column(Text, nullable=False, default="")
    photo = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
