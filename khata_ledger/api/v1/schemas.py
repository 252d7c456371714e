"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from khata_ledger.domain.models import Account, CustomerBalance, EnrichedTransaction, Identity, Transaction


class CamelModel(BaseModel):
    """Wire format is camelCase; Python side stays snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(CamelModel):
    """Request body for POST /api/signup; identifier key depends on deployment"""

    phone_number: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = None
    name: Optional[str] = None
    photo: Optional[str] = None

    def identifier(self, identity_field: str) -> Optional[str]:
        return self.username if identity_field == "username" else self.phone_number


class LoginRequest(CamelModel):
    """Request body for POST /api/login"""

    phone_number: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def identifier(self, identity_field: str) -> Optional[str]:
        return self.username if identity_field == "username" else self.phone_number


class MessageResponse(BaseModel):
    message: str


def user_payload(identity: Identity, identity_field: str) -> dict:
    """Public view of an identity, keyed the way the client signed up"""
    return {
        identity_field: identity.identifier,
        "userType": identity.role.value,
        "name": identity.name,
        "photo": identity.photo,
    }


class BusinessSchema(CamelModel):
    """Directory entry; only the deployment's identifier key is emitted"""

    phone_number: Optional[str] = None
    username: Optional[str] = None
    name: str
    photo: Optional[str] = None

    @classmethod
    def from_domain(cls, account: Account, identity_field: str) -> "BusinessSchema":
        return cls(**{identity_field: account.identifier}, name=account.name, photo=account.photo)


class LoginResponse(BaseModel):
    token: str
    user: dict


class VerifyTokenResponse(BaseModel):
    valid: bool
    user: dict


class TransactionCreate(CamelModel):
    """Request body for POST /api/transaction; checked by the ledger engine"""

    business_id: Optional[str] = None
    customer_id: Optional[str] = None
    type: Optional[str] = None
    amount: Optional[Union[int, float, str]] = None
    description: Optional[str] = None
    photo: Optional[str] = None


class TransactionSchema(CamelModel):
    """Recorded transaction; the id goes out as `_id`, the key clients list by"""

    id: int = Field(alias="_id")
    business_id: str
    customer_id: str
    type: str
    amount: Decimal
    description: str
    photo: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            id=txn.id,
            business_id=txn.business_id,
            customer_id=txn.customer_id,
            type=txn.kind.value,
            amount=txn.amount,
            description=txn.description,
            photo=txn.photo,
            timestamp=txn.timestamp,
        )


class TransactionCreatedResponse(BaseModel):
    """Response for POST /api/transaction"""

    message: str
    transaction: TransactionSchema


class EnrichedTransactionSchema(TransactionSchema):
    """Transaction plus both parties' display attributes"""

    customer_name: str
    customer_photo: Optional[str] = None
    business_name: str
    business_photo: Optional[str] = None

    @classmethod
    def from_enriched(cls, item: EnrichedTransaction) -> "EnrichedTransactionSchema":
        base = TransactionSchema.from_domain(item.transaction)
        return cls(
            **base.model_dump(),
            customer_name=item.customer_name,
            customer_photo=item.customer_photo,
            business_name=item.business_name,
            business_photo=item.business_photo,
        )


class CustomerBalanceSchema(CamelModel):
    """Single row for GET /api/customers/{businessId}"""

    customer_id: str
    customer_name: str
    customer_photo: Optional[str] = None
    balance: Decimal

    @classmethod
    def from_domain(cls, row: CustomerBalance) -> "CustomerBalanceSchema":
        return cls(
            customer_id=row.customer_id,
            customer_name=row.customer_name,
            customer_photo=row.customer_photo,
            balance=row.balance,
        )


class BalanceResponse(BaseModel):
    """Response for GET /api/credit/{businessId}/{customerId}"""

    balance: Decimal
