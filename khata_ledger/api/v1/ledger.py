"""Ledger endpoints: record transactions, balances, customer list and history"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from khata_ledger.api.dependencies import get_current_identity, get_ledger_engine, get_request_id
from khata_ledger.api.v1.schemas import (
    BalanceResponse,
    CustomerBalanceSchema,
    EnrichedTransactionSchema,
    TransactionCreate,
    TransactionCreatedResponse,
    TransactionSchema,
)
from khata_ledger.domain.ledger import LedgerEngine
from khata_ledger.domain.models import HistoryWindow, Identity
from khata_ledger.infrastructure.observability.logging import log_transaction_recorded
from khata_ledger.infrastructure.observability.metrics import record_transaction

router = APIRouter()


@router.post("/transaction", response_model=TransactionCreatedResponse)
def add_transaction(
    body: TransactionCreate,
    request: Request,
    caller: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_ledger_engine),
):
    """
    Append a credit or payment between a business and a customer.

    Either party may record it; the server assigns id and timestamp.
    """
    txn = engine.record_transaction(
        caller,
        business_id=body.business_id,
        customer_id=body.customer_id,
        kind=body.type,
        amount=body.amount,
        description=body.description,
        photo=body.photo,
    )

    record_transaction(txn.kind.value)
    log_transaction_recorded(
        get_request_id(request),
        txn.id,
        txn.business_id,
        txn.customer_id,
        txn.kind.value,
        str(txn.amount),
    )
    return TransactionCreatedResponse(message="Transaction added", transaction=TransactionSchema.from_domain(txn))


@router.get("/credit/{business_id}/{customer_id}", response_model=BalanceResponse)
def get_credit(
    business_id: str,
    customer_id: str,
    caller: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_ledger_engine),
):
    """Outstanding balance the customer owes the business"""
    return BalanceResponse(balance=engine.get_balance(caller, business_id, customer_id))


@router.get("/customers/{business_id}", response_model=List[CustomerBalanceSchema])
def list_customers(
    business_id: str,
    caller: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_ledger_engine),
):
    rows = engine.list_customers_for_owner(caller, business_id)
    return [CustomerBalanceSchema.from_domain(row) for row in rows]


@router.get("/transactions/{business_id}", response_model=List[EnrichedTransactionSchema])
def list_transactions(
    business_id: str,
    customer_id: Optional[str] = Query(None, alias="customerId"),
    window: HistoryWindow = Query(HistoryWindow.LATEST),
    caller: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_ledger_engine),
):
    """
    Transaction history for a business, newest first.

    Query:
        customerId: narrow to one customer
        window: latest | oldest | this_week | this_month
    """
    items = engine.list_transactions(caller, business_id, customer_id, window)
    return [EnrichedTransactionSchema.from_enriched(item) for item in items]
