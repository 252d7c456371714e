"""Balance engine - derives what a customer owes a business from the transaction log"""

from collections import defaultdict
from decimal import Decimal, localcontext
from typing import Dict, Iterable, List

from khata_ledger.domain.models import Transaction, TransactionKind


ZERO = Decimal("0")

# Room for 38-digit amounts summed over any realistic history
SUM_PRECISION = 80


def signed_amount(transaction: Transaction) -> Decimal:
    """
    Contribution of one transaction to the customer's balance.

    Credit taken increases what the customer owes, a payment decreases it.
    """
    if transaction.kind is TransactionKind.CREDIT_TAKEN:
        return transaction.amount
    if transaction.kind is TransactionKind.PAYMENT_MADE:
        return -transaction.amount
    raise ValueError(f"Unhandled transaction kind: {transaction.kind!r}")


def apply_floor(balance: Decimal, allow_negative: bool) -> Decimal:
    """Clamp at zero unless a customer is allowed to be in credit"""
    if allow_negative:
        return balance
    return max(balance, ZERO)


def compute_balance(transactions: Iterable[Transaction], allow_negative: bool = True) -> Decimal:
    """
    Sum credit minus payments over a single business/customer pair.

    Accumulates in Decimal so monetary sums never pick up binary float error,
    with enough precision that bounded amounts are never rounded.
    """
    with localcontext() as ctx:
        ctx.prec = SUM_PRECISION
        total = sum((signed_amount(t) for t in transactions), ZERO)
    return apply_floor(total, allow_negative)


def balances_by_customer(
    transactions: Iterable[Transaction],
    allow_negative: bool = True,
) -> Dict[str, Decimal]:
    """Group a business's transactions by customer and compute each balance"""
    grouped: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[txn.customer_id].append(txn)

    return {
        customer_id: compute_balance(txns, allow_negative)
        for customer_id, txns in sorted(grouped.items())
    }
