"""Ordering and windowing of transaction history"""

from datetime import datetime
from typing import List, Sequence

from khata_ledger.domain.models import HistoryWindow, Transaction
from khata_ledger.utils.date_utils import ensure_utc, start_of_month, start_of_week


def sort_key(transaction: Transaction) -> tuple:
    # id breaks ties between transactions accepted within the same clock tick
    return (ensure_utc(transaction.timestamp), transaction.id)


def newest_first(transactions: Sequence[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=sort_key, reverse=True)


def oldest_first(transactions: Sequence[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=sort_key)


def apply_window(
    transactions: Sequence[Transaction],
    window: HistoryWindow,
    now: datetime,
) -> List[Transaction]:
    """
    Re-sort or re-filter an already fetched history.

    - latest: newest first
    - oldest: oldest first
    - this_week / this_month: entries since the start of the current
      week (Monday) or month, newest first
    """
    now = ensure_utc(now)

    if window is HistoryWindow.OLDEST:
        return oldest_first(transactions)

    if window is HistoryWindow.THIS_WEEK:
        cutoff = start_of_week(now)
        transactions = [t for t in transactions if ensure_utc(t.timestamp) >= cutoff]
    elif window is HistoryWindow.THIS_MONTH:
        cutoff = start_of_month(now)
        transactions = [t for t in transactions if ensure_utc(t.timestamp) >= cutoff]

    return newest_first(transactions)
