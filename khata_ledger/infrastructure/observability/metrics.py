"""Prometheus metrics for signups, logins, ledger writes and authorization denials"""

from prometheus_client import Counter, Histogram

# Identity metrics
signup_counter = Counter(
    "khata_signups_total",
    "Accounts registered",
    ["role"],  # customer | owner
)

login_counter = Counter(
    "khata_logins_total",
    "Login attempts",
    ["outcome"],  # success | failure
)

# Ledger metrics
transaction_counter = Counter(
    "khata_transactions_total",
    "Transactions appended to the ledger",
    ["kind"],  # credit_taken | payment_made
)

authorization_denied_counter = Counter(
    "khata_authorization_denied_total",
    "Requests refused because the caller is not a party to the ledger",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(kind: str) -> None:
    """Count a ledger append, labelled by a metric-safe kind name"""
    transaction_counter.labels(kind=kind.lower().replace(" ", "_")).inc()


def record_login(success: bool) -> None:
    login_counter.labels(outcome="success" if success else "failure").inc()
