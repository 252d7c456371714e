"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    service_name = "khata-ledger"

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "khata-ledger") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    formatter.service_name = service_name
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_signup(request_id: str, identifier: str, role: str) -> None:
    logging.info(
        "Account registered",
        extra={"request_id": request_id, "identifier": identifier, "role": role, "step": "signup"},
    )


def log_login(request_id: str, identifier: str | None, success: bool) -> None:
    logging.info(
        "Login attempt",
        extra={
            "request_id": request_id,
            "identifier": identifier,
            "step": "login",
            "outcome": "success" if success else "failure",
        },
    )


def log_transaction_recorded(
    request_id: str,
    transaction_id: int,
    business_id: str,
    customer_id: str,
    kind: str,
    amount: str,
) -> None:
    """Log structured ledger append for audit"""
    logging.info(
        "Transaction recorded",
        extra={
            "request_id": request_id,
            "transaction_id": transaction_id,
            "business_id": business_id,
            "customer_id": customer_id,
            "kind": kind,
            "amount": amount,
            "step": "transaction_recorded",
        },
    )


def log_denial(request_id: str, identifier: str, operation: str, path: str) -> None:
    logging.warning(
        "Authorization denied",
        extra={
            "request_id": request_id,
            "identifier": identifier,
            "operation": operation,
            "path": path,
            "step": "authorization",
        },
    )
