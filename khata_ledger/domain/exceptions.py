"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainException):
    """Required input is missing or malformed"""

    status_code = 400
    default_message = "Missing required fields"


class DuplicateIdentity(DomainException):
    """An account with this identifier already exists"""

    status_code = 400
    default_message = "User already exists"


class InvalidRole(DomainException):
    """Role is not one of the known account roles"""

    status_code = 400
    default_message = "Invalid userType"


class InvalidTransactionKind(DomainException):
    """Transaction type is not one of the known kinds"""

    status_code = 400
    default_message = "Invalid transaction type"


class InvalidCredentials(DomainException):
    """Unknown identifier or wrong password"""

    status_code = 401
    default_message = "Invalid credentials"


class InvalidToken(DomainException):
    """Bearer token missing, malformed, tampered with or expired"""

    status_code = 401
    default_message = "Invalid token"


class Forbidden(DomainException):
    """Caller is authenticated but not a party to the requested ledger"""

    status_code = 403
    default_message = "Unauthorized"


class InternalFailure(DomainException):
    """Persistence or other unexpected fault"""

    pass
