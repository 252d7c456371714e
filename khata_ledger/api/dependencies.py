"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from khata_ledger.config import Settings, get_settings
from khata_ledger.domain.exceptions import InvalidToken
from khata_ledger.domain.identity import IdentityService
from khata_ledger.domain.ledger import LedgerEngine, LedgerPolicy
from khata_ledger.domain.models import Identity, ReadPolicy
from khata_ledger.infrastructure.database.repositories import AccountRepository, TransactionRepository
from khata_ledger.infrastructure.database.session import get_db
from khata_ledger.infrastructure.security import PasswordHasher, TokenService

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_hours=settings.access_token_expire_hours,
    )


def get_identity_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
) -> IdentityService:
    """Provide identity service over the request's database session"""
    return IdentityService(
        store=AccountRepository(db),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=tokens,
    )


def get_ledger_engine(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> LedgerEngine:
    """Provide ledger engine configured with the deployment's policies"""
    policy = LedgerPolicy(
        allow_negative_balance=settings.allow_negative_balance,
        read_policy=ReadPolicy(settings.transaction_read_policy),
    )
    return LedgerEngine(AccountRepository(db), TransactionRepository(db), policy)


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Resolve the caller from the Authorization: Bearer header"""
    if credentials is None:
        raise InvalidToken("Missing auth header")
    identity = tokens.verify(credentials.credentials)
    request.state.caller = identity.identifier
    return identity
