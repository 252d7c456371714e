"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from khata_ledger.api.main import create_app
from khata_ledger.config import Settings, get_settings
from khata_ledger.domain.identity import IdentityService
from khata_ledger.domain.ledger import LedgerEngine, LedgerPolicy
from khata_ledger.domain.models import Identity, Role, Transaction, TransactionKind
from khata_ledger.infrastructure.database.models import Base
from khata_ledger.infrastructure.database.session import get_db
from khata_ledger.infrastructure.memory import InMemoryIdentityStore, InMemoryLedgerStore
from khata_ledger.infrastructure.security import PasswordHasher, TokenService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# bcrypt's minimum cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4
TEST_JWT_SECRET = "test-secret"


class StepClock:
    """Deterministic clock: every call is one minute after the previous"""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, test_settings: Settings) -> TestClient:
    """Create FastAPI test client with test database and settings"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    return TestClient(app)


@pytest.fixture
def signup(client: TestClient) -> Callable[..., None]:
    def _signup(phone: str, password: str, user_type: str, name: str | None = None) -> None:
        response = client.post(
            "/api/signup",
            json={"phoneNumber": phone, "password": password, "userType": user_type, "name": name or phone},
        )
        assert response.status_code == 200, response.text

    return _signup


@pytest.fixture
def auth_headers(client: TestClient) -> Callable[[str, str], dict]:
    """Log in and return an Authorization header for the account"""

    def _login(phone: str, password: str) -> dict:
        response = client.post("/api/login", json={"phoneNumber": phone, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def clock() -> StepClock:
    # Wednesday 2024-05-15 10:00 UTC
    return StepClock(datetime(2024, 5, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def identity_store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture
def ledger_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def identity_service(identity_store: InMemoryIdentityStore) -> IdentityService:
    return IdentityService(
        store=identity_store,
        hasher=PasswordHasher(rounds=TEST_BCRYPT_ROUNDS),
        tokens=TokenService(secret=TEST_JWT_SECRET),
    )


@pytest.fixture
def make_engine(
    identity_store: InMemoryIdentityStore,
    ledger_store: InMemoryLedgerStore,
    clock: StepClock,
) -> Callable[..., LedgerEngine]:
    """Ledger engine over the in-memory stores with a chosen policy"""

    def _make(**policy) -> LedgerEngine:
        return LedgerEngine(identity_store, ledger_store, LedgerPolicy(**policy), clock=clock)

    return _make


@pytest.fixture
def owner() -> Identity:
    return Identity(identifier="B1", role=Role.OWNER, name="Corner Shop")


@pytest.fixture
def customer() -> Identity:
    return Identity(identifier="C1", role=Role.CUSTOMER, name="Asha")


@pytest.fixture
def outsider() -> Identity:
    return Identity(identifier="X1", role=Role.CUSTOMER, name="Stranger")


def make_transaction(
    id: int,
    kind: TransactionKind,
    amount: str,
    timestamp: datetime | None = None,
    business_id: str = "B1",
    customer_id: str = "C1",
) -> Transaction:
    """Build a recorded transaction for pure-function tests"""
    return Transaction(
        id=id,
        business_id=business_id,
        customer_id=customer_id,
        kind=kind,
        amount=Decimal(amount),
        description="",
        photo=None,
        timestamp=timestamp or datetime(2024, 5, 15, 10, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def txn() -> Callable[..., Transaction]:
    return make_transaction
