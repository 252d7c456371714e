"""Unit tests for signup, login and token handling"""

import pytest
from jose import jwt

from khata_ledger.domain.exceptions import (
    DuplicateIdentity,
    InvalidCredentials,
    InvalidRole,
    InvalidToken,
    ValidationError,
)
from khata_ledger.domain.models import Identity, Role
from khata_ledger.infrastructure.security import PasswordHasher, TokenService


def test_register_hashes_password(identity_service, identity_store):
    identity_service.register("B1", "p", "owner", "Corner Shop")

    account = identity_store.get("B1")
    assert account.role is Role.OWNER
    assert account.password_hash != "p"
    assert account.password_hash.startswith("$2")


def test_register_duplicate_regardless_of_password_or_role(identity_service):
    identity_service.register("C1", "q", "customer", "Asha")

    with pytest.raises(DuplicateIdentity):
        identity_service.register("C1", "q", "customer", "Asha")
    with pytest.raises(DuplicateIdentity):
        identity_service.register("C1", "different", "owner", "Someone Else")


def test_register_duplicate_with_invalid_role(identity_service, identity_store):
    """An existing identifier wins over a bad role in the retry"""
    identity_service.register("C1", "q", "customer", "Asha")

    with pytest.raises(DuplicateIdentity):
        identity_service.register("C1", "other", "admin", "Root")
    assert identity_store.get("C1").role is Role.CUSTOMER


def test_register_invalid_role(identity_service, identity_store):
    with pytest.raises(InvalidRole):
        identity_service.register("A1", "p", "admin", "Root")
    assert identity_store.get("A1") is None


@pytest.mark.parametrize(
    "identifier,password,role,name",
    [
        ("", "p", "owner", "Shop"),
        ("B1", None, "owner", "Shop"),
        ("B1", "p", None, "Shop"),
        ("B1", "p", "owner", ""),
    ],
)
def test_register_missing_fields(identity_service, identifier, password, role, name):
    with pytest.raises(ValidationError):
        identity_service.register(identifier, password, role, name)


def test_authenticate_returns_identity_and_token(identity_service):
    identity_service.register("B1", "p", "owner", "Corner Shop", photo="blob")

    result = identity_service.authenticate("B1", "p")

    assert result.identity == Identity("B1", Role.OWNER, "Corner Shop", "blob")
    assert identity_service.tokens.verify(result.token) == result.identity


def test_authenticate_wrong_password_and_unknown_user(identity_service):
    identity_service.register("B1", "p", "owner", "Corner Shop")

    with pytest.raises(InvalidCredentials):
        identity_service.authenticate("B1", "wrong")
    with pytest.raises(InvalidCredentials):
        identity_service.authenticate("nobody", "p")


def test_authenticate_missing_fields(identity_service):
    with pytest.raises(ValidationError):
        identity_service.authenticate("B1", "")


def test_list_by_role_only_owners(identity_service):
    identity_service.register("B2", "p", "owner", "Second Shop")
    identity_service.register("C1", "q", "customer", "Asha")
    identity_service.register("B1", "p", "owner", "Corner Shop")

    owners = identity_service.list_by_role(Role.OWNER)

    assert [a.identifier for a in owners] == ["B1", "B2"]


def test_password_hasher_roundtrip():
    hasher = PasswordHasher(rounds=4)
    hashed = hasher.hash("secret")
    assert hasher.verify("secret", hashed)
    assert not hasher.verify("Secret", hashed)


class TestTokenService:
    identity = Identity("C1", Role.CUSTOMER, "Asha")

    def test_tampered_signature(self):
        token = TokenService(secret="a").issue(self.identity)
        with pytest.raises(InvalidToken):
            TokenService(secret="b").verify(token)

    def test_expired(self):
        token = TokenService(secret="a", expire_hours=-1).issue(self.identity)
        with pytest.raises(InvalidToken):
            TokenService(secret="a").verify(token)

    def test_garbage(self):
        with pytest.raises(InvalidToken):
            TokenService(secret="a").verify("not-a-token")

    def test_unknown_role_claim(self):
        token = jwt.encode({"sub": "C1", "role": "admin"}, "a", algorithm="HS256")
        with pytest.raises(InvalidToken):
            TokenService(secret="a").verify(token)

    def test_missing_subject(self):
        token = jwt.encode({"role": "customer"}, "a", algorithm="HS256")
        with pytest.raises(InvalidToken):
            TokenService(secret="a").verify(token)


def test_password_hasher_rejects_oversized_password():
    hasher = PasswordHasher(rounds=4)
    with pytest.raises(ValidationError):
        hasher.hash("x" * 5000)
    assert not hasher.verify("x" * 5000, hasher.hash("secret"))
