"""Account registration, login and the owner directory"""

from dataclasses import dataclass
from typing import List, Optional

from khata_ledger.domain.exceptions import DuplicateIdentity, InvalidCredentials, InvalidRole, ValidationError
from khata_ledger.domain.models import Account, Identity, Role
from khata_ledger.domain.stores import IdentityStore


@dataclass(frozen=True)
class LoginResult:
    token: str
    identity: Identity


def parse_role(value: Optional[str]) -> Role:
    """Map a wire role string onto the closed Role enum"""
    try:
        return Role(value)
    except ValueError:
        raise InvalidRole() from None


class IdentityService:
    """Signup, login and directory lookups over an IdentityStore"""

    def __init__(self, store: IdentityStore, hasher, tokens):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(
        self,
        identifier: Optional[str],
        password: Optional[str],
        role: Optional[str],
        name: Optional[str],
        photo: Optional[str] = None,
    ) -> Account:
        """
        Create an account with a hashed credential.

        Raises:
            ValidationError: Identifier, password, role or name missing
            DuplicateIdentity: Identifier already registered, whatever the role
            InvalidRole: Role is not customer/owner
        """
        if not identifier or not password or not role or not name:
            raise ValidationError()

        if self.store.get(identifier) is not None:
            raise DuplicateIdentity()
        parsed_role = parse_role(role)

        # the store still rejects a concurrent insert that slips past the check above
        account = Account(
            identifier=identifier,
            password_hash=self.hasher.hash(password),
            role=parsed_role,
            name=name,
            photo=photo or None,
        )
        return self.store.add(account)

    def authenticate(self, identifier: Optional[str], password: Optional[str]) -> LoginResult:
        """
        Verify credentials and issue a bearer token.

        Unknown identifiers and wrong passwords fail identically.
        """
        if not identifier or not password:
            raise ValidationError("Missing identifier or password")

        account = self.store.get(identifier)
        if account is None or not self.hasher.verify(password, account.password_hash):
            raise InvalidCredentials()

        identity = Identity(
            identifier=account.identifier,
            role=account.role,
            name=account.name,
            photo=account.photo,
        )
        return LoginResult(token=self.tokens.issue(identity), identity=identity)

    def list_by_role(self, role: Role) -> List[Account]:
        return self.store.list_by_role(role)
