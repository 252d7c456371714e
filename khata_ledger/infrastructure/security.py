"""Password hashing and bearer token signing"""

from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import PasswordSizeError

from khata_ledger.domain.exceptions import InvalidToken, ValidationError
from khata_ledger.domain.models import Identity, Role
from khata_ledger.utils.date_utils import utcnow


class PasswordHasher:
    """One-way bcrypt hashing of account passwords"""

    def __init__(self, rounds: int = 12):
        self.context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        try:
            return self.context.hash(password)
        except PasswordSizeError as e:
            raise ValidationError("Password is too long") from e

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self.context.verify(password, password_hash)
        except PasswordSizeError:
            # no stored password can be this long
            return False


class TokenService:
    """Issues and verifies signed, time-bounded identity assertions (JWT)"""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_hours: int = 12):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = timedelta(hours=expire_hours)

    def issue(self, identity: Identity) -> str:
        claims = {
            "sub": identity.identifier,
            "role": identity.role.value,
            "name": identity.name,
            "photo": identity.photo,
            "exp": utcnow() + self.expires_delta,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """
        Decode a token back into the caller's identity.

        Raises:
            InvalidToken: On bad signature, expiry or missing claims
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken() from e

        identifier = payload.get("sub")
        if not identifier:
            raise InvalidToken()

        try:
            role = Role(payload.get("role"))
        except ValueError as e:
            raise InvalidToken() from e

        return Identity(
            identifier=identifier,
            role=role,
            name=payload.get("name") or identifier,
            photo=payload.get("photo"),
        )
