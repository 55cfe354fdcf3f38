from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
import bcrypt
from app.core.config import settings


class InvalidToken(Exception):
    """Raised for any token that cannot be trusted (bad signature, malformed or expired)."""


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash."""
    if not plain_password or not hashed_password:
        return False
    password_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class CredentialService:
    """
    Issues and verifies signed session tokens and handles password hashes.

    Tokens are stateless JWTs carrying the principal id, the issue time and
    the expiry. There is no server-side session store, so a token stays valid
    until it expires.

    Args:
        secret_key: Signing secret
        algorithm: JWT signing algorithm
        expire_minutes: Lifetime of issued tokens
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24 * 7):
        if not secret_key:
            raise ValueError("A token signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, principal_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token for a principal.

        Args:
            principal_id: ID of the user the token is issued to
            expires_delta: Optional custom lifetime. Defaults to the configured window.

        Returns:
            Encoded JWT token string
        """
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + (expires_delta or timedelta(minutes=self.expire_minutes))
        claims = {
            "id": str(principal_id),
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """
        Verify a token and return its principal id.

        Every failure raises the same InvalidToken error so callers cannot
        tell an expired token from a tampered one.

        Returns:
            Dictionary with the principal_id claim

        Raises:
            InvalidToken: If the token is malformed, badly signed or expired
        """
        if not token:
            raise InvalidToken("Invalid token")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidToken("Invalid token")

        principal_id = payload.get("id")
        if not principal_id or not isinstance(principal_id, str):
            raise InvalidToken("Invalid token")
        return {"principal_id": principal_id}

    def hash_password(self, plain: str) -> str:
        return get_password_hash(plain)

    def verify_password(self, plain: str, hashed: Optional[str]) -> bool:
        return verify_password(plain, hashed)


credential_service = CredentialService(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
)


def get_credential_service() -> CredentialService:
    """FastAPI dependency returning the configured credential service."""
    return credential_service
