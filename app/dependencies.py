from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User, UserRole
from app.models.company import Company
from app.core.security import CredentialService, InvalidToken, get_credential_service
from app.core.exceptions import Unauthenticated, TenantSuspended
from app.core.logging_config import logger


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an "Authorization: Bearer <token>" header value.

    Raises:
        Unauthenticated: If the header is missing or uses another scheme
    """
    if not authorization:
        raise Unauthenticated("Not authorized, no token provided")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Not authorized, no token provided")
    return token.strip()


class IdentityResolver:
    """
    Turns a session token into the acting principal.

    The tenant status is checked on every call, not only at login, so that
    suspending a company locks out its members on their next request even
    though their tokens are still cryptographically valid.
    """

    def __init__(self, credentials: CredentialService):
        self.credentials = credentials

    def resolve(self, db: Session, token: str) -> User:
        """
        Resolve a token to an active principal.

        Args:
            db: Database session
            token: Raw bearer token

        Returns:
            User instance (callers must never expose hashed_password)

        Raises:
            Unauthenticated: Invalid/expired token, unknown or inactive user
            TenantSuspended: Bound company is suspended and user is not superadmin
        """
        try:
            claims = self.credentials.verify(token)
        except InvalidToken:
            raise Unauthenticated("Invalid token")

        user = db.get(User, claims["principal_id"])
        if user is None:
            raise Unauthenticated("User not found")

        if not user.is_active:
            logger.warning(f"Rejected token for inactive user_id={user.id}")
            raise Unauthenticated("Account disabled")

        if user.role != UserRole.superadmin and user.company_id:
            company = db.get(Company, user.company_id)
            # Always read the current status, not a copy cached in the session
            if company is not None:
                db.refresh(company, attribute_names=["status"])
            if company is not None and company.is_suspended:
                logger.warning(f"Rejected user_id={user.id}: company_id={company.id} is suspended")
                raise TenantSuspended()

        return user


def get_identity_resolver(
    credentials: CredentialService = Depends(get_credential_service)
) -> IdentityResolver:
    return IdentityResolver(credentials)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    resolver: IdentityResolver = Depends(get_identity_resolver)
) -> User:
    """
    Extract the JWT from the Authorization Bearer header and return the authenticated User.

    Args:
        request: FastAPI Request to extract Authorization header
        db: Database session
        resolver: Identity resolver built from the configured credential service

    Returns:
        User object with its company relationship loaded

    Raises:
        Unauthenticated: If the token is missing/invalid or the user is unknown/inactive
        TenantSuspended: If the user's company is suspended
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    return resolver.resolve(db, token)
