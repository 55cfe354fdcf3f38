from typing import Optional, Tuple
from sqlalchemy.orm import Session
from app.crud import user as user_crud
from app.models.user import User, UserRole
from app.schemas.user import UserRegister
from app.core.security import CredentialService, get_password_hash
from app.core.exceptions import Unauthenticated, TenantSuspended, ValidationFailed
from app.core.logging_config import logger

INVALID_CREDENTIALS = "Incorrect email or password"


class AuthService:
    """
    Login and self-registration.

    Login failures for an unknown email and for a wrong password return the
    same message and both run a bcrypt check, so responses do not reveal
    whether an account exists.
    """

    def __init__(self):
        self.crud = user_crud
        self._dummy_hash: Optional[str] = None

    def _timing_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = get_password_hash("not-a-real-password")
        return self._dummy_hash

    def login(
        self,
        db: Session,
        credentials: CredentialService,
        email: str,
        password: str
    ) -> Tuple[str, User]:
        """
        Check credentials and issue a session token.

        Returns:
            Tuple of (token, user)

        Raises:
            Unauthenticated: Unknown email, wrong password or disabled account
            TenantSuspended: The user's company is suspended (non-superadmin)
        """
        user = self.crud.get_by_email(db, email=email)

        if user is None:
            credentials.verify_password(password, self._timing_hash())
            logger.info("Login failed: unknown email")
            raise Unauthenticated(INVALID_CREDENTIALS)

        if not credentials.verify_password(password, user.hashed_password):
            logger.info(f"Login failed: wrong password for user_id={user.id}")
            raise Unauthenticated(INVALID_CREDENTIALS)

        if not user.is_active:
            raise Unauthenticated("Account disabled")

        if user.role != UserRole.superadmin and user.company is not None:
            if user.company.is_suspended:
                raise TenantSuspended()

        logger.info(f"User logged in: user_id={user.id}, role={user.role.value}")
        return credentials.issue(user.id), user

    def register(
        self,
        db: Session,
        credentials: CredentialService,
        data: UserRegister
    ) -> Tuple[str, User]:
        """
        Create a self-registered account.

        Self-registration always yields an unbound employee; roles and
        company bindings are granted by a superadmin afterwards.

        Raises:
            ValidationFailed: If the email is already in use
        """
        if self.crud.get_by_email(db, email=data.email):
            raise ValidationFailed(
                "Email already in use",
                errors=[{"field": "email", "message": "Email already in use"}],
            )
        try:
            user = self.crud.create_user(
                db=db,
                email=data.email,
                password=data.password,
                role=UserRole.employee,
                first_name=data.first_name,
                last_name=data.last_name,
            )
        except ValueError:
            raise ValidationFailed("Email already in use")

        logger.info(f"User registered: user_id={user.id}")
        return credentials.issue(user.id), user


# Create a singleton instance
auth_service = AuthService()
