from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.crud.base import CRUDBase
from app.models.user import User, UserRole
from app.core.security import get_password_hash


class CRUDUser(CRUDBase[User]):
    """
    CRUD operations for User model.

    Users are looked up globally (login, identity resolution), so unlike
    directory records there is no tenant filter on get/get_by_email.
    """

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        """
        Retrieve user by email address (case-insensitive).

        Args:
            db: Database session
            email: User email

        Returns:
            User instance or None if not found
        """
        return self.find_one(db, {"email": email.strip().lower()})

    def create_user(
        self,
        db: Session,
        *,
        email: str,
        password: str,
        role: UserRole = UserRole.employee,
        company_id: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        is_active: bool = True,
        commit: bool = True
    ) -> User:
        """
        Create a new user with hashed password.

        Args:
            db: Database session
            email: User email
            password: Plain text password (will be hashed)
            role: Role of the new principal
            company_id: Tenant the user belongs to, if any
            is_active: Whether user is active
            commit: Whether to commit immediately

        Returns:
            Created User instance

        Raises:
            ValueError: If a user with this email already exists
        """
        db_user = User(
            email=email.strip().lower(),
            hashed_password=get_password_hash(password),
            role=role,
            company_id=company_id,
            first_name=first_name,
            last_name=last_name,
            is_active=is_active
        )
        db.add(db_user)

        try:
            if commit:
                db.commit()
                db.refresh(db_user)
            else:
                db.flush()  # Get ID without committing
        except IntegrityError as e:
            db.rollback()
            if "unique" in str(e).lower() or "user_email_key" in str(e):
                raise ValueError(f"User with email {email} already exists")
            raise e

        return db_user


# Create singleton instance
user = CRUDUser(User)
