from typing import List
from sqlalchemy.orm import Session
from app.crud import user as user_crud
from app.crud import company as company_crud
from app.models.user import User, UserRole
from app.schemas.user import UserUpdate
from app.core.tenant_context import normalize_tenant_id
from app.core.exceptions import Forbidden, NotFound, ValidationFailed
from app.core.logging_config import logger


class UserService:
    """
    Service layer for principals.

    Users are never hard-deleted; a superadmin deactivates them with
    is_active=False instead.
    """

    def __init__(self):
        self.crud = user_crud

    def _check_self_or_superadmin(self, principal: User, user_id: str) -> None:
        if principal.role != UserRole.superadmin and str(principal.id) != str(user_id):
            raise Forbidden("Access denied")

    def get_users(self, db: Session, skip: int = 0, limit: int = 100) -> List[User]:
        return self.crud.find(db, skip=skip, limit=limit)

    def get_user(self, db: Session, principal: User, user_id: str) -> User:
        """
        Get a user profile. Users can only see themselves unless superadmin.

        Raises:
            Forbidden: If the principal asks for someone else
            NotFound: If the user does not exist
        """
        self._check_self_or_superadmin(principal, user_id)
        user = self.crud.get(db, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def update_user(self, db: Session, principal: User, user_id: str, user_data: UserUpdate) -> User:
        """
        Update a user profile.

        role, company_id and is_active are only applied for superadmin callers.

        Raises:
            Forbidden: If the principal edits someone else
            NotFound: Unknown user or unknown company
            ValidationFailed: If the new email is already in use
        """
        self._check_self_or_superadmin(principal, user_id)
        user = self.crud.get(db, user_id)
        if not user:
            raise NotFound("User not found")

        update_data = user_data.model_dump(exclude_unset=True)
        if principal.role != UserRole.superadmin:
            for field in ("role", "company_id", "is_active"):
                update_data.pop(field, None)

        for field in ("email", "role", "is_active"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()
            if update_data["email"] != user.email and self.crud.get_by_email(db, email=update_data["email"]):
                raise ValidationFailed(
                    "Email already in use",
                    errors=[{"field": "email", "message": "Email already in use"}],
                )

        if "company_id" in update_data:
            company_id = normalize_tenant_id(update_data["company_id"])
            if company_id and not company_crud.get(db, company_id):
                raise NotFound("Company not found")
            update_data["company_id"] = company_id

        user = self.crud.update(db, db_obj=user, obj_in=update_data)
        logger.info(f"User updated: id={user.id}, by user_id={principal.id}")
        return user


# Create a singleton instance
user_service = UserService()
