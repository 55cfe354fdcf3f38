from typing import Any, Dict, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.crud.base import CRUDBase
from app.models.company import Company
from app.models.user import User, UserRole
from app.crud.user import user as user_crud


class CRUDCompany(CRUDBase[Company]):
    """
    CRUD operations for Company model.

    Company IS the tenant, so scoping for company_admin filters on
    Company.id rather than a company_id column.
    """

    def get_by_email(self, db: Session, email: str) -> Optional[Company]:
        return self.find_one(db, {"email": email.strip().lower()})

    def create_with_admin(
        self,
        db: Session,
        *,
        company_data: Dict[str, Any],
        email: str,
        password: str
    ) -> Tuple[Company, User]:
        """
        Create a company and its company_admin user atomically.

        Args:
            db: Database session
            company_data: Company column values (name, email, ...)
            email: Admin user email
            password: Admin user password (will be hashed)

        Returns:
            Tuple of (created Company, created User)

        Raises:
            ValueError: If the company or user email already exists
        """
        try:
            company = Company(**company_data)
            db.add(company)
            db.flush()  # Get company.id without committing

            admin = user_crud.create_user(
                db=db,
                email=email,
                password=password,
                role=UserRole.company_admin,
                company_id=company.id,
                commit=False  # Commit both together
            )
            company.created_by = admin.id

            db.commit()
            db.refresh(company)
            db.refresh(admin)

            return company, admin

        except IntegrityError as e:
            db.rollback()
            if "unique" in str(e).lower():
                raise ValueError(f"Email {email} is already in use")
            raise e


# Create singleton instance
company = CRUDCompany(Company)
