from typing import List, Tuple
from sqlalchemy.orm import Session
from app.crud import company as company_crud
from app.crud import user as user_crud
from app.crud import employee as employee_crud
from app.models.company import Company, CompanyStatus
from app.models.user import User, UserRole
from app.schemas.company import CompanyCreate, CompanySignup, CompanyUpdate
from app.core.security import CredentialService
from app.core.tenant_context import can_access_tenant, scope_query
from app.core.exceptions import Forbidden, Internal, NotFound, ValidationFailed
from app.core.logging_config import logger
from app.services.media import MediaHost, MediaHostError, delete_quietly, validate_image


class CompanyService:
    """
    Service layer for companies (tenants).

    Role restrictions are applied by the routers; this layer applies the
    tenant scope to list queries and the tenant guard to single records.
    """

    def __init__(self):
        self.crud = company_crud

    def _ensure_email_free(self, db: Session, email: str) -> None:
        if self.crud.get_by_email(db, email=email):
            raise ValidationFailed(
                "This email is already used by a company",
                errors=[{"field": "email", "message": "Email already in use"}],
            )

    def _get_accessible(self, db: Session, principal: User, company_id: str) -> Company:
        company = self.crud.get(db, company_id)
        if not company:
            raise NotFound("Company not found")
        if not can_access_tenant(principal, company.id):
            raise Forbidden("Access denied")
        return company

    def get_companies(
        self,
        db: Session,
        principal: User,
        skip: int = 0,
        limit: int = 100
    ) -> List[Company]:
        """
        List the companies visible to the principal (all for superadmin, own otherwise).
        """
        filters = scope_query(principal, tenant_field="id", owner_field=None)
        return self.crud.find(db, filters, skip=skip, limit=limit)

    def get_company(self, db: Session, principal: User, company_id: str) -> Company:
        """
        Get a company by ID.

        Raises:
            NotFound: If the company does not exist
            Forbidden: If the principal is bound to another company
        """
        return self._get_accessible(db, principal, company_id)

    def create_company(self, db: Session, principal: User, company_data: CompanyCreate) -> Company:
        """
        Create a company on behalf of a superadmin.

        Raises:
            ValidationFailed: If the company email is already used
        """
        self._ensure_email_free(db, company_data.email)
        obj_in = company_data.model_dump()
        obj_in["email"] = obj_in["email"].lower()
        obj_in["created_by"] = principal.id
        company = self.crud.create(db, obj_in=obj_in)
        logger.info(f"Company created: id={company.id}, by user_id={principal.id}")
        return company

    def signup(
        self,
        db: Session,
        credentials: CredentialService,
        signup_data: CompanySignup
    ) -> Tuple[str, Company, User]:
        """
        Public tenant sign-up: a company plus its first company_admin.

        Returns:
            Tuple of (token, company, admin user)

        Raises:
            ValidationFailed: If the email is used by a company or a user
        """
        self._ensure_email_free(db, signup_data.email)
        if user_crud.get_by_email(db, email=signup_data.email):
            raise ValidationFailed(
                "Email already in use",
                errors=[{"field": "email", "message": "Email already in use"}],
            )

        try:
            company, admin = self.crud.create_with_admin(
                db=db,
                company_data={"name": signup_data.name, "email": signup_data.email.lower()},
                email=signup_data.email,
                password=signup_data.password,
            )
        except ValueError as e:
            raise ValidationFailed(str(e))

        logger.info(f"Company signed up: id={company.id}, admin user_id={admin.id}")
        return credentials.issue(admin.id), company, admin

    def update_company(
        self,
        db: Session,
        principal: User,
        company_id: str,
        company_data: CompanyUpdate
    ) -> Company:
        """
        Update company details.

        The status field is only honoured for superadmin callers.

        Raises:
            NotFound: If the company does not exist
            Forbidden: If the company belongs to another tenant
            ValidationFailed: If the new email is already used
        """
        company = self._get_accessible(db, principal, company_id)

        update_data = company_data.model_dump(exclude_unset=True)
        if principal.role != UserRole.superadmin:
            update_data.pop("status", None)
        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()
            if update_data["email"] != company.email:
                self._ensure_email_free(db, update_data["email"])
        # Required columns cannot be cleared
        for field in ("name", "email", "status"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        return self.crud.update(db, db_obj=company, obj_in=update_data)

    def replace_logo(
        self,
        db: Session,
        principal: User,
        company_id: str,
        media: MediaHost,
        *,
        content: bytes,
        filename: str,
        content_type: str
    ) -> Company:
        """
        Upload a new logo and drop the previous one.

        The upload must succeed for the change to be saved; removing the old
        image from the media host is best-effort.

        Raises:
            NotFound, Forbidden, ValidationFailed
            Internal: If the media host upload fails
        """
        company = self._get_accessible(db, principal, company_id)
        validate_image(content, content_type)

        try:
            logo_url = media.upload(content, filename=filename, content_type=content_type, field="logo")
        except MediaHostError as e:
            logger.error(f"Logo upload failed for company_id={company.id}: {str(e)}")
            raise Internal("Logo upload failed")

        delete_quietly(media, company.logo)
        company.logo = logo_url
        return self.crud.save(db, company)

    def toggle_status(self, db: Session, company_id: str) -> Company:
        """
        Switch a company between active and suspended (superadmin routes only).
        """
        company = self.crud.get(db, company_id)
        if not company:
            raise NotFound("Company not found")
        company.status = (
            CompanyStatus.suspended if company.status == CompanyStatus.active else CompanyStatus.active
        )
        company = self.crud.save(db, company)
        logger.info(f"Company status changed: id={company.id}, status={company.status.value}")
        return company

    def delete_company(self, db: Session, company_id: str, media: MediaHost) -> None:
        """
        Delete a company (superadmin routes only).

        The logo and the avatars and backgrounds of the company's employees
        are removed from the media host first on a best-effort basis; the
        records are deleted even if that fails. Employee rows go with the
        company through the foreign key cascade.

        Raises:
            NotFound: If the company does not exist
        """
        company = self.crud.get(db, company_id)
        if not company:
            raise NotFound("Company not found")

        delete_quietly(media, company.logo)
        for employee in employee_crud.find(db, {"company_id": company.id}, limit=None):
            delete_quietly(media, employee.avatar)
            delete_quietly(media, employee.background)

        self.crud.delete(db, db_obj=company)
        logger.info(f"Company deleted: id={company_id}")


# Create a singleton instance
company_service = CompanyService()
