import uuid
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from app.crud import employee as employee_crud
from app.crud import company as company_crud
from app.crud import user as user_crud
from app.models.employee import Employee
from app.models.user import User, UserRole
from app.schemas.employee import EmployeeCreate, EmployeeUpdate
from app.core.tenant_context import can_access_employee, can_access_tenant, normalize_tenant_id, scope_query
from app.core.exceptions import Forbidden, Internal, NotFound, ValidationFailed
from app.core.logging_config import logger
from app.services.media import ImageUpload, MediaHost, MediaHostError, delete_quietly, validate_image


def _validate_id(value: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise ValidationFailed("Invalid id", errors=[{"field": "id", "message": "Invalid id"}])


class EmployeeService:
    """
    Service layer for employee directory records.

    Lists are filtered with scope_query() before anything else; single
    record operations then run can_access_employee() on the loaded row.
    """

    IMAGE_FIELDS = ("avatar", "background")

    def __init__(self):
        self.crud = employee_crud

    def _get_accessible(self, db: Session, principal: User, employee_id: str) -> Employee:
        employee = self.crud.get(db, _validate_id(employee_id))
        if not employee:
            raise NotFound("Employee not found")
        if not can_access_employee(principal, employee):
            logger.warning(f"Employee access denied: user_id={principal.id}, employee_id={employee.id}")
            raise Forbidden("Access denied")
        return employee

    def _check_owner(self, db: Session, principal: User, user_id: str, company_id: str) -> None:
        """
        The owning user must exist and, unless a superadmin links it, belong
        to the record's company.
        """
        owner = user_crud.get(db, user_id)
        if not owner:
            raise ValidationFailed(
                "User not found",
                errors=[{"field": "user_id", "message": "User not found"}],
            )
        if principal.role != UserRole.superadmin and normalize_tenant_id(owner.company_id) != company_id:
            logger.warning(
                f"Rejected cross-tenant owner: user_id={principal.id}, owner_id={owner.id}, company_id={company_id}"
            )
            raise Forbidden("Access denied - the user belongs to another company")

    def _upload_images(
        self,
        media: MediaHost,
        images: Dict[str, ImageUpload],
        record_label: str
    ) -> Dict[str, str]:
        """
        Validate every image, then upload them.

        Returns:
            Mapping of field name to delivery URL

        Raises:
            ValidationFailed: Unknown field or not an acceptable image
            Internal: If an upload fails (images already uploaded are removed)
        """
        for field, image in images.items():
            if field not in self.IMAGE_FIELDS:
                raise ValidationFailed(f"Unknown image field: {field}")
            validate_image(image.content, image.content_type)

        urls: Dict[str, str] = {}
        for field, image in images.items():
            try:
                urls[field] = media.upload(
                    image.content,
                    filename=image.filename,
                    content_type=image.content_type,
                    field=field
                )
            except MediaHostError as e:
                logger.error(f"{field} upload failed for {record_label}: {str(e)}")
                for url in urls.values():
                    delete_quietly(media, url)
                raise Internal(f"{field.capitalize()} upload failed")
        return urls

    def get_employees(
        self,
        db: Session,
        principal: User,
        skip: int = 0,
        limit: int = 100
    ) -> List[Employee]:
        """
        List the records the principal may see: all (superadmin), the own
        company's (company_admin) or the ones it owns (employee).
        """
        return self.crud.find(db, scope_query(principal), skip=skip, limit=limit)

    def get_company_employees(
        self,
        db: Session,
        principal: User,
        company_id: str,
        skip: int = 0,
        limit: int = 100
    ) -> List[Employee]:
        """
        List a company's records, still narrowed by the principal's scope.

        Raises:
            NotFound: If the company does not exist
            Forbidden: If the principal is bound to another company
        """
        company_id = _validate_id(company_id)
        company = company_crud.get(db, company_id)
        if not company:
            raise NotFound("Company not found")
        if not can_access_tenant(principal, company.id):
            raise Forbidden("Access denied")

        filters = dict(scope_query(principal))
        filters["company_id"] = company.id
        return self.crud.find(db, filters, skip=skip, limit=limit)

    def get_public_profile(self, db: Session, employee_id: str) -> Employee:
        """
        Fetch a record for public profile display (QR/NFC cards).

        This lookup is deliberately unauthenticated and skips the guards.
        """
        employee = self.crud.get(db, _validate_id(employee_id))
        if not employee:
            raise NotFound("Employee not found")
        return employee

    def create_employee(
        self,
        db: Session,
        principal: User,
        employee_data: EmployeeCreate,
        media: Optional[MediaHost] = None,
        images: Optional[Dict[str, ImageUpload]] = None
    ) -> Employee:
        """
        Create a directory record in the target company, optionally with
        its avatar and background.

        Raises:
            ValidationFailed: Missing/invalid company, unknown user_id or bad image
            Forbidden: Target company or owning user belongs to another tenant
            NotFound: If the company does not exist
            Internal: If an image upload fails
        """
        company_id = normalize_tenant_id(employee_data.company)
        if not company_id:
            raise ValidationFailed(
                "Company is required",
                errors=[{"field": "company", "message": "Company is required"}],
            )
        if not can_access_tenant(principal, company_id):
            raise Forbidden("Access denied - you can only create employees for your own company")

        company = company_crud.get(db, company_id)
        if not company:
            raise NotFound("Company not found")

        if employee_data.user_id:
            self._check_owner(db, principal, employee_data.user_id, company.id)

        obj_in = employee_data.model_dump(exclude={"company"})
        # Empty optional values fall back to column defaults
        obj_in = {key: value for key, value in obj_in.items() if value is not None}
        obj_in["email"] = obj_in["email"].lower()
        obj_in["company_id"] = company.id

        urls = self._upload_images(media, images, f"new employee in company_id={company.id}") if images else {}
        obj_in.update(urls)

        try:
            employee = self.crud.create(db, obj_in=obj_in)
        except Exception:
            db.rollback()
            for url in urls.values():
                delete_quietly(media, url)
            raise

        logger.info(f"Employee created: id={employee.id}, company_id={company.id}, by user_id={principal.id}")
        return employee

    def update_employee(
        self,
        db: Session,
        principal: User,
        employee_id: str,
        employee_data: EmployeeUpdate,
        media: Optional[MediaHost] = None,
        images: Optional[Dict[str, ImageUpload]] = None
    ) -> Employee:
        """
        Update text fields of a record and, optionally, its images.

        Only a superadmin may move a record to another company.

        Raises:
            NotFound: Unknown employee, or unknown target company
            Forbidden: If the principal may not edit this record
            ValidationFailed: If an image is not acceptable
            Internal: If an image upload fails
        """
        employee = self._get_accessible(db, principal, employee_id)

        update_data = employee_data.model_dump(exclude_unset=True)
        new_company = update_data.pop("company", None)

        changes = {
            field: value for field, value in update_data.items()
            if field in self.crud.EDITABLE_FIELDS
            and not (value is None and field in ("name", "surname", "email"))
        }
        if changes.get("email"):
            changes["email"] = changes["email"].lower()

        if new_company is not None and principal.role == UserRole.superadmin:
            company_id = normalize_tenant_id(new_company)
            if company_id and company_id != employee.company_id:
                company = company_crud.get(db, company_id)
                if not company:
                    raise NotFound("Company not found")
                changes["company_id"] = company.id

        if images:
            urls = self._upload_images(media, images, f"employee_id={employee.id}")
            for field, url in urls.items():
                delete_quietly(media, getattr(employee, field))
                changes[field] = url

        return self.crud.update(db, db_obj=employee, obj_in=changes)

    def replace_image(
        self,
        db: Session,
        principal: User,
        employee_id: str,
        media: MediaHost,
        *,
        field: str,
        content: bytes,
        filename: str,
        content_type: str
    ) -> Employee:
        """
        Upload a new avatar or background and drop the previous one.

        Raises:
            NotFound, Forbidden, ValidationFailed
            Internal: If the media host upload fails
        """
        if field not in self.IMAGE_FIELDS:
            raise ValidationFailed(f"Unknown image field: {field}")

        employee = self._get_accessible(db, principal, employee_id)
        urls = self._upload_images(
            media,
            {field: ImageUpload(content, filename, content_type)},
            f"employee_id={employee.id}"
        )

        delete_quietly(media, getattr(employee, field))
        setattr(employee, field, urls[field])
        return self.crud.save(db, employee)

    def delete_employee(self, db: Session, principal: User, employee_id: str, media: MediaHost) -> None:
        """
        Delete a record and, best-effort, its images.

        Raises:
            NotFound: If the employee does not exist
            Forbidden: If the record belongs to another company
        """
        employee = self._get_accessible(db, principal, employee_id)

        for field in self.IMAGE_FIELDS:
            delete_quietly(media, getattr(employee, field))

        self.crud.delete(db, db_obj=employee)
        logger.info(f"Employee deleted: id={employee_id}, by user_id={principal.id}")


# Create a singleton instance
employee_service = EmployeeService()
