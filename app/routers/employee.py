from typing import Any, Dict, Tuple, Type, TypeVar
from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile
from app.database import get_db
from app.dependencies import get_current_user
from app.core.authorization import require_roles
from app.core.exceptions import ValidationFailed
from app.models.user import User, UserRole
from app.schemas.common import DataResponse, ListResponse, MessageResponse
from app.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeResponse
from app.services import employee_service
from app.services.media import ImageUpload, MediaHost, get_media_host
from app.core.logging_config import logger

router = APIRouter()

SchemaType = TypeVar("SchemaType", bound=BaseModel)

# Create and update take either a JSON body or a multipart form with optional
# "avatar" and "background" files next to the text fields
EMPLOYEE_BODY_DOC = {
    "requestBody": {
        "content": {
            "application/json": {"schema": {"type": "object"}},
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "avatar": {"type": "string", "format": "binary"},
                        "background": {"type": "string", "format": "binary"},
                    },
                    "additionalProperties": {"type": "string"},
                }
            },
        }
    }
}


async def _read_employee_payload(
    request: Request,
    drop_empty: bool
) -> Tuple[Dict[str, Any], Dict[str, ImageUpload]]:
    """
    Split the request body into text fields and image files.

    Args:
        request: Incoming request (JSON or multipart/form-data)
        drop_empty: Skip empty form values so they fall back to defaults

    Returns:
        Tuple of (field values, images keyed by field name)
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        data: Dict[str, Any] = {}
        images: Dict[str, ImageUpload] = {}
        for key, value in form.multi_items():
            if isinstance(value, StarletteUploadFile):
                if key in employee_service.IMAGE_FIELDS and value.filename:
                    images[key] = ImageUpload(await value.read(), value.filename, value.content_type)
            elif not (drop_empty and value == ""):
                data[key] = value
        return data, images

    try:
        data = await request.json()
    except ValueError:
        raise ValidationFailed("Request body must be JSON or multipart/form-data")
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be an object")
    return data, {}


def _parse(schema: Type[SchemaType], data: Dict[str, Any]) -> SchemaType:
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.get("", response_model=ListResponse[EmployeeResponse])
def get_employees(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List the employee records visible to the caller.

    superadmin: all records; company_admin: their company's records;
    employee: records linked to their own account.
    """
    employees = employee_service.get_employees(db=db, principal=current_user, skip=skip, limit=limit)
    return {"success": True, "count": len(employees), "data": employees}


@router.get("/company/{company_id}", response_model=ListResponse[EmployeeResponse])
def get_company_employees(
    company_id: str,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List the employee records of one company.

    Raises:
        400: Invalid company id
        404: Company not found
        403: Company belongs to another tenant
    """
    employees = employee_service.get_company_employees(
        db=db,
        principal=current_user,
        company_id=company_id,
        skip=skip,
        limit=limit
    )
    return {"success": True, "count": len(employees), "data": employees}


@router.get("/{employee_id}", response_model=DataResponse[EmployeeResponse])
def get_employee_profile(employee_id: str, db: Session = Depends(get_db)):
    """
    Public profile lookup used by QR/NFC business cards. No token required.

    Raises:
        400: Invalid id
        404: Employee not found
    """
    employee = employee_service.get_public_profile(db=db, employee_id=employee_id)
    return {"success": True, "data": employee}


@router.post(
    "",
    response_model=DataResponse[EmployeeResponse],
    status_code=status.HTTP_201_CREATED,
    openapi_extra=EMPLOYEE_BODY_DOC
)
async def create_employee(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.company_admin, UserRole.superadmin)),
    media: MediaHost = Depends(get_media_host)
):
    """
    Create an employee record, optionally uploading "avatar" and "background".

    A company_admin can only create records for their own company, linked
    to users of that company.

    Raises:
        400: Validation errors
        403: Target company or linked user belongs to another tenant
        404: Company not found
    """
    data, images = await _read_employee_payload(request, drop_empty=True)
    employee_data = _parse(EmployeeCreate, data)
    try:
        logger.info(f"Creating employee: surname={employee_data.surname}, by user_id={current_user.id}")
        employee = await run_in_threadpool(
            employee_service.create_employee,
            db=db,
            principal=current_user,
            employee_data=employee_data,
            media=media,
            images=images
        )
        logger.info(f"Employee created successfully: id={employee.id}")
        return {"success": True, "data": employee}
    except Exception as e:
        logger.error(f"Error creating employee: {type(e).__name__}: {str(e)}")
        raise


@router.put("/{employee_id}", response_model=DataResponse[EmployeeResponse], openapi_extra=EMPLOYEE_BODY_DOC)
async def update_employee(
    employee_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    media: MediaHost = Depends(get_media_host)
):
    """
    Update an employee record, optionally replacing "avatar" and "background".

    company_admin: records of their company; employee: their own record.
    Only a superadmin can move a record to another company.
    """
    data, images = await _read_employee_payload(request, drop_empty=False)
    employee_data = _parse(EmployeeUpdate, data)
    employee = await run_in_threadpool(
        employee_service.update_employee,
        db=db,
        principal=current_user,
        employee_id=employee_id,
        employee_data=employee_data,
        media=media,
        images=images
    )
    return {"success": True, "data": employee}


def _replace_image(
    field: str,
    employee_id: str,
    upload: UploadFile,
    db: Session,
    current_user: User,
    media: MediaHost
):
    return employee_service.replace_image(
        db=db,
        principal=current_user,
        employee_id=employee_id,
        media=media,
        field=field,
        content=upload.file.read(),
        filename=upload.filename or field,
        content_type=upload.content_type
    )


@router.put("/{employee_id}/avatar", response_model=DataResponse[EmployeeResponse])
def upload_employee_avatar(
    employee_id: str,
    avatar: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    media: MediaHost = Depends(get_media_host)
):
    """
    Replace the avatar (multipart field "avatar"). Same access rules as update.
    """
    employee = _replace_image("avatar", employee_id, avatar, db, current_user, media)
    return {"success": True, "data": employee}


@router.put("/{employee_id}/background", response_model=DataResponse[EmployeeResponse])
def upload_employee_background(
    employee_id: str,
    background: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    media: MediaHost = Depends(get_media_host)
):
    """
    Replace the profile background (multipart field "background"). Same access rules as update.
    """
    employee = _replace_image("background", employee_id, background, db, current_user, media)
    return {"success": True, "data": employee}


@router.delete("/{employee_id}", response_model=MessageResponse)
def delete_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.company_admin, UserRole.superadmin)),
    media: MediaHost = Depends(get_media_host)
):
    """
    Delete an employee record and, best-effort, its images.
    """
    employee_service.delete_employee(db=db, principal=current_user, employee_id=employee_id, media=media)
    return {"success": True, "message": "Employee deleted"}
