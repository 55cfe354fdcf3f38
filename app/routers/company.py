from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.core.authorization import require_roles
from app.core.security import CredentialService, get_credential_service
from app.models.user import User, UserRole
from app.schemas.common import DataResponse, ListResponse, MessageResponse
from app.schemas.company import CompanyCreate, CompanySignup, CompanyUpdate, CompanyResponse
from app.schemas.auth import SignupResponse
from app.services import company_service
from app.services.media import MediaHost, get_media_host
from app.core.logging_config import logger

router = APIRouter()


@router.get("", response_model=ListResponse[CompanyResponse])
def get_companies(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List companies.

    A superadmin sees every company; anyone else only sees their own.
    """
    companies = company_service.get_companies(db=db, principal=current_user, skip=skip, limit=limit)
    return {"success": True, "count": len(companies), "data": companies}


@router.post("/public", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup_company(
    signup_data: CompanySignup,
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service)
):
    """
    Public sign-up: creates a company and its company_admin account.

    Raises:
        400: If the email is already used by a company or a user
    """
    token, company, admin = company_service.signup(db=db, credentials=credentials, signup_data=signup_data)
    return {"success": True, "token": token, "data": {"company": company, "user": admin}}


@router.get("/{company_id}", response_model=DataResponse[CompanyResponse])
def get_company(
    company_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get a company.

    Raises:
        404: If the company does not exist
        403: If it belongs to another tenant
    """
    company = company_service.get_company(db=db, principal=current_user, company_id=company_id)
    return {"success": True, "data": company}


@router.post("", response_model=DataResponse[CompanyResponse], status_code=status.HTTP_201_CREATED)
def create_company(
    company_data: CompanyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.superadmin))
):
    """
    Create a company (superadmin only).
    """
    logger.info(f"Creating company: name={company_data.name}, by user_id={current_user.id}")
    company = company_service.create_company(db=db, principal=current_user, company_data=company_data)
    return {"success": True, "data": company}


@router.put("/{company_id}", response_model=DataResponse[CompanyResponse])
def update_company(
    company_id: str,
    company_data: CompanyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.superadmin, UserRole.company_admin))
):
    """
    Update a company.

    A company_admin can only update their own company, and only a
    superadmin can change the status.
    """
    company = company_service.update_company(
        db=db,
        principal=current_user,
        company_id=company_id,
        company_data=company_data
    )
    return {"success": True, "data": company}


@router.put("/{company_id}/logo", response_model=DataResponse[CompanyResponse])
def upload_company_logo(
    company_id: str,
    logo: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.superadmin, UserRole.company_admin)),
    media: MediaHost = Depends(get_media_host)
):
    """
    Replace the company logo (multipart field "logo").

    Raises:
        400: Not an image or too large
        500: The media host upload failed
    """
    content = logo.file.read()
    company = company_service.replace_logo(
        db=db,
        principal=current_user,
        company_id=company_id,
        media=media,
        content=content,
        filename=logo.filename or "logo",
        content_type=logo.content_type
    )
    return {"success": True, "data": company}


@router.patch("/{company_id}/status", response_model=DataResponse[CompanyResponse])
def toggle_company_status(
    company_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.superadmin))
):
    """
    Toggle a company between active and suspended (superadmin only).

    Members of a suspended company are rejected on their next request.
    """
    company = company_service.toggle_status(db=db, company_id=company_id)
    return {"success": True, "data": company}


@router.delete("/{company_id}", response_model=MessageResponse)
def delete_company(
    company_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.superadmin)),
    media: MediaHost = Depends(get_media_host)
):
    """
    Delete a company (superadmin only).

    The logo is removed from the media host on a best-effort basis.
    """
    company_service.delete_company(db=db, company_id=company_id, media=media)
    return {"success": True, "message": "Company deleted"}
