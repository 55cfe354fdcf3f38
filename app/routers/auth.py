from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.core.security import CredentialService, get_credential_service
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenResponse, CurrentUserResponse
from app.schemas.user import UserRegister
from app.services import auth_service

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    register_data: UserRegister,
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service)
):
    """
    Register a new account.

    The account is created with the employee role and no company; a
    superadmin assigns roles and companies.

    Raises:
        400: If the email is already in use
    """
    token, user = auth_service.register(db=db, credentials=credentials, data=register_data)
    return {"success": True, "token": token, "user": user}


@router.post("/login", response_model=TokenResponse)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service)
):
    """
    Exchange email and password for a session token.

    Raises:
        401: Wrong credentials (same message whether or not the email exists) or disabled account
        403: The user's company is suspended
    """
    token, user = auth_service.login(
        db=db,
        credentials=credentials,
        email=login_data.email,
        password=login_data.password
    )
    return {"success": True, "token": token, "user": user}


@router.get("/me", response_model=CurrentUserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user with its company.

    Raises:
        401: Missing/invalid token or disabled account
        403: The user's company is suspended
    """
    return {"success": True, "user": current_user}
