from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.core.authorization import require_roles
from app.models.user import User, UserRole
from app.schemas.common import DataResponse, ListResponse
from app.schemas.user import UserUpdate, UserWithCompanyResponse
from app.services import user_service

router = APIRouter()


@router.get("", response_model=ListResponse[UserWithCompanyResponse])
def get_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.superadmin))
):
    """
    List all users (superadmin only). Password hashes are never returned.
    """
    users = user_service.get_users(db=db, skip=skip, limit=limit)
    return {"success": True, "count": len(users), "data": users}


@router.get("/{user_id}", response_model=DataResponse[UserWithCompanyResponse])
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get a user. Users can only see their own profile unless superadmin.
    """
    user = user_service.get_user(db=db, principal=current_user, user_id=user_id)
    return {"success": True, "data": user}


@router.put("/{user_id}", response_model=DataResponse[UserWithCompanyResponse])
def update_user(
    user_id: str,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update a user. Users can only update their own profile unless superadmin.

    Only a superadmin can change role, company_id and is_active.
    """
    user = user_service.update_user(db=db, principal=current_user, user_id=user_id, user_data=user_data)
    return {"success": True, "data": user}
