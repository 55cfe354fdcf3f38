from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from app.schemas.user import UserResponse
from app.schemas.company import CompanyResponse

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class AuthUser(UserResponse):
    company: Optional[CompanyResponse] = None

class TokenResponse(BaseModel):
    success: bool = True
    token: str
    user: AuthUser

class CurrentUserResponse(BaseModel):
    success: bool = True
    user: AuthUser

class SignupData(BaseModel):
    company: CompanyResponse
    user: UserResponse

class SignupResponse(BaseModel):
    success: bool = True
    token: str
    data: SignupData
