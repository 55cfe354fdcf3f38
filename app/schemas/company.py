from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from app.models.company import CompanyStatus, CompanySector, CompanySize, CompanyType

class CompanyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = "France"
    website: Optional[str] = None
    sector: Optional[CompanySector] = CompanySector.other
    size: Optional[CompanySize] = CompanySize.xs
    type: Optional[CompanyType] = CompanyType.sarl
    color: Optional[str] = Field("#3b82f6", max_length=20)
    qr_color: Optional[str] = Field("#000000", max_length=20)
    creation_year: Optional[str] = None

class CompanyCreate(CompanyBase):
    pass

class CompanySignup(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)

class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    website: Optional[str] = None
    sector: Optional[CompanySector] = None
    size: Optional[CompanySize] = None
    type: Optional[CompanyType] = None
    color: Optional[str] = Field(None, max_length=20)
    qr_color: Optional[str] = Field(None, max_length=20)
    creation_year: Optional[str] = None
    # Only applied when the caller is superadmin
    status: Optional[CompanyStatus] = None

class CompanyResponse(CompanyBase):
    id: str
    email: str
    logo: Optional[str] = None
    status: CompanyStatus
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
