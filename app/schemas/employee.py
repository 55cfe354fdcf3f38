from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, Union, Dict, Any
from datetime import datetime

class EmployeeCompany(BaseModel):
    id: str
    name: str
    email: str
    logo: Optional[str] = None
    color: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class EmployeeUser(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class EmployeeFields(BaseModel):
    patronymic: Optional[str] = ""
    role: Optional[str] = ""
    agency: Optional[str] = ""
    phone: Optional[str] = Field("", max_length=50)
    home_phone: Optional[str] = Field("", max_length=50)
    work_phone: Optional[str] = Field("", max_length=50)
    insurance_agent: Optional[str] = ""
    personal_site: Optional[str] = ""
    birth_date: Optional[str] = ""
    corporate_email: Optional[str] = ""
    home_address: Optional[str] = ""
    facebook: Optional[str] = ""
    x: Optional[str] = ""
    linkedin: Optional[str] = ""
    instagram: Optional[str] = ""
    github: Optional[str] = ""
    icq: Optional[str] = ""
    title: Optional[str] = ""

class EmployeeCreate(EmployeeFields):
    name: str = Field(..., min_length=1, max_length=255)
    surname: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    # Company id, or an embedded company object carrying "id"/"_id"
    company: Union[str, Dict[str, Any]]
    user_id: Optional[str] = None

class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    surname: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    patronymic: Optional[str] = None
    role: Optional[str] = None
    agency: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    home_phone: Optional[str] = Field(None, max_length=50)
    work_phone: Optional[str] = Field(None, max_length=50)
    insurance_agent: Optional[str] = None
    personal_site: Optional[str] = None
    birth_date: Optional[str] = None
    corporate_email: Optional[str] = None
    home_address: Optional[str] = None
    facebook: Optional[str] = None
    x: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None
    github: Optional[str] = None
    icq: Optional[str] = None
    title: Optional[str] = None
    # Only applied when the caller is superadmin
    company: Optional[Union[str, Dict[str, Any]]] = None

class EmployeeResponse(EmployeeFields):
    id: str
    name: str
    surname: str
    email: str
    company_id: str
    user_id: Optional[str] = None
    avatar: Optional[str] = None
    background: Optional[str] = None
    company: Optional[EmployeeCompany] = None
    user: Optional[EmployeeUser] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
