from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime

from loandesk.utils.permissions import ROLES

class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    department: str = "Operations"
    role: str = "employee"

    @field_validator('role')
    @classmethod
    def role_must_be_known(cls, v):
        if v not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        return v

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Name is required')
        return v.strip()

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserBasic(BaseModel):
    id: int
    name: str
    email: str
    department: str
    role: str

    model_config = {
        "from_attributes": True
    }

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    department: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
