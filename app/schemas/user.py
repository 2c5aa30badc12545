from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone_number: str = Field(..., alias="phoneNumber", min_length=1, max_length=20)

    class Config:
        populate_by_name = True

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserUpdate(UserBase):
    """PUT reemplaza todos los campos; la contraseña solo si se envía"""
    password: Optional[str] = Field(None, min_length=6)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True

class UserResponse(UserBase):
    id: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True
