from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class ProviderBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone_number: str = Field(..., alias="phoneNumber", min_length=1, max_length=20)
    rating: float = Field(0.0, ge=0, le=5)

    class Config:
        populate_by_name = True

class ProviderCreate(ProviderBase):
    password: str = Field(..., min_length=6)

class ProviderUpdate(ProviderBase):
    password: Optional[str] = Field(None, min_length=6)

class ProviderSummary(BaseModel):
    id: str
    name: str
    email: str
    phone_number: str = Field(..., alias="phoneNumber")
    rating: Optional[float] = None

    class Config:
        from_attributes = True
        populate_by_name = True

class ProviderResponse(ProviderBase):
    id: str
    email: str
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True
