from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime
from app.schemas.user import UserSummary

def clean_card_number(value: str) -> str:
    digits = value.replace(" ", "").replace("-", "")
    if not digits.isdigit() or not 12 <= len(digits) <= 19:
        raise ValueError('El número de tarjeta debe tener entre 12 y 19 dígitos')
    return digits

class PaymentMethodBase(BaseModel):
    card_holder: str = Field(..., min_length=1, max_length=150)
    expiration_date: str = Field(..., pattern=r"^(0[1-9]|1[0-2])/\d{2}$", description="MM/YY")

    class Config:
        populate_by_name = True

class PaymentMethodUpdate(PaymentMethodBase):
    """PUT: reemplazo completo; número y CVV se vuelven a proteger"""
    card_number: str
    cvv: str = Field(..., pattern=r"^\d{3,4}$")

    @validator('card_number')
    def validate_card_number(cls, v):
        return clean_card_number(v)

class PaymentMethodCreate(PaymentMethodUpdate):
    user_id: str = Field(..., alias="userId", min_length=1)

class PaymentMethodResponse(PaymentMethodBase):
    id: str
    card_number: str  # enmascarado: **** **** **** 1234
    user_id: str = Field(..., alias="userId")
    user: Optional[UserSummary] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True
