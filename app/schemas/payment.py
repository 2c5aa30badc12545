from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class PaymentBase(BaseModel):
    amount: float = Field(..., gt=0)
    payment_method: str = Field(..., min_length=1, max_length=50)

    class Config:
        populate_by_name = True

class PaymentCreate(PaymentBase):
    reservation_id: str = Field(..., alias="reservationId", min_length=1)

class PaymentUpdate(PaymentBase):
    pass

class PaymentResponse(PaymentBase):
    id: int
    # El webhook registra el monto de la reserva, que puede ser 0
    amount: float = Field(..., ge=0)
    reservation_id: str = Field(..., alias="reservationId")
    status: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True
