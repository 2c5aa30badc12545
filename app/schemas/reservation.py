from pydantic import BaseModel, Field, validator, model_validator
from typing import Optional
from datetime import datetime, timezone
from app.models.reservation import PAYMENT_STATUSES, DELIVERY_STATUSES

PAYMENT_STATUS_PATTERN = "^(" + "|".join(PAYMENT_STATUSES) + ")$"
DELIVERY_STATUS_PATTERN = "^(" + "|".join(DELIVERY_STATUSES) + ")$"

class ReservationBase(BaseModel):
    rental_start: datetime = Field(..., description="Inicio de la renta")
    rental_end: datetime = Field(..., description="Fin de la renta")
    address_entrega: str = Field(..., min_length=1, max_length=255, description="Dirección de entrega")
    price: float = Field(..., ge=0, description="Precio total de la renta")
    payment_status: str = Field(..., pattern=PAYMENT_STATUS_PATTERN)
    delivery_status: str = Field(..., pattern=DELIVERY_STATUS_PATTERN)
    user_id: str = Field(..., alias="userId", min_length=1)
    machinery_id: str = Field(..., alias="machineryId", min_length=1)

    @validator('rental_start', 'rental_end')
    def to_naive_utc(cls, v):
        # Se guardan en UTC sin zona para poder compararlas entre sí
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def check_rental_window(self):
        if self.rental_end <= self.rental_start:
            raise ValueError("La fecha de finalización debe ser posterior a la de inicio.")
        return self

    class Config:
        populate_by_name = True

class ReservationCreate(ReservationBase):
    """
    provider_id NO forma parte del esquema: se toma de la maquinaria.
    Si el cliente lo envía, se ignora.
    """
    pass

class ReservationUpdate(ReservationBase):
    """PUT: reemplazo completo de la reserva"""
    pass

class ReservationResponse(ReservationBase):
    id: str
    provider_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True
