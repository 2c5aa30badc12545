# app/schemas/mercadopago.py

from pydantic import BaseModel, Field, validator
from typing import Any, Optional

# ----------------------------------------------------
# PREFERENCIA DE PAGO (la app la pide antes de pagar)
# ----------------------------------------------------

class PreferenceRequest(BaseModel):
    """
    `precio` se valida a mano en el router para responder siempre
    400 con el mismo mensaje (faltante, no numérico o <= 0).
    """
    precio: Any = None
    reservation_id: Optional[str] = Field(None, alias="reservationId", description="Se envía como external_reference")

    class Config:
        populate_by_name = True

# ----------------------------------------------------
# WEBHOOK (notificación servidor a servidor)
# ----------------------------------------------------

class WebhookData(BaseModel):
    id: Optional[str] = None

    @validator('id', pre=True)
    def id_as_str(cls, v):
        # Mercado Pago envía el ID a veces como número
        return str(v) if v is not None else None

class WebhookNotification(BaseModel):
    type: Optional[str] = None
    action: Optional[str] = None
    data: Optional[WebhookData] = None

    class Config:
        extra = 'ignore'
