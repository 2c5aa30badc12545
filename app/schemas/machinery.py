# app/schemas/machinery.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.schemas.provider import ProviderSummary

class MachineryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, description="Nombre de la maquinaria")
    location: str = Field(..., min_length=1, max_length=255, description="Ubicación física del equipo")
    description: Optional[str] = Field(None, description="Detalles del equipo")
    rental_price: float = Field(..., gt=0, description="Precio de renta")
    image_code: Optional[str] = Field(None, max_length=500, description="URL de la imagen")
    state: bool = Field(True, description="Disponible para renta")
    provider_id: str = Field(..., min_length=1, description="ID del proveedor dueño del equipo")

class MachineryCreate(MachineryBase):
    pass

class MachineryUpdate(MachineryBase):
    pass

class MachineryBulkDelete(BaseModel):
    ids: List[str] = Field(..., min_length=1)

class MachineryCount(BaseModel):
    total: int

class MachineryResponse(MachineryBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MachineryWithProviderResponse(MachineryResponse):
    provider: Optional[ProviderSummary] = None
