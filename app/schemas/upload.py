from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class UploadResponse(BaseModel):
    id: int
    image_url: str
    nombre_maquina: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UploadResult(BaseModel):
    message: str
    imageUrl: str
    upload: UploadResponse
