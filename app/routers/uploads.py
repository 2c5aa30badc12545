# app/routers/uploads.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.upload import Upload
from app.schemas.upload import UploadResponse, UploadResult
from app.services.supabase_storage import SupabaseStorage, get_storage
from app.core.exceptions import BadRequestException

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/upload", response_model=UploadResult, status_code=status.HTTP_201_CREATED)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    nombre_maquina: str = Form(..., min_length=1, max_length=150),
    db: Session = Depends(get_db),
    storage: SupabaseStorage = Depends(get_storage),
):
    """Sube la imagen al bucket y registra su URL pública"""
    if image is None or not image.filename:
        raise BadRequestException("No se ha subido ninguna imagen")

    image_url = await storage.upload_image(file=image, folder="maquinaria")

    upload = Upload(image_url=image_url, nombre_maquina=nombre_maquina)
    db.add(upload)
    db.commit()
    db.refresh(upload)
    logger.info(f"Imagen registrada: {upload.id} ({nombre_maquina})")

    return {"message": "Imagen subida con éxito", "imageUrl": image_url, "upload": upload}

@router.get("/upload", response_model=List[UploadResponse])
def get_uploads(db: Session = Depends(get_db)):
    return db.query(Upload).order_by(Upload.id).all()
