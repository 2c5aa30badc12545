# app/routers/machinery.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session, joinedload
from app.database import get_db
from app.models.machinery import Machinery
from app.models.provider import Provider
from app.schemas.machinery import (
    MachineryResponse, MachineryCreate, MachineryUpdate,
    MachineryWithProviderResponse, MachineryBulkDelete, MachineryCount,
)
from app.services.supabase_storage import SupabaseStorage, get_storage
from app.core.exceptions import BadRequestException, NotFoundException

logger = logging.getLogger(__name__)
router = APIRouter()

PROVEEDOR_NO_EXISTE = "El proveedor especificado no existe"

def get_machinery_or_404(db: Session, machinery_id: str) -> Machinery:
    machinery = db.query(Machinery).filter(Machinery.id == machinery_id).first()
    if not machinery:
        raise NotFoundException("Maquinaria no encontrada")
    return machinery

def provider_exists(db: Session, provider_id: str) -> bool:
    return db.query(Provider.id).filter(Provider.id == provider_id).first() is not None

# ==========================
# 🔹 GET
# ==========================

@router.get("/", response_model=List[MachineryResponse])
def get_machinery(db: Session = Depends(get_db)):
    return db.query(Machinery).all()

@router.get("/count", response_model=MachineryCount)
def count_machinery(db: Session = Depends(get_db)):
    return {"total": db.query(Machinery).count()}

@router.get("/with-provider", response_model=List[MachineryWithProviderResponse])
def get_machinery_with_provider(db: Session = Depends(get_db)):
    """Maquinaria con los datos públicos de su proveedor"""
    return db.query(Machinery).options(joinedload(Machinery.provider)).all()

@router.get("/by-provider/{provider_id}", response_model=List[MachineryResponse])
def get_machinery_by_provider(provider_id: str, db: Session = Depends(get_db)):
    if not provider_exists(db, provider_id):
        raise NotFoundException(f"Proveedor con ID {provider_id} no encontrado")

    machinery = db.query(Machinery).filter(Machinery.provider_id == provider_id).all()
    if not machinery:
        raise NotFoundException("No se encontraron maquinarias para este proveedor")
    return machinery

@router.get("/{machinery_id}", response_model=MachineryResponse)
def get_machinery_by_id(machinery_id: str, db: Session = Depends(get_db)):
    return get_machinery_or_404(db, machinery_id)

# ==========================
# 🔹 POST
# ==========================

@router.post("/", response_model=MachineryResponse, status_code=status.HTTP_201_CREATED)
def create_machinery(machinery_data: MachineryCreate, db: Session = Depends(get_db)):
    if not provider_exists(db, machinery_data.provider_id):
        raise BadRequestException(PROVEEDOR_NO_EXISTE)

    new_machinery = Machinery(**machinery_data.dict())
    db.add(new_machinery)
    db.commit()
    db.refresh(new_machinery)
    logger.info(f"Maquinaria creada: {new_machinery.id} (proveedor {new_machinery.provider_id})")
    return new_machinery

@router.post("/bulk", response_model=List[MachineryResponse], status_code=status.HTTP_201_CREATED)
def create_machinery_bulk(machinery_data: List[MachineryCreate] = Body(...), db: Session = Depends(get_db)):
    """Se valida cada elemento antes de insertar cualquiera; una sola transacción"""
    if not machinery_data:
        raise BadRequestException("Debe enviar un arreglo de maquinarias")

    for provider_id in {m.provider_id for m in machinery_data}:
        if not provider_exists(db, provider_id):
            raise BadRequestException(f"Proveedor con ID {provider_id} no existe")

    new_machinery = [Machinery(**m.dict()) for m in machinery_data]
    db.add_all(new_machinery)
    db.commit()
    for machinery in new_machinery:
        db.refresh(machinery)
    logger.info(f"{len(new_machinery)} maquinarias creadas en bloque")
    return new_machinery

@router.post("/{provider_id}", response_model=MachineryResponse, status_code=status.HTTP_201_CREATED)
async def create_machinery_with_image(
    provider_id: str,
    name: str = Form(..., min_length=1, max_length=150),
    location: str = Form(..., min_length=1, max_length=255),
    rental_price: float = Form(..., gt=0),
    description: Optional[str] = Form(None),
    state: bool = Form(True),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: SupabaseStorage = Depends(get_storage),
):
    """Alta desde formulario multipart con imagen opcional"""
    if not provider_exists(db, provider_id):
        raise BadRequestException(PROVEEDOR_NO_EXISTE)

    # La imagen se sube antes de tocar la base de datos
    image_url = None
    if image and image.filename:
        image_url = await storage.upload_image(file=image, folder="maquinaria")

    new_machinery = Machinery(
        name=name,
        location=location,
        description=description,
        rental_price=rental_price,
        image_code=image_url,
        state=state,
        provider_id=provider_id,
    )
    db.add(new_machinery)
    db.commit()
    db.refresh(new_machinery)
    return new_machinery

# ==========================
# 🔹 PUT / DELETE
# ==========================

@router.put("/{machinery_id}", response_model=MachineryResponse)
def update_machinery(machinery_id: str, machinery_data: MachineryUpdate, db: Session = Depends(get_db)):
    machinery = get_machinery_or_404(db, machinery_id)

    if machinery_data.provider_id != machinery.provider_id and not provider_exists(db, machinery_data.provider_id):
        raise BadRequestException(PROVEEDOR_NO_EXISTE)

    for field, value in machinery_data.dict().items():
        setattr(machinery, field, value)

    db.commit()
    db.refresh(machinery)
    return machinery

@router.delete("/bulk")
def delete_machinery_bulk(payload: MachineryBulkDelete, db: Session = Depends(get_db)):
    machinery = db.query(Machinery).filter(Machinery.id.in_(payload.ids)).all()
    if not machinery:
        raise NotFoundException("No se encontraron maquinarias con los IDs proporcionados")

    for item in machinery:
        db.delete(item)
    db.commit()
    logger.info(f"{len(machinery)} maquinarias eliminadas en bloque")
    return {"message": f"Se eliminaron {len(machinery)} maquinarias"}

@router.delete("/{machinery_id}")
def delete_machinery(machinery_id: str, db: Session = Depends(get_db)):
    machinery = get_machinery_or_404(db, machinery_id)
    db.delete(machinery)
    db.commit()
    logger.info(f"Maquinaria eliminada: {machinery_id}")
    return {"message": "Maquinaria eliminada exitosamente"}
