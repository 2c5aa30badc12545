import logging
from typing import List
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.provider import Provider
from app.schemas.provider import ProviderResponse, ProviderCreate, ProviderUpdate
from app.schemas.user import LoginRequest
from app.core.security import get_password_hash, verify_password
from app.core.exceptions import AuthException, BadRequestException, NotFoundException

logger = logging.getLogger(__name__)
router = APIRouter()

EMAIL_EN_USO = "El correo electrónico ya está en uso"

def email_in_use(db: Session, email: str, exclude_id: str = None) -> bool:
    query = db.query(Provider.id).filter(Provider.email == email)
    if exclude_id:
        query = query.filter(Provider.id != exclude_id)
    return query.first() is not None

def get_provider_or_404(db: Session, provider_id: str) -> Provider:
    provider = db.query(Provider).filter(Provider.id == provider_id).first()
    if not provider:
        raise NotFoundException("Proveedor no encontrado")
    return provider

def build_provider(data: ProviderCreate) -> Provider:
    return Provider(
        name=data.name,
        email=data.email,
        password=get_password_hash(data.password),
        phone_number=data.phone_number,
        rating=data.rating,
    )

@router.post("/", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
def create_provider(provider_data: ProviderCreate, db: Session = Depends(get_db)):
    if email_in_use(db, provider_data.email):
        raise BadRequestException(EMAIL_EN_USO)

    db_provider = build_provider(provider_data)
    db.add(db_provider)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(EMAIL_EN_USO)
    db.refresh(db_provider)
    logger.info(f"Proveedor creado: {db_provider.id}")
    return db_provider

@router.post("/bulk", response_model=List[ProviderResponse], status_code=status.HTTP_201_CREATED)
def create_providers_bulk(providers_data: List[ProviderCreate] = Body(...), db: Session = Depends(get_db)):
    """
    Crea varios proveedores. Se valida todo el lote antes de insertar
    y la inserción es una sola transacción.
    """
    if not providers_data:
        raise BadRequestException("Se requiere un array de proveedores")

    emails = [p.email for p in providers_data]
    repetidos = sorted({e for e in emails if emails.count(e) > 1})
    existentes = [p.email for p in db.query(Provider).filter(Provider.email.in_(emails)).all()]
    en_uso = sorted(set(repetidos) | set(existentes))
    if en_uso:
        raise BadRequestException({
            "error": "Algunos correos electrónicos ya están en uso",
            "emailsEnUso": en_uso,
        })

    new_providers = [build_provider(p) for p in providers_data]
    db.add_all(new_providers)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException("Algunos correos electrónicos ya están en uso")
    for provider in new_providers:
        db.refresh(provider)
    logger.info(f"{len(new_providers)} proveedores creados en bloque")
    return new_providers

@router.get("/", response_model=List[ProviderResponse])
def get_providers(db: Session = Depends(get_db)):
    return db.query(Provider).all()

@router.post("/login", response_model=ProviderResponse)
def login_provider(credentials: LoginRequest, db: Session = Depends(get_db)):
    provider = db.query(Provider).filter(Provider.email == credentials.email).first()
    if not provider or not verify_password(credentials.password, provider.password):
        raise AuthException("Correo o contraseña incorrectos")
    return provider

@router.get("/{provider_id}", response_model=ProviderResponse)
def get_provider(provider_id: str, db: Session = Depends(get_db)):
    return get_provider_or_404(db, provider_id)

@router.put("/{provider_id}", response_model=ProviderResponse)
def update_provider(provider_id: str, provider_data: ProviderUpdate, db: Session = Depends(get_db)):
    provider = get_provider_or_404(db, provider_id)

    if provider_data.email != provider.email and email_in_use(db, provider_data.email, exclude_id=provider_id):
        raise BadRequestException(EMAIL_EN_USO)

    provider.name = provider_data.name
    provider.email = provider_data.email
    provider.phone_number = provider_data.phone_number
    provider.rating = provider_data.rating
    if provider_data.password:
        provider.password = get_password_hash(provider_data.password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestException(EMAIL_EN_USO)
    db.refresh(provider)
    return provider

@router.delete("/{provider_id}")
def delete_provider(provider_id: str, db: Session = Depends(get_db)):
    """Borrado físico; se eliminan también su maquinaria y reservas"""
    provider = get_provider_or_404(db, provider_id)
    db.delete(provider)
    db.commit()
    logger.info(f"Proveedor eliminado: {provider_id}")
    return {"message": "Proveedor eliminado exitosamente"}
