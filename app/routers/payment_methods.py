import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload
from app.config import Settings, get_settings
from app.database import get_db
from app.models.payment_method import PaymentMethod
from app.models.user import User
from app.schemas.payment_method import PaymentMethodResponse, PaymentMethodCreate, PaymentMethodUpdate
from app.core.security import card_fingerprint, hash_cvv
from app.core.exceptions import BadRequestException, NotFoundException

logger = logging.getLogger(__name__)
router = APIRouter()

def get_payment_method_or_404(db: Session, payment_method_id: str) -> PaymentMethod:
    payment_method = db.query(PaymentMethod).filter(PaymentMethod.id == payment_method_id).first()
    if not payment_method:
        raise NotFoundException("Método de pago no encontrado")
    return payment_method

def apply_card_data(payment_method: PaymentMethod, data: PaymentMethodUpdate, secret: str):
    """El número y el CVV solo se guardan protegidos"""
    payment_method.card_holder = data.card_holder
    payment_method.expiration_date = data.expiration_date
    payment_method.card_last4 = data.card_number[-4:]
    payment_method.card_fingerprint = card_fingerprint(data.card_number, secret)
    payment_method.cvv_hash = hash_cvv(data.cvv)

@router.post("/", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
def create_payment_method(
    payment_method_data: PaymentMethodCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = db.query(User).filter(User.id == payment_method_data.user_id).first()
    if not user:
        raise BadRequestException("Usuario no encontrado")

    payment_method = PaymentMethod(user_id=user.id)
    apply_card_data(payment_method, payment_method_data, settings.CARD_HASH_SECRET)
    db.add(payment_method)
    db.commit()
    db.refresh(payment_method)
    logger.info(f"Método de pago {payment_method.id} registrado para usuario {user.id} (termina en {payment_method.card_last4})")
    return payment_method

@router.get("/", response_model=List[PaymentMethodResponse])
def get_payment_methods(db: Session = Depends(get_db)):
    return db.query(PaymentMethod).options(joinedload(PaymentMethod.user)).all()

@router.get("/user/{user_id}", response_model=List[PaymentMethodResponse])
def get_payment_methods_by_user(user_id: str, db: Session = Depends(get_db)):
    payment_methods = db.query(PaymentMethod).options(joinedload(PaymentMethod.user)).filter(
        PaymentMethod.user_id == user_id
    ).all()
    if not payment_methods:
        raise NotFoundException("No se encontraron métodos de pago para este usuario")
    return payment_methods

@router.put("/{payment_method_id}", response_model=PaymentMethodResponse)
def update_payment_method(
    payment_method_id: str,
    payment_method_data: PaymentMethodUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    payment_method = get_payment_method_or_404(db, payment_method_id)
    apply_card_data(payment_method, payment_method_data, settings.CARD_HASH_SECRET)
    db.commit()
    db.refresh(payment_method)
    return payment_method

@router.delete("/{payment_method_id}")
def delete_payment_method(payment_method_id: str, db: Session = Depends(get_db)):
    payment_method = get_payment_method_or_404(db, payment_method_id)
    db.delete(payment_method)
    db.commit()
    return {"message": "Método de pago eliminado exitosamente"}
