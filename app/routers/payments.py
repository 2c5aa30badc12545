from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.payment import Payment
from app.models.reservation import Reservation
from app.schemas.payment import PaymentResponse, PaymentCreate, PaymentUpdate
from app.core.exceptions import BadRequestException, NotFoundException

router = APIRouter()

def get_payment_or_404(db: Session, payment_id: int) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise NotFoundException("Pago no encontrado")
    return payment

@router.get("/", response_model=list[PaymentResponse])
def get_payments(db: Session = Depends(get_db)):
    return db.query(Payment).all()

@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return get_payment_or_404(db, payment_id)

@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(payment_data: PaymentCreate, db: Session = Depends(get_db)):
    # Verificar que la reserva existe
    reservation = db.query(Reservation).filter(Reservation.id == payment_data.reservation_id).first()
    if not reservation:
        raise BadRequestException("Reserva no encontrada")

    new_payment = Payment(**payment_data.dict())
    db.add(new_payment)
    db.commit()
    db.refresh(new_payment)
    return new_payment

@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(payment_id: int, payment_data: PaymentUpdate, db: Session = Depends(get_db)):
    payment = get_payment_or_404(db, payment_id)

    for field, value in payment_data.dict().items():
        setattr(payment, field, value)

    db.commit()
    db.refresh(payment)
    return payment

@router.delete("/{payment_id}")
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    payment = get_payment_or_404(db, payment_id)
    db.delete(payment)
    db.commit()
    return {"message": "Pago eliminado exitosamente"}
