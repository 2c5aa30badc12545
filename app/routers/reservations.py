import logging
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.config import Settings, get_settings
from app.database import get_db
from app.models.reservation import Reservation
from app.models.user import User
from app.models.machinery import Machinery
from app.schemas.reservation import ReservationResponse, ReservationCreate, ReservationUpdate
from app.core.exceptions import BadRequestException, NotFoundException
from app.core.qr_service import generate_qr_png, reservation_qr_text

logger = logging.getLogger(__name__)
router = APIRouter()

def get_reservation_or_404(db: Session, reservation_id: str) -> Reservation:
    reservation = db.query(Reservation).filter(Reservation.id == reservation_id).first()
    if not reservation:
        raise NotFoundException("Reserva no encontrada")
    return reservation

def resolve_references(db: Session, data: ReservationCreate) -> Machinery:
    """Verifica que existan el usuario y la maquinaria; devuelve la maquinaria"""
    user = db.query(User).filter(User.id == data.user_id).first()
    machinery = db.query(Machinery).filter(Machinery.id == data.machinery_id).first()
    if not user or not machinery:
        raise BadRequestException("Usuario o maquinaria no encontrados")
    return machinery

def check_overlap(db: Session, data: ReservationCreate, exclude_id: str = None):
    """Rechaza rangos traslapados sobre la misma maquinaria (reservas no canceladas)"""
    query = db.query(Reservation).filter(
        Reservation.machinery_id == data.machinery_id,
        Reservation.delivery_status != "cancelado",
        Reservation.rental_start < data.rental_end,
        Reservation.rental_end > data.rental_start,
    )
    if exclude_id:
        query = query.filter(Reservation.id != exclude_id)
    if query.first():
        raise BadRequestException("La maquinaria ya está reservada en ese rango de fechas")

@router.post("/", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    reservation_data: ReservationCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    machinery = resolve_references(db, reservation_data)
    if not settings.ALLOW_OVERLAPPING_RESERVATIONS:
        check_overlap(db, reservation_data)

    try:
        new_reservation = Reservation(
            rental_start=reservation_data.rental_start,
            rental_end=reservation_data.rental_end,
            address_entrega=reservation_data.address_entrega,
            price=reservation_data.price,
            payment_status=reservation_data.payment_status,
            delivery_status=reservation_data.delivery_status,
            user_id=reservation_data.user_id,
            machinery_id=machinery.id,
            # El proveedor siempre sale de la maquinaria
            provider_id=machinery.provider_id,
        )
    except ValueError as e:
        raise BadRequestException(str(e))

    db.add(new_reservation)
    db.commit()
    db.refresh(new_reservation)
    logger.info(f"Reserva creada: {new_reservation.id} (maquinaria {machinery.id}, proveedor {machinery.provider_id})")
    return new_reservation

@router.get("/", response_model=List[ReservationResponse])
def get_reservations(db: Session = Depends(get_db)):
    return db.query(Reservation).all()

@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: str, db: Session = Depends(get_db)):
    return get_reservation_or_404(db, reservation_id)

@router.get(
    "/{reservation_id}/qrcode",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
def get_reservation_qrcode(reservation_id: str, db: Session = Depends(get_db)):
    """Comprobante QR con el ID de la reserva y el total"""
    reservation = get_reservation_or_404(db, reservation_id)
    png = generate_qr_png(reservation_qr_text(reservation.id, reservation.price))
    return Response(content=png, media_type="image/png")

@router.put("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: str,
    reservation_data: ReservationUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    reservation = get_reservation_or_404(db, reservation_id)
    machinery = resolve_references(db, reservation_data)
    if not settings.ALLOW_OVERLAPPING_RESERVATIONS:
        check_overlap(db, reservation_data, exclude_id=reservation_id)

    try:
        reservation.set_rental_window(reservation_data.rental_start, reservation_data.rental_end)
        reservation.address_entrega = reservation_data.address_entrega
        reservation.price = reservation_data.price
        reservation.payment_status = reservation_data.payment_status
        reservation.delivery_status = reservation_data.delivery_status
        reservation.user_id = reservation_data.user_id
        reservation.machinery_id = machinery.id
        reservation.provider_id = machinery.provider_id
    except ValueError as e:
        db.rollback()
        raise BadRequestException(str(e))

    db.commit()
    db.refresh(reservation)
    return reservation

@router.delete("/{reservation_id}")
def delete_reservation(reservation_id: str, db: Session = Depends(get_db)):
    reservation = get_reservation_or_404(db, reservation_id)
    db.delete(reservation)
    db.commit()
    logger.info(f"Reserva eliminada: {reservation_id}")
    return {"message": "Reserva eliminada exitosamente"}
