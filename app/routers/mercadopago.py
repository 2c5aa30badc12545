# app/routers/mercadopago.py

import logging
import math
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.email_service import ResendMailer, get_mailer, send_reservation_confirmation
from app.core.exceptions import BadRequestException, PaymentGatewayError
from app.core.mercadopago_service import MercadoPagoService, apply_gateway_payment, get_payment_gateway
from app.database import get_db
from app.models.reservation import Reservation
from app.schemas.mercadopago import PreferenceRequest, WebhookNotification

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/pagos",
    tags=["Pagos Mercado Pago"],
)

PRECIO_INVALIDO = "El precio debe ser un número válido mayor a 0"


def parse_price(value) -> float:
    """Acepta número o texto numérico; rechaza faltante, NaN/inf y <= 0"""
    if value is None or isinstance(value, bool):
        raise BadRequestException(PRECIO_INVALIDO)
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise BadRequestException(PRECIO_INVALIDO)
    if not math.isfinite(price) or price <= 0:
        raise BadRequestException(PRECIO_INVALIDO)
    return price


def deep_link(settings: Settings, outcome: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.APP_DEEP_LINK.rstrip('/')}/{outcome}", status_code=status.HTTP_302_FOUND)


@router.post("/crear-preferencia")
def create_preference(
    payload: PreferenceRequest,
    db: Session = Depends(get_db),
    gateway: MercadoPagoService = Depends(get_payment_gateway),
):
    """Crea la intención de pago y devuelve la respuesta de Mercado Pago tal cual"""
    price = parse_price(payload.precio)

    if payload.reservation_id:
        reservation = db.query(Reservation).filter(Reservation.id == payload.reservation_id).first()
        if not reservation:
            raise BadRequestException("Reserva no encontrada")

    return gateway.create_preference(price, payload.reservation_id)


# ====================================================================
# RETORNOS DESDE EL CHECKOUT
# Solo confirman y redirigen a la app. No escriben en la base de datos:
# el webhook es el único que actualiza el estado de pago.
# ====================================================================

@router.get("/success")
def payment_success(
    payment_id: Optional[str] = None,
    status_: Optional[str] = Query(None, alias="status"),
    merchant_order_id: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    gateway: MercadoPagoService = Depends(get_payment_gateway),
):
    if not payment_id:
        logger.warning("Retorno de éxito sin payment_id")
        return deep_link(settings, "error")

    try:
        payment = gateway.get_payment(payment_id)
    except PaymentGatewayError as e:
        logger.error(f"❌ No se pudo confirmar el pago {payment_id}: {e.message}")
        return deep_link(settings, "error")

    logger.info(
        f"💰 Pago exitoso: {payment_id} (estado retorno: {status_}, "
        f"estado pasarela: {payment.get('status')}, orden: {merchant_order_id})"
    )
    return deep_link(settings, "success")


@router.get("/failure")
def payment_failure(
    payment_id: Optional[str] = None,
    status_: Optional[str] = Query(None, alias="status"),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Pago fallido: {payment_id} (estado: {status_})")
    return deep_link(settings, "failure")


@router.get("/pending")
def payment_pending(
    payment_id: Optional[str] = None,
    status_: Optional[str] = Query(None, alias="status"),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Pago pendiente: {payment_id} (estado: {status_})")
    return deep_link(settings, "pending")


# ====================================================================
# WEBHOOK: notificación asíncrona de Mercado Pago
# ====================================================================

@router.post("/webhook", response_class=PlainTextResponse)
def handle_webhook(
    background_tasks: BackgroundTasks,
    notification: Optional[WebhookNotification] = None,
    type_: Optional[str] = Query(None, alias="type"),
    data_id: Optional[str] = Query(None, alias="data.id"),
    db: Session = Depends(get_db),
    gateway: MercadoPagoService = Depends(get_payment_gateway),
    mailer: ResendMailer = Depends(get_mailer),
):
    """
    Vuelve a consultar el pago en la pasarela (el cuerpo de la notificación
    no se considera confiable) y actualiza la reserva asociada.
    """
    notification = notification or WebhookNotification()
    event_type = notification.type or type_
    payment_id = (notification.data.id if notification.data else None) or data_id

    logger.info(f"🎯 [WEBHOOK] Notificación recibida: tipo={event_type}, id={payment_id}")

    if event_type != "payment" or not payment_id:
        return "OK"

    payment = gateway.get_payment(payment_id)
    reservation, newly_paid = apply_gateway_payment(db, payment)

    if reservation is not None and newly_paid:
        rental_days = max(1, math.ceil((reservation.rental_end - reservation.rental_start).total_seconds() / 86400))
        background_tasks.add_task(
            send_reservation_confirmation,
            mailer,
            reservation.user.email,
            name=reservation.user.name,
            amount=reservation.price,
            delivery_date=reservation.rental_start.strftime("%Y-%m-%d"),
            machinery_name=reservation.machinery.name,
            machinery_details=reservation.machinery.description or reservation.machinery.location,
            rental_days=rental_days,
        )

    return "OK"


@router.get("/verificar/{payment_id}")
def verify_payment(
    payment_id: str,
    gateway: MercadoPagoService = Depends(get_payment_gateway),
):
    """Estado de un pago específico, tal como lo reporta Mercado Pago"""
    return gateway.get_payment(payment_id)
