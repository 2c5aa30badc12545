# app/core/mercadopago_service.py

import logging
from typing import Optional, Tuple

import requests
from fastapi import Request
from sqlalchemy.orm import Session

from app.config import Settings
from app.core.exceptions import PaymentGatewayError
from app.models.payment import Payment
from app.models.reservation import Reservation

logger = logging.getLogger(__name__)

# Estado de Mercado Pago -> payment_status de la reserva
GATEWAY_STATUS_MAP = {
    "approved": "pagado",
    "rejected": "rechazado",
    "cancelled": "rechazado",
    "refunded": "rechazado",
    "charged_back": "rechazado",
    "pending": "pendiente",
    "in_process": "pendiente",
    "authorized": "pendiente",
    "in_mediation": "pendiente",
}


# Dependencia para que los routers puedan inyectar el servicio
def get_payment_gateway(request: Request) -> "MercadoPagoService":
    return request.app.state.payment_gateway


class MercadoPagoService:
    def __init__(self, settings: Settings, http: Optional[requests.Session] = None):
        self.base_url = settings.MERCADO_PAGO_API_URL.rstrip("/")
        self.access_token = settings.MERCADO_PAGO_ACCESS_TOKEN
        self.currency = settings.PAYMENT_CURRENCY
        self.item_title = settings.PAYMENT_ITEM_TITLE
        self.public_base_url = settings.PUBLIC_BASE_URL.rstrip("/")
        self.timeout = settings.GATEWAY_TIMEOUT_SECONDS
        self.http = http or requests.Session()

    def build_preference(self, price: float, reservation_id: Optional[str] = None) -> dict:
        """Cuerpo de la preferencia: moneda y URLs de retorno fijas."""
        callback_base = f"{self.public_base_url}/api/pagos"
        preference = {
            "items": [{
                "title": self.item_title,
                "quantity": 1,
                "unit_price": float(price),
                "currency_id": self.currency,
            }],
            "back_urls": {
                "success": f"{callback_base}/success",
                "failure": f"{callback_base}/failure",
                "pending": f"{callback_base}/pending",
            },
            "notification_url": f"{callback_base}/webhook",
            "auto_return": "approved",
        }
        if reservation_id:
            preference["external_reference"] = reservation_id
        return preference

    def create_preference(self, price: float, reservation_id: Optional[str] = None) -> dict:
        """
        Crea la preferencia (intención de pago) en Mercado Pago y devuelve
        la respuesta de la pasarela sin modificar.
        """
        payload = self.build_preference(price, reservation_id)
        data = self._request("POST", "/checkout/preferences", json=payload)
        logger.info(f"💳 Preferencia creada: {data.get('id')} (reserva: {reservation_id})")
        return data

    def get_payment(self, payment_id: str) -> dict:
        """Consulta el estado autoritativo de un pago."""
        return self._request("GET", f"/v1/payments/{payment_id}")

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        if not self.access_token:
            raise PaymentGatewayError("MERCADO_PAGO_ACCESS_TOKEN no está configurado")

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = self.http.request(
                method, self.base_url + endpoint, headers=headers, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            # Error HTTP (4xx/5xx): se conserva el cuerpo que devolvió la pasarela
            error_detail = _response_detail(e.response)
            logger.warning(f"❌ Mercado Pago respondió {method} {endpoint}: {error_detail}")
            raise PaymentGatewayError(f"Mercado Pago: {error_detail}", payload=error_detail) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"❌ Error de red con Mercado Pago {method} {endpoint}: {e}")
            raise PaymentGatewayError(f"Error de red con Mercado Pago: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise PaymentGatewayError("Respuesta de Mercado Pago no es JSON válido") from e


def _response_detail(response) -> str:
    if response is None:
        return "sin respuesta"
    try:
        return str(response.json())
    except ValueError:
        return response.text or f"HTTP {response.status_code}"


def map_gateway_status(status: Optional[str]) -> Optional[str]:
    return GATEWAY_STATUS_MAP.get((status or "").lower())


def apply_gateway_payment(db: Session, payment: dict) -> Tuple[Optional[Reservation], bool]:
    """
    Aplica a la base de datos el estado de un pago consultado en la pasarela.

    La reserva se localiza por `external_reference`. Devuelve la reserva
    actualizada (o None si no aplica) y si acaba de pasar a "pagado".
    Un mismo pago notificado varias veces nunca crea más de un registro
    de Payment.
    """
    gateway_id = str(payment.get("id"))
    gateway_status = payment.get("status")
    new_status = map_gateway_status(gateway_status)
    if new_status is None:
        logger.warning(f"⚠️ [WEBHOOK] Estado de pago no manejado: {gateway_status} (pago {gateway_id})")
        return None, False

    reference = payment.get("external_reference")
    if not reference:
        logger.warning(f"⚠️ [WEBHOOK] Pago {gateway_id} sin external_reference, no se actualiza ninguna reserva")
        return None, False

    reservation = db.query(Reservation).filter(Reservation.id == str(reference)).first()
    if not reservation:
        logger.warning(f"❌ [WEBHOOK] No se encontró la reserva {reference} del pago {gateway_id}")
        return None, False

    previous_status = reservation.payment_status
    reservation.payment_status = new_status

    db_payment = db.query(Payment).filter(Payment.gateway_payment_id == gateway_id).first()
    if db_payment:
        db_payment.status = new_status
    elif new_status == "pagado":
        db.add(Payment(
            amount=payment.get("transaction_amount") or reservation.price,
            payment_method=payment.get("payment_type_id") or "mercadopago",
            status=new_status,
            gateway_payment_id=gateway_id,
            reservation_id=reservation.id,
        ))

    db.commit()
    db.refresh(reservation)

    newly_paid = new_status == "pagado" and previous_status != "pagado"
    logger.info(
        f"✅ [WEBHOOK] Reserva {reservation.id}: payment_status {previous_status} -> {new_status} "
        f"(pago {gateway_id}, estado {gateway_status})"
    )
    return reservation, newly_paid
