import logging
from typing import Optional

import resend
from fastapi import Request

from app.config import Settings
from app.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


def get_mailer(request: Request) -> "ResendMailer":
    return request.app.state.mailer


class ResendMailer:
    """Envía correos usando la API de Resend"""

    def __init__(self, settings: Settings):
        self.api_key = settings.RESEND_API_KEY
        self.sender = settings.SENDER_EMAIL

    def send(self, to_email: str, subject: str, message: str, html_content: Optional[str] = None) -> str:
        if not self.api_key:
            raise EmailDeliveryError("RESEND_API_KEY no está configurada")

        params = {
            "from": self.sender,
            "to": [to_email],
            "subject": subject,
            "text": message,
        }
        if html_content:
            params["html"] = html_content

        logger.info(f"📧 [RESEND] Enviando email a: {to_email}")
        resend.api_key = self.api_key
        try:
            email = resend.Emails.send(params)
        except Exception as e:
            logger.exception(f"❌ [RESEND] Error enviando a {to_email}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"✅ [RESEND] Email enviado. ID: {email['id']}")
        return email["id"]


def build_reservation_confirmation(
    name: str,
    amount: float,
    delivery_date: str,
    machinery_name: str,
    machinery_details: str,
    rental_days: int,
):
    """Asunto, texto plano y HTML del correo de confirmación de reserva"""
    subject = "Confirmación de Reserva"

    text_content = f"""
    Confirmación de Reserva

    Hola {name},

    Tu reserva ha sido confirmada con éxito. Aquí están los detalles:

    Monto Total: ${amount:.2f}
    Día de Entrega: {delivery_date}
    Máquina: {machinery_name}
    Detalles: {machinery_details}
    Días de Renta: {rental_days} días

    Gracias por elegir nuestro servicio.
    Rentek
    """

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6;">
        <h2>Confirmación de Reserva</h2>
        <p>Hola <strong>{name}</strong>,</p>
        <p>Tu reserva ha sido confirmada con éxito. Aquí están los detalles:</p>
        <ul>
            <li><strong>Monto Total:</strong> ${amount:.2f}</li>
            <li><strong>Día de Entrega:</strong> {delivery_date}</li>
            <li><strong>Máquina:</strong> {machinery_name}</li>
            <li><strong>Detalles:</strong> {machinery_details}</li>
            <li><strong>Días de Renta:</strong> {rental_days} días</li>
        </ul>
        <p>Gracias por elegir nuestro servicio.</p>
        <p><strong>Atentamente,</strong><br>Rentek</p>
    </body>
    </html>
    """

    return subject, text_content, html_content


def send_reservation_confirmation(mailer: ResendMailer, to_email: str, **datos) -> bool:
    """
    Versión para BackgroundTasks: ya no hay a quién responder con un 500,
    así que el fallo se registra y se devuelve False.
    """
    subject, text_content, html_content = build_reservation_confirmation(**datos)
    try:
        mailer.send(to_email, subject, text_content, html_content)
        return True
    except EmailDeliveryError as e:
        logger.error(f"❌ No se pudo enviar la confirmación a {to_email}: {e.message}")
        return False
