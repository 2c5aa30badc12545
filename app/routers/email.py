# app/routers/email.py
import logging
from fastapi import APIRouter, Depends
from app.schemas.email import SendEmailRequest
from app.core.email_service import ResendMailer, build_reservation_confirmation, get_mailer

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/send-email")
def send_email(datos: SendEmailRequest, mailer: ResendMailer = Depends(get_mailer)):
    """
    Envía el correo de confirmación de reserva. Si Resend falla,
    EmailDeliveryError termina en un 500 desde el manejador global.
    """
    subject, text_content, html_content = build_reservation_confirmation(
        name=datos.name,
        amount=datos.amount,
        delivery_date=datos.delivery_date,
        machinery_name=datos.machinery_name,
        machinery_details=datos.machinery_details,
        rental_days=datos.rental_days,
    )
    mailer.send(datos.email, subject, text_content, html_content)
    return {"message": "Correo enviado exitosamente"}
