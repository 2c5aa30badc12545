# app/core/exceptions.py

from fastapi import HTTPException, status

class AuthException(HTTPException):
    def __init__(self, detail: str = "Credenciales incorrectas"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class BadRequestException(HTTPException):
    def __init__(self, detail="Solicitud inválida"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Recurso no encontrado"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

# =======================================================
# ERRORES DE SERVICIOS EXTERNOS (responden 500)
# =======================================================
class UpstreamError(Exception):
    """
    Falla de un servicio externo. `public_message` se muestra siempre al
    cliente; el mensaje original solo se expone fuera de producción.
    """
    public_message = "Error al comunicarse con un servicio externo"

    def __init__(self, message: str = None, payload=None):
        self.message = message or self.public_message
        self.payload = payload
        super().__init__(self.message)

class PaymentGatewayError(UpstreamError):
    public_message = "Error al comunicarse con la pasarela de pago"

class EmailDeliveryError(UpstreamError):
    public_message = "Error al enviar el correo"

class StorageError(UpstreamError):
    public_message = "Error al subir la imagen"
