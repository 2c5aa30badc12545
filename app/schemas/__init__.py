from .user import *
from .provider import *
from .machinery import *
from .reservation import *
from .payment import *
from .payment_method import *
from .upload import *
from .mercadopago import *
from .email import *

__all__ = [
    # User
    "UserBase", "UserCreate", "UserUpdate", "UserResponse", "UserSummary", "LoginRequest",

    # Provider
    "ProviderBase", "ProviderCreate", "ProviderUpdate", "ProviderResponse", "ProviderSummary",

    # Machinery
    "MachineryBase", "MachineryCreate", "MachineryUpdate", "MachineryResponse",
    "MachineryWithProviderResponse", "MachineryBulkDelete", "MachineryCount",

    # Reservation
    "ReservationBase", "ReservationCreate", "ReservationUpdate", "ReservationResponse",

    # Payment
    "PaymentBase", "PaymentCreate", "PaymentUpdate", "PaymentResponse",

    # Payment method
    "PaymentMethodBase", "PaymentMethodCreate", "PaymentMethodUpdate", "PaymentMethodResponse",

    # Upload
    "UploadResponse", "UploadResult",

    # Mercado Pago
    "PreferenceRequest", "WebhookData", "WebhookNotification",

    # Email
    "SendEmailRequest",
]
