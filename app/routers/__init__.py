from .users import router as users_router
from .providers import router as providers_router
from .machinery import router as machinery_router
from .reservations import router as reservations_router
from .payments import router as payments_router
from .payment_methods import router as payment_methods_router
from .mercadopago import router as mercadopago_router
from .uploads import router as uploads_router
from .email import router as email_router

__all__ = [
    "users_router", "providers_router", "machinery_router", "reservations_router",
    "payments_router", "payment_methods_router", "mercadopago_router",
    "uploads_router", "email_router",
]
