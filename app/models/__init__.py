from .user import User
from .provider import Provider
from .machinery import Machinery
from .reservation import Reservation
from .payment import Payment
from .payment_method import PaymentMethod
from .upload import Upload

__all__ = [
    "User", "Provider", "Machinery", "Reservation",
    "Payment", "PaymentMethod", "Upload",
]
