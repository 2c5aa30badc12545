import hashlib
import hmac
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

# =======================================================
# 💳 DATOS DE TARJETA
# El número completo y el CVV nunca se guardan en claro:
# - número: huella HMAC-SHA256 + últimos 4 dígitos
# - CVV: hash bcrypt
# =======================================================

def normalize_card_number(card_number: str) -> str:
    return "".join(ch for ch in card_number if ch.isdigit())

def card_fingerprint(card_number: str, secret: str) -> str:
    digits = normalize_card_number(card_number)
    return hmac.new(secret.encode("utf-8"), digits.encode("utf-8"), hashlib.sha256).hexdigest()

def mask_card_number(last4: str) -> str:
    return f"**** **** **** {last4}"

def hash_cvv(cvv: str) -> str:
    return pwd_context.hash(cvv)
