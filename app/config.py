# app/config.py

from fastapi import Request
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Entorno: dev, test, prod
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./rentek.db"

    # CORS
    FRONTEND_URLS: str = "http://localhost:8081,http://localhost:19006,http://localhost:3000"

    # =======================================================
    # 💳 MERCADO PAGO
    # =======================================================
    MERCADO_PAGO_API_URL: str = "https://api.mercadopago.com"
    MERCADO_PAGO_ACCESS_TOKEN: Optional[str] = None
    PAYMENT_CURRENCY: str = "MXN"
    PAYMENT_ITEM_TITLE: str = "Renta de Equipo"
    # URL pública de esta API; la pasarela la usa para back_urls y el webhook
    PUBLIC_BASE_URL: str = "https://rentek.onrender.com"
    # Deep link de la app móvil a donde se redirige después del pago
    APP_DEEP_LINK: str = "rentek://payment"
    GATEWAY_TIMEOUT_SECONDS: float = 15.0

    # Email (Resend)
    RESEND_API_KEY: Optional[str] = None
    SENDER_EMAIL: str = "Rentek <no-reply@rentek.app>"

    # Supabase Storage
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_KEY: Optional[str] = None
    SUPABASE_BUCKET: str = "maquinaria"
    MAX_UPLOAD_MB: int = 5

    # Secreto para la huella HMAC de las tarjetas guardadas
    CARD_HASH_SECRET: str = "change-me-card-secret"

    # Permitir reservas con fechas traslapadas para la misma maquinaria
    ALLOW_OVERLAPPING_RESERVATIONS: bool = True

    @property
    def allowed_origins(self) -> List[str]:
        all_urls = []
        for url in self.FRONTEND_URLS.split(","):
            url = url.strip()
            if url:
                all_urls.append(url)
                # Añadir versión HTTPS si es HTTP
                if url.startswith("http://"):
                    all_urls.append(url.replace("http://", "https://"))
        return all_urls

    @property
    def expose_error_details(self) -> bool:
        return self.ENV.lower() != "prod"

    class Config:
        env_file = ".env"
        extra = "ignore"


def get_settings(request: Request) -> Settings:
    """Configuración construida una sola vez en create_app()"""
    return request.app.state.settings
