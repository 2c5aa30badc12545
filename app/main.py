# En main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app import models  # noqa: F401  registra todas las tablas en Base.metadata
from app.config import Settings
from app.core.email_service import ResendMailer
from app.core.exceptions import UpstreamError
from app.core.logging_config import setup_logging
from app.core.mercadopago_service import MercadoPagoService
from app.database import Base, build_engine, build_session_factory
from app.routers import (
    users,
    providers,
    machinery,
    reservations,
    payments,
    payment_methods,
    mercadopago,
    uploads,
    email,
)
from app.services.supabase_storage import SupabaseStorage

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI):
    """Todas las respuestas de error tienen la forma {"error": ..., "details"?: ...}"""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = []
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            details.append({"field": ".".join(loc), "message": err.get("msg")})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Faltan campos obligatorios o son inválidos", "details": details},
        )

    @app.exception_handler(UpstreamError)
    async def upstream_exception_handler(request: Request, exc: UpstreamError):
        logger.error(f"❌ {type(exc).__name__} en {request.method} {request.url.path}: {exc.message}")
        content = {"error": exc.public_message}
        if app.state.settings.expose_error_details:
            content["details"] = exc.payload or exc.message
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Error no controlado en {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error interno del servidor"},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    engine = build_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        logger.info(f"🚀 Rentek API iniciada (ENV={settings.ENV})")
        yield
        engine.dispose()

    app = FastAPI(
        title="Rentek - Renta de Maquinaria Pesada",
        description="API para gestión de renta de maquinaria pesada",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.payment_gateway = MercadoPagoService(settings)
    app.state.mailer = ResendMailer(settings)
    app.state.storage = SupabaseStorage(settings)

    # Configuración CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
        expose_headers=["*"],
        max_age=600,
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(users.router, prefix="/users", tags=["Usuarios"])
    app.include_router(providers.router, prefix="/providers", tags=["Proveedores"])
    app.include_router(machinery.router, prefix="/machinery", tags=["Maquinaria"])
    app.include_router(reservations.router, prefix="/reservations", tags=["Reservas"])
    app.include_router(payments.router, prefix="/payments", tags=["Pagos"])
    app.include_router(payment_methods.router, prefix="/payment-methods", tags=["Métodos de Pago"])

    # Mercado Pago define su propio prefix (/api/pagos)
    app.include_router(mercadopago.router)

    app.include_router(uploads.router, prefix="/api", tags=["Imágenes"])
    app.include_router(email.router, prefix="/email", tags=["Correo"])

    @app.get("/")
    def read_root():
        return {
            "mensaje": "Rentek API funcionando correctamente",
            "version": "1.0.0"
        }

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "service": "Rentek API",
        }

    return app


app = create_app()
