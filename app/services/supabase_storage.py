# app/services/supabase_storage.py
import logging
import uuid

from fastapi import Request, UploadFile
from supabase import create_client

from app.config import Settings
from app.core.exceptions import BadRequestException, StorageError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}


def get_storage(request: Request) -> "SupabaseStorage":
    return request.app.state.storage


class SupabaseStorage:
    def __init__(self, settings: Settings):
        self.url = settings.SUPABASE_URL
        # Usar SERVICE KEY para escritura
        self.key = settings.SUPABASE_SERVICE_KEY
        self.bucket = settings.SUPABASE_BUCKET
        self.max_size_mb = settings.MAX_UPLOAD_MB
        self._client = None

    @property
    def client(self):
        # Se crea al primer uso: la API arranca aunque Supabase no esté configurado
        if self._client is None:
            if not self.url or not self.key:
                raise StorageError("Supabase Storage no está configurado")
            self._client = create_client(self.url, self.key)
        return self._client

    async def upload_image(self, file: UploadFile, folder: str = "maquinaria") -> str:
        """Sube imagen y retorna URL pública"""
        content = await file.read()
        if not content:
            raise BadRequestException("No se ha subido ninguna imagen")
        if len(content) > self.max_size_mb * 1024 * 1024:
            raise BadRequestException(f"La imagen es demasiado grande (máximo {self.max_size_mb}MB)")

        filename = file.filename or "image"
        ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        if ext not in ALLOWED_EXTENSIONS:
            raise BadRequestException("Tipo de archivo no permitido. Use PNG, JPG, JPEG, GIF o WEBP")

        # Generar nombre único
        storage_path = f"{folder}/{uuid.uuid4().hex}.{ext}"

        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(storage_path, content, {"content-type": file.content_type or f"image/{ext}"})
            public_url = bucket.get_public_url(storage_path)
        except Exception as e:
            logger.exception(f"❌ Error subiendo {storage_path} a Supabase")
            raise StorageError(f"Error al subir imagen: {e}") from e

        logger.info(f"📤 Imagen subida: {public_url}")
        return public_url
