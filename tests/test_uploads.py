import asyncio
import io

import pytest
from fastapi import UploadFile

from app.core.exceptions import BadRequestException, StorageError
from app.services.supabase_storage import SupabaseStorage


def test_upload_image_persists_row(client, storage):
    r = client.post(
        "/api/upload",
        data={"nombre_maquina": "Excavadora CAT 320"},
        files={"image": ("cat320.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
    )

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Imagen subida con éxito"
    assert body["imageUrl"] == "https://storage.test/maquinaria/cat320.jpg"
    assert body["upload"]["nombre_maquina"] == "Excavadora CAT 320"

    listed = client.get("/api/upload").json()
    assert [u["image_url"] for u in listed] == ["https://storage.test/maquinaria/cat320.jpg"]


def test_upload_without_file_is_400(client, storage):
    r = client.post("/api/upload", data={"nombre_maquina": "Grúa"})

    assert r.status_code == 400
    assert r.json() == {"error": "No se ha subido ninguna imagen"}
    assert storage.uploaded == []


def test_upload_storage_failure_is_500(client, storage):
    storage.fail = True

    r = client.post(
        "/api/upload",
        data={"nombre_maquina": "Grúa"},
        files={"image": ("grua.png", b"\x89PNG fake", "image/png")},
    )

    assert r.status_code == 500
    assert client.get("/api/upload").json() == []


def _upload_file(name: str, content: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=name)


def test_storage_rejects_bad_extension_and_size(settings):
    settings.MAX_UPLOAD_MB = 1
    storage = SupabaseStorage(settings)

    with pytest.raises(BadRequestException):
        asyncio.run(storage.upload_image(_upload_file("manual.pdf", b"%PDF")))
    with pytest.raises(BadRequestException):
        asyncio.run(storage.upload_image(_upload_file("big.png", b"0" * (1024 * 1024 + 1))))
    with pytest.raises(BadRequestException):
        asyncio.run(storage.upload_image(_upload_file("empty.png", b"")))


def test_storage_not_configured(settings):
    storage = SupabaseStorage(settings)

    with pytest.raises(StorageError):
        asyncio.run(storage.upload_image(_upload_file("ok.png", b"\x89PNG")))


def test_upload_rejects_overlong_machine_name(client, storage):
    r = client.post(
        "/api/upload",
        data={"nombre_maquina": "N" * 151},
        files={"image": ("grua.png", b"\x89PNG fake", "image/png")},
    )

    assert r.status_code == 400
    assert storage.uploaded == []
    assert client.get("/api/upload").json() == []
