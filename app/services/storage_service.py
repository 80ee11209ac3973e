"""Almacenamiento de archivos por ruta (fotos de perfil y comprobantes de pago).

Los archivos se guardan bajo settings.storage_dir y se sirven en
settings.storage_base_url (ver app/main.py).
"""
import logging
import time
from pathlib import Path, PurePosixPath

from app.core.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

TIPOS_IMAGEN = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
TIPOS_COMPROBANTE = {**TIPOS_IMAGEN, "application/pdf": "pdf"}

CARPETA_COMPROBANTES = "payment-receipts"


def _extension(filename: str | None, content_type: str, permitidos: dict[str, str]) -> str:
    sufijo = PurePosixPath(filename or "").suffix.lower().lstrip(".")
    if sufijo in {*permitidos.values(), "jpeg"}:
        return sufijo
    return permitidos[content_type]


class LocalBlobStore:
    """Sube, entrega la URL de descarga y borra archivos direccionados por ruta."""

    def __init__(self, root: str | Path | None = None, base_url: str | None = None):
        self.root = Path(root or settings.storage_dir)
        self.base_url = (base_url or settings.storage_base_url).rstrip("/")

    def _resolve(self, path: str) -> Path:
        relativa = PurePosixPath(path)
        if relativa.is_absolute() or ".." in relativa.parts or not relativa.parts:
            raise StorageError(f"Ruta de archivo inválida: {path}")
        return self.root.joinpath(*relativa.parts)

    def upload(self, path: str, content: bytes) -> str:
        destino = self._resolve(path)
        destino.parent.mkdir(parents=True, exist_ok=True)
        destino.write_bytes(content)
        logger.info("Archivo guardado en %s (%d bytes)", path, len(content))
        return self.get_download_url(path)

    def get_download_url(self, path: str) -> str:
        self._resolve(path)
        return f"{self.base_url}/{path}"

    def delete(self, path: str) -> bool:
        destino = self._resolve(path)
        if not destino.is_file():
            return False
        destino.unlink()
        return True

    def upload_profile_photo(
        self,
        collection: str,
        entity_id: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> tuple[str, str]:
        """Guarda {collection}/{id}/profile.{ext}. Solo imágenes de hasta max_photo_bytes."""
        if content_type not in TIPOS_IMAGEN:
            raise StorageError("La foto debe ser una imagen (jpg, png, gif o webp)")
        if len(content) > settings.max_photo_bytes:
            raise StorageError("La foto supera el tamaño máximo de 5 MB")
        path = f"{collection}/{entity_id}/profile.{_extension(filename, content_type, TIPOS_IMAGEN)}"
        return self.upload(path, content), path

    def upload_payment_receipt(
        self,
        student_id: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> tuple[str, str]:
        """Guarda payment-receipts/{studentId}/{timestamp}.{ext}. Imágenes o PDF de hasta max_receipt_bytes."""
        if content_type not in TIPOS_COMPROBANTE:
            raise StorageError("El comprobante debe ser una imagen o un PDF")
        if len(content) > settings.max_receipt_bytes:
            raise StorageError("El comprobante supera el tamaño máximo de 10 MB")
        ext = _extension(filename, content_type, TIPOS_COMPROBANTE)
        path = f"{CARPETA_COMPROBANTES}/{student_id}/{int(time.time() * 1000)}.{ext}"
        return self.upload(path, content), path
