import pytest

from app.core.config import settings
from app.core.exceptions import StorageError
from app.services.storage_service import LocalBlobStore


@pytest.fixture
def almacen(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(root=tmp_path, base_url="/files/")


def test_profile_photo_path_and_url(almacen, tmp_path):
    url, path = almacen.upload_profile_photo("candidates", "abc", "Foto.PNG", "image/png", b"png")
    assert path == "candidates/abc/profile.png"
    assert url == "/files/candidates/abc/profile.png"
    assert (tmp_path / "candidates" / "abc" / "profile.png").read_bytes() == b"png"


def test_extension_from_content_type_when_filename_has_none(almacen):
    _, path = almacen.upload_profile_photo("students", "s1", "foto", "image/jpeg", b"jpg")
    assert path == "students/s1/profile.jpg"


def test_photo_must_be_image(almacen):
    with pytest.raises(StorageError):
        almacen.upload_profile_photo("students", "s1", "doc.pdf", "application/pdf", b"%PDF")


def test_photo_size_limit(almacen, monkeypatch):
    monkeypatch.setattr(settings, "max_photo_bytes", 3)
    with pytest.raises(StorageError, match="5 MB"):
        almacen.upload_profile_photo("students", "s1", "a.png", "image/png", b"1234")


def test_payment_receipt_accepts_pdf(almacen):
    url, path = almacen.upload_payment_receipt("s1", "recibo.pdf", "application/pdf", b"%PDF-1.4")
    assert path.startswith("payment-receipts/s1/")
    assert path.endswith(".pdf")
    assert url == f"/files/{path}"


def test_payment_receipt_rejects_other_types(almacen):
    with pytest.raises(StorageError):
        almacen.upload_payment_receipt("s1", "datos.csv", "text/csv", b"a,b")


def test_rejects_paths_outside_root(almacen):
    for ruta in ("../fuera.txt", "/etc/passwd", "a/../../b", ""):
        with pytest.raises(StorageError):
            almacen.upload(ruta, b"x")


def test_delete(almacen):
    almacen.upload("otros/nota.txt", b"x")
    assert almacen.delete("otros/nota.txt") is True
    assert almacen.delete("otros/nota.txt") is False
