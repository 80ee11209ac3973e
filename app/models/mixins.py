"""Columnas comunes: id opaco y auditoría (createdAt / updatedAt)."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

# JSONB en PostgreSQL, JSON genérico en el resto (SQLite en tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def generate_id() -> str:
    """Id opaco generado por el almacén (32 caracteres hex)."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """Id de documento y marcas de auditoría."""

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
