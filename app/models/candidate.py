"""Modelo Candidato (solicitud de beca)."""
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.mixins import AuditMixin, JSONType


class CandidateStatus:
    """Valores permitidos para el estado del candidato."""
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    ARCHIVED = "archived"

    ALL = (PENDING, ACTIVE, REJECTED, ARCHIVED)


class CandidatePriority:
    """Prioridad de la solicitud."""
    ALTA = "alta"
    MEDIA = "media"
    BAJA = "baja"

    ALL = (ALTA, MEDIA, BAJA)


class Candidate(AuditMixin, Base):
    """Candidato a beca. sponsor_id solo debe estar presente con status 'active'."""

    __tablename__ = "candidates"

    document_id: Mapped[str] = mapped_column(Text, nullable=False)
    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Registros antiguos pueden tener solo full_name
    full_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    gender: Mapped[str | None] = mapped_column(Text, nullable=True)
    birth_date: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=CandidateStatus.PENDING, index=True
    )
    level: Mapped[str | None] = mapped_column(Text, nullable=True)
    period: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    priority: Mapped[str] = mapped_column(String(8), nullable=False, default=CandidatePriority.MEDIA)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    province: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Datos sensibles de la solicitud (no se exponen en el listado público)
    guardian: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    household: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    audit: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    sponsor_id: Mapped[str | None] = mapped_column(
        String(32), ForeignKey("sponsors.id", ondelete="SET NULL"), nullable=True
    )
    sponsor_assigned_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_path: Mapped[str | None] = mapped_column(Text, nullable=True)
