"""Modelo Padrino (donante recurrente)."""
from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.mixins import AuditMixin, JSONType


class Sponsor(AuditMixin, Base):
    """Padrino. No mantiene la lista de candidatos/estudiantes que lo referencian."""

    __tablename__ = "sponsors"

    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="", index=True)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Campo heredado, solo lo consulta list_by_candidate_ids
    candidate_ids: Mapped[list | None] = mapped_column(JSONType, nullable=True)
