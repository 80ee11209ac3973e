"""Esquemas para padrinos."""
import re
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, Field

from app.schemas.base import CamelModel, PartialUpdate

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validar_email(v: str) -> str:
    v = v.strip()
    if not EMAIL_REGEX.match(v):
        raise ValueError("email con formato inválido")
    return v


EmailText = Annotated[str, AfterValidator(validar_email)]


class SponsorCreate(CamelModel):
    """Alta de padrino (flujo independiente o durante la aprobación de un candidato)."""

    first_name: str = Field(default="", description="Nombre")
    last_name: str = Field(default="", description="Apellido")
    email: EmailText = Field(description="Correo electrónico (obligatorio)")
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    notes: str | None = None


class SponsorUpdate(PartialUpdate):
    """Edición parcial de un padrino. Solo se escriben los campos enviados."""

    campos_no_nulos = ("first_name", "last_name", "email")

    first_name: str | None = None
    last_name: str | None = None
    email: EmailText | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    notes: str | None = None


class SponsorRead(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    notes: str | None = None
    candidate_ids: list[str] | None = None
    created_at: datetime
    updated_at: datetime


class SponsorListResponse(CamelModel):
    sponsors: list[SponsorRead]


class SponsorSnapshot(CamelModel):
    """Copia de contacto del padrino guardada en el estudiante (no se sincroniza)."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
