"""Esquemas para candidatos (solicitudes de beca)."""
from datetime import datetime

from pydantic import Field, field_validator, model_validator

from app.models.candidate import CandidatePriority, CandidateStatus
from app.schemas.base import CamelModel, PartialUpdate, validar_opcion
from app.schemas.sponsor import SponsorCreate
from app.schemas.sync import SyncResult


class CandidateCreate(CamelModel):
    """Alta de candidato (formulario de admisión o alta manual del administrador)."""

    document_id: str = Field(min_length=1, description="Número de documento de identidad (obligatorio)")
    first_name: str = ""
    last_name: str = ""
    full_name: str | None = Field(default=None, description="Solo se usa si faltan nombre y apellido")
    gender: str | None = None
    birth_date: str | None = None
    status: str = Field(default=CandidateStatus.PENDING, description="pending, active, rejected o archived")
    level: str | None = Field(default=None, description="Curso al que postula")
    period: str | None = Field(default=None, description="Período/año de la solicitud (ej. 2026)")
    priority: str = Field(default=CandidatePriority.MEDIA, description="alta, media o baja")
    reason: str | None = None
    notes: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    guardian: dict | None = None
    household: dict | None = None
    audit: dict | None = None
    sponsor_id: str | None = None
    sponsor_assigned_date: datetime | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None

    @field_validator("status")
    @classmethod
    def validar_estado(cls, v: str) -> str:
        return validar_opcion(v, CandidateStatus.ALL, "status")

    @field_validator("priority")
    @classmethod
    def validar_prioridad(cls, v: str) -> str:
        return validar_opcion(v, CandidatePriority.ALL, "priority")


class CandidateUpdate(PartialUpdate):
    """Edición parcial. Solo se escriben los campos enviados."""

    campos_no_nulos = ("document_id", "first_name", "last_name", "full_name", "status", "priority")

    document_id: str | None = Field(default=None, min_length=1)
    first_name: str | None = None
    last_name: str | None = None
    full_name: str | None = None
    gender: str | None = None
    birth_date: str | None = None
    status: str | None = None
    level: str | None = None
    period: str | None = None
    priority: str | None = None
    reason: str | None = None
    notes: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    guardian: dict | None = None
    household: dict | None = None
    audit: dict | None = None
    sponsor_id: str | None = None
    sponsor_assigned_date: datetime | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None

    @field_validator("status")
    @classmethod
    def validar_estado(cls, v: str | None) -> str | None:
        return validar_opcion(v, CandidateStatus.ALL, "status")

    @field_validator("priority")
    @classmethod
    def validar_prioridad(cls, v: str | None) -> str | None:
        return validar_opcion(v, CandidatePriority.ALL, "priority")


class CandidateRead(CamelModel):
    id: str
    document_id: str
    first_name: str
    last_name: str
    full_name: str
    gender: str | None = None
    birth_date: str | None = None
    status: str
    level: str | None = None
    period: str | None = None
    priority: str
    reason: str | None = None
    notes: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    guardian: dict | None = None
    household: dict | None = None
    audit: dict | None = None
    sponsor_id: str | None = None
    sponsor_assigned_date: datetime | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None
    created_at: datetime
    updated_at: datetime


class CandidateListResponse(CamelModel):
    candidates: list[CandidateRead]


class PublicGuardian(CamelModel):
    relationship: str = ""


class CandidatePublic(CamelModel):
    """Candidato pendiente sin datos sensibles: sin hogar ni auditoría y del tutor solo el parentesco."""

    id: str
    document_id: str
    first_name: str
    last_name: str
    full_name: str
    gender: str | None = None
    birth_date: str | None = None
    status: str
    level: str | None = None
    period: str | None = None
    priority: str
    reason: str | None = None
    notes: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    sponsor_id: str | None = None
    sponsor_assigned_date: datetime | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None
    guardian: PublicGuardian = Field(default_factory=PublicGuardian)
    created_at: datetime
    updated_at: datetime


class CandidatePublicListResponse(CamelModel):
    candidates: list[CandidatePublic]


class CandidateApprovalRequest(CamelModel):
    """Completa la aprobación: padrino existente (sponsorId) o uno nuevo (sponsor)."""

    sponsor_id: str | None = None
    sponsor: SponsorCreate | None = None

    @model_validator(mode="after")
    def un_solo_padrino(self):
        if bool(self.sponsor_id) == bool(self.sponsor):
            raise ValueError("Envíe sponsorId o sponsor (uno de los dos)")
        return self


class CandidateWriteResponse(CamelModel):
    """Candidato guardado y resultado de la sincronización con su estudiante."""

    candidate: CandidateRead
    sync: SyncResult
    warning: str | None = None


class CandidateImportError(CamelModel):
    row: int = Field(description="Fila del Excel (la cabecera es la fila 1)")
    document_id: str | None = None
    error: str


class CandidateImportResponse(CamelModel):
    """Resultado de la importación masiva de candidatos desde Excel."""

    total_rows: int
    created: int
    skipped: int = Field(description="Filas omitidas porque el documentId ya existe")
    skipped_document_ids: list[str] = Field(default_factory=list)
    candidate_ids: list[str] = Field(default_factory=list)
    errors: list[CandidateImportError] = Field(default_factory=list)
