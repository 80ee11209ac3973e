"""Esquemas para estudiantes."""
from datetime import datetime

from pydantic import Field, field_validator

from app.models.student import PaymentStatus, StudentStatus
from app.schemas.base import CamelModel, PartialUpdate, validar_opcion
from app.schemas.sponsor import SponsorSnapshot
from app.schemas.sync import SyncResult


class StudentCreate(CamelModel):
    """Alta directa de estudiante (sin candidato). Recibe el siguiente número de matrícula."""

    first_name: str = ""
    last_name: str = ""
    document_id: str | None = None
    gender: str | None = None
    birth_date: str | None = None
    current_grade: str | None = None
    academic_year: str | None = None
    enrollment_date: datetime | None = None
    status: str = Field(default=StudentStatus.ACTIVE, description="active, inactive, graduated o suspended")
    city: str | None = None
    province: str | None = None
    country: str | None = None
    notes: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None
    enrollment_fee: float | None = Field(default=None, ge=0)
    monthly_fee: float | None = Field(default=None, ge=0)
    number_of_months: int | None = Field(default=None, ge=0)
    full_payment_amount: float | None = Field(default=None, ge=0)
    payment_status: str = PaymentStatus.PENDING
    sponsor_id: str | None = None
    sponsor: SponsorSnapshot | None = None
    sponsor_assigned_date: datetime | None = None

    @field_validator("status")
    @classmethod
    def validar_estado(cls, v: str) -> str:
        return validar_opcion(v, StudentStatus.ALL, "status")

    @field_validator("payment_status")
    @classmethod
    def validar_condicion_pago(cls, v: str) -> str:
        return validar_opcion(v, PaymentStatus.ALL, "paymentStatus")


class StudentUpdate(PartialUpdate):
    """Edición parcial de un estudiante. Solo se escriben los campos enviados."""

    campos_no_nulos = ("first_name", "last_name", "status", "payment_status")

    matriculation_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    document_id: str | None = None
    gender: str | None = None
    birth_date: str | None = None
    current_grade: str | None = None
    academic_year: str | None = None
    enrollment_date: datetime | None = None
    status: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    notes: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None
    enrollment_fee: float | None = Field(default=None, ge=0)
    monthly_fee: float | None = Field(default=None, ge=0)
    number_of_months: int | None = Field(default=None, ge=0)
    full_payment_amount: float | None = Field(default=None, ge=0)
    payment_status: str | None = None
    sponsor_id: str | None = None
    sponsor: SponsorSnapshot | None = None
    sponsor_assigned_date: datetime | None = None

    @field_validator("status")
    @classmethod
    def validar_estado(cls, v: str | None) -> str | None:
        return validar_opcion(v, StudentStatus.ALL, "status")

    @field_validator("payment_status")
    @classmethod
    def validar_condicion_pago(cls, v: str | None) -> str | None:
        return validar_opcion(v, PaymentStatus.ALL, "paymentStatus")


class StudentRead(CamelModel):
    id: str
    matriculation_number: str | None = None
    first_name: str
    last_name: str
    full_name: str
    document_id: str | None = None
    gender: str | None = None
    birth_date: str | None = None
    current_grade: str | None = None
    academic_year: str | None = None
    enrollment_date: datetime | None = None
    status: str
    city: str | None = None
    province: str | None = None
    country: str | None = None
    notes: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    photo_path: str | None = None
    enrollment_fee: float | None = None
    monthly_fee: float | None = None
    number_of_months: int | None = None
    full_payment_amount: float | None = None
    payment_status: str
    total_paid: float = 0
    total_due: float | None = None
    sponsor_id: str | None = None
    sponsor: SponsorSnapshot | None = None
    sponsor_assigned_date: datetime | None = None
    candidate_id: str | None = None
    created_at: datetime
    updated_at: datetime


class StudentListResponse(CamelModel):
    students: list[StudentRead]


class MatriculationNumberResponse(CamelModel):
    matriculation_number: str


class StudentWriteResponse(CamelModel):
    """Estudiante guardado y resultado de la sincronización con su candidato."""

    student: StudentRead
    sync: SyncResult
    warning: str | None = None


class PaymentReminderResponse(CamelModel):
    success: bool
    message: str | None = None
    sponsor_email: str
