"""Modelo Estudiante (alumno matriculado)."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.mixins import AuditMixin, JSONType

if TYPE_CHECKING:
    from app.models.payment import Payment


class StudentStatus:
    """Valores permitidos para el estado del estudiante."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    SUSPENDED = "suspended"

    ALL = (ACTIVE, INACTIVE, GRADUATED, SUSPENDED)


class PaymentStatus:
    """Condición de pago calculada a partir de los pagos del estudiante."""
    PAID = "paid"
    CURRENT = "current"
    OVERDUE = "overdue"
    PENDING = "pending"

    ALL = (PAID, CURRENT, OVERDUE, PENDING)


class Student(AuditMixin, Base):
    """Estudiante con número de matrícula MAT-NNN, vinculado opcionalmente a un candidato."""

    __tablename__ = "students"

    matriculation_number: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    full_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    document_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    gender: Mapped[str | None] = mapped_column(Text, nullable=True)
    birth_date: Mapped[str | None] = mapped_column(Text, nullable=True)

    current_grade: Mapped[str | None] = mapped_column(Text, nullable=True)
    academic_year: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    enrollment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=StudentStatus.ACTIVE, index=True
    )

    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    province: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_path: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Plan de pagos (nulos = valores por defecto de la configuración)
    enrollment_fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    monthly_fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    number_of_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    full_payment_amount: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Caché financiera, se recalcula tras cada movimiento de pagos
    payment_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=PaymentStatus.PENDING
    )
    total_paid: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_due: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Copia del padrino tomada al asignarlo; no se refresca si cambia el padrino
    sponsor_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    sponsor: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    sponsor_assigned_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Se fija al crear desde un candidato y no cambia
    candidate_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    payments: Mapped[list["Payment"]] = relationship(
        "Payment",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
