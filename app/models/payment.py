"""Modelo Pago (registro hijo de un estudiante)."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.mixins import AuditMixin, utcnow

if TYPE_CHECKING:
    from app.models.student import Student


class PaymentType:
    """Tipos de pago."""
    ENROLLMENT = "enrollment"  # Matrícula
    MONTHLY = "monthly"  # Cuota mensual
    FULL = "full"  # Pago completo
    BALANCE = "balance"  # Saldo total
    OTHER = "other"

    ALL = (ENROLLMENT, MONTHLY, FULL, BALANCE, OTHER)


class PaymentRecordStatus:
    """Estado de un pago individual. Solo 'paid' suma al total pagado."""
    PAID = "paid"
    PENDING = "pending"
    CANCELLED = "cancelled"

    ALL = (PAID, PENDING, CANCELLED)


class Payment(AuditMixin, Base):
    """Pago en USD asociado a un estudiante."""

    __tablename__ = "payments"

    student_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    receipt_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=PaymentRecordStatus.PAID
    )

    student: Mapped["Student"] = relationship("Student", back_populates="payments")
