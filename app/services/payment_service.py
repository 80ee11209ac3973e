"""Libro de pagos por estudiante y caché financiera del estudiante.

Cada movimiento (alta, edición o baja de un pago) se confirma primero y luego
se recalcula la condición de pago del estudiante (paymentStatus, totalPaid,
totalDue). Si el recálculo falla el pago queda guardado y el fallo se informa
en el SyncResult devuelto.
"""
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import EntityNotFoundError
from app.core.repository import Repository
from app.models import Payment, PaymentRecordStatus, PaymentStatus, PaymentType, Student
from app.models.mixins import utcnow
from app.schemas.sync import SyncResult

logger = logging.getLogger(__name__)


def to_float(valor: Any) -> float:
    """Número o 0 si el valor no es numérico."""
    try:
        return float(valor)
    except (TypeError, ValueError):
        return 0.0


def calculate_total_due(student: Student) -> float:
    """Total a pagar según el plan del estudiante.

    fullPaymentAmount tiene prioridad; si no, matrícula + cuota * meses.
    Los valores vacíos o en cero toman el valor por defecto de la configuración.
    """
    if student.full_payment_amount:
        completo = to_float(student.full_payment_amount)
        return completo if completo > 0 else float(settings.default_full_payment_amount)
    matricula = to_float(student.enrollment_fee) or float(settings.default_enrollment_fee)
    cuota = to_float(student.monthly_fee) or float(settings.default_monthly_fee)
    meses = int(to_float(student.number_of_months)) or settings.default_number_of_months
    return matricula + cuota * meses


def sum_paid(payments: list[Payment]) -> float:
    return sum(to_float(p.amount) for p in payments if p.status == PaymentRecordStatus.PAID)


def classify_payment_status(total_paid: float, total_due: float, payments: list[Payment]) -> str:
    """paid si cubre el total, current si hay un pago 'paid' este mes, si no overdue.

    A diferencia del panel anterior, un pago parcial antiguo no basta para
    'current': aquel marcaba como current a todo estudiante con totalPaid > 0.
    Nunca devuelve 'pending': ese valor solo se escribe al crear el estudiante.
    """
    if total_paid >= total_due:
        return PaymentStatus.PAID
    hoy = utcnow()
    for p in payments:
        if p.status == PaymentRecordStatus.PAID and p.date is not None:
            if p.date.month == hoy.month and p.date.year == hoy.year:
                return PaymentStatus.CURRENT
    return PaymentStatus.OVERDUE


def check_monthly_month(tipo: str | None, mes: int | None) -> None:
    if tipo == PaymentType.MONTHLY and mes is None:
        raise ValueError("month es obligatorio para pagos de tipo monthly")


class PaymentLedger:
    """Pagos de un estudiante (colección hija) y recálculo de su caché financiera."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = Repository(db, Payment)

    async def list_for_student(self, student_id: str) -> list[Payment]:
        return await self.repo.query(where={"student_id": student_id}, order_by=[Payment.date.desc()])

    async def get(self, student_id: str, payment_id: str) -> Payment | None:
        pago = await self.repo.get(payment_id)
        if pago is None or pago.student_id != student_id:
            return None
        return pago

    async def total_paid(self, student_id: str) -> float:
        return sum_paid(await self.list_for_student(student_id))

    def total_due(self, student: Student) -> float:
        return calculate_total_due(student)

    async def refresh_student_payment_status(self, student_id: str) -> Student | None:
        """Recalcula y guarda paymentStatus, totalPaid y totalDue del estudiante.

        Si el estudiante no existe se registra y no se hace nada.
        """
        estudiante = await self.db.get(Student, student_id)
        if estudiante is None:
            logger.warning("No se recalcula la condición de pago: estudiante %s no existe", student_id)
            return None
        pagos = await self.list_for_student(student_id)
        total_due = calculate_total_due(estudiante)
        total_paid = sum_paid(pagos)
        estudiante.payment_status = classify_payment_status(total_paid, total_due, pagos)
        estudiante.total_paid = total_paid
        estudiante.total_due = total_due
        estudiante.updated_at = utcnow()
        await self.db.flush()
        return estudiante

    async def _refresh_after_write(self, student_id: str, pago: Payment | None) -> SyncResult:
        """Segunda fase: el pago ya está confirmado, el recálculo es de mejor esfuerzo."""
        try:
            await self.refresh_student_payment_status(student_id)
            await self.db.commit()
        except Exception as exc:
            logger.exception("Fallo al recalcular la condición de pago del estudiante %s", student_id)
            await self.db.rollback()
            if pago is not None:
                await self.db.refresh(pago)
            return SyncResult(secondary_ok=False, secondary_error=str(exc), entity_id=student_id)
        return SyncResult(entity_id=student_id)

    async def add(self, student_id: str, data: dict[str, Any]) -> tuple[Payment, SyncResult]:
        if await self.db.get(Student, student_id) is None:
            raise EntityNotFoundError("Estudiante", student_id)
        check_monthly_month(data.get("type"), data.get("month"))
        ahora = utcnow()
        datos = {**data, "student_id": student_id, "created_at": ahora, "updated_at": ahora}
        if datos.get("date") is None:
            datos["date"] = ahora
        pago = await self.repo.create(datos)
        await self.db.commit()
        return pago, await self._refresh_after_write(student_id, pago)

    async def update(
        self, student_id: str, payment_id: str, partial: dict[str, Any]
    ) -> tuple[Payment | None, SyncResult]:
        pago = await self.get(student_id, payment_id)
        if pago is None:
            return None, SyncResult(primary_ok=False, entity_id=student_id)
        check_monthly_month(partial.get("type", pago.type), partial.get("month", pago.month))
        partial = {k: v for k, v in partial.items() if k != "student_id"}
        if "date" in partial and partial["date"] is None:
            partial.pop("date")
        pago = await self.repo.update(payment_id, {**partial, "updated_at": utcnow()})
        await self.db.commit()
        return pago, await self._refresh_after_write(student_id, pago)

    async def remove(self, student_id: str, payment_id: str) -> SyncResult:
        if await self.get(student_id, payment_id) is None:
            return SyncResult(primary_ok=False, entity_id=student_id)
        await self.repo.delete(payment_id)
        await self.db.commit()
        return await self._refresh_after_write(student_id, None)
