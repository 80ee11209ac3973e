"""Esquemas del resumen financiero (estudiantes activos con padrino)."""
from app.schemas.base import CamelModel


class StatusCounts(CamelModel):
    paid: int = 0
    current: int = 0
    overdue: int = 0
    pending: int = 0


class GradeTotals(CamelModel):
    grade: str
    due: float = 0
    paid: float = 0
    remaining: float = 0
    count: int = 0


class StudentBalance(CamelModel):
    id: str
    name: str
    grade: str
    payment_status: str
    total_due: float
    total_paid: float
    remaining: float


class FinanceSummary(CamelModel):
    """Totales en USD, conteo por condición de pago, desglose por curso y mayores saldos."""

    student_count: int
    total_due: float
    total_paid: float
    remaining: float
    status_counts: StatusCounts
    grades: list[GradeTotals]
    top_balances: list[StudentBalance]
