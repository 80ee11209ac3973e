"""Resumen financiero de los estudiantes activos con padrino."""
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import PaymentStatus, Student, StudentStatus
from app.schemas.finance import FinanceSummary, GradeTotals, StatusCounts, StudentBalance
from app.services.payment_service import calculate_total_due, to_float
from app.services.student_service import StudentRegistry

SIN_CURSO = "Sin curso"
SIN_NOMBRE = "Sin nombre"
TOP_SALDOS = 8


def has_sponsor(student: Student) -> bool:
    copia = student.sponsor or {}
    return bool(
        student.sponsor_id or copia.get("email") or copia.get("first_name") or copia.get("last_name")
    )


def student_name(student: Student) -> str:
    nombre = f"{student.first_name or ''} {student.last_name or ''}".strip()
    return nombre or student.full_name or SIN_NOMBRE


def _due_paid(student: Student) -> tuple[float, float]:
    """totalDue guardado (o calculado si falta) y totalPaid guardado."""
    due = to_float(student.total_due) or calculate_total_due(student)
    return due, to_float(student.total_paid)


def build_finance_summary(students: list[Student]) -> FinanceSummary:
    patrocinados = [s for s in students if s.status == StudentStatus.ACTIVE and has_sponsor(s)]

    conteo = {estado: 0 for estado in PaymentStatus.ALL}
    por_curso: dict[str, GradeTotals] = {}
    saldos: list[StudentBalance] = []
    total_due = total_paid = 0.0

    for s in patrocinados:
        due, paid = _due_paid(s)
        pendiente = max(due - paid, 0)
        total_due += due
        total_paid += paid
        estado = s.payment_status or PaymentStatus.PENDING
        conteo[estado] = conteo.get(estado, 0) + 1

        curso = s.current_grade or SIN_CURSO
        fila = por_curso.setdefault(curso, GradeTotals(grade=curso))
        fila.due += due
        fila.paid += paid
        fila.remaining += pendiente
        fila.count += 1

        saldos.append(
            StudentBalance(
                id=s.id,
                name=student_name(s),
                grade=curso,
                payment_status=estado,
                total_due=due,
                total_paid=paid,
                remaining=pendiente,
            )
        )

    saldos.sort(key=lambda b: b.remaining, reverse=True)
    return FinanceSummary(
        student_count=len(patrocinados),
        total_due=total_due,
        total_paid=total_paid,
        remaining=max(total_due - total_paid, 0),
        status_counts=StatusCounts(**{k: v for k, v in conteo.items() if k in PaymentStatus.ALL}),
        grades=[por_curso[c] for c in sorted(por_curso)],
        top_balances=saldos[:TOP_SALDOS],
    )


async def get_finance_summary(db: AsyncSession) -> FinanceSummary:
    return build_finance_summary(await StudentRegistry(db).list())
