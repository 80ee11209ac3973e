"""Registro de estudiantes y numeración de matrícula."""
from __future__ import annotations

import logging
import time
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.repository import Repository
from app.models import Payment, PaymentStatus, Student, StudentStatus
from app.models.mixins import utcnow
from app.services.candidate_service import with_full_name

logger = logging.getLogger(__name__)

PREFIJO_MATRICULA = "MAT-"

# Pasar a 'inactive' desvincula al padrino
CAMPOS_PADRINO_VACIOS = {"sponsor_id": None, "sponsor": None, "sponsor_assigned_date": None}


def format_matriculation_number(numero: int) -> str:
    return f"{PREFIJO_MATRICULA}{numero:03d}"


class StudentRegistry:
    """CRUD de estudiantes. Listados ordenados por fecha de creación descendente."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = Repository(db, Student)

    async def list(self) -> list[Student]:
        return await self.repo.query(order_by=[Student.created_at.desc()])

    async def get_by_id(self, student_id: str) -> Student | None:
        return await self.repo.get(student_id)

    async def list_by_status(self, status: str) -> list[Student]:
        return await self.repo.query(where={"status": status}, order_by=[Student.created_at.desc()])

    async def list_by_academic_year(self, academic_year: str) -> list[Student]:
        return await self.repo.query(
            where={"academic_year": academic_year}, order_by=[Student.created_at.desc()]
        )

    async def get_by_matriculation_number(self, matriculation_number: str) -> Student | None:
        encontrados = await self.repo.query(
            where={"matriculation_number": matriculation_number}, limit=1
        )
        return encontrados[0] if encontrados else None

    async def find_by_candidate_id(self, candidate_id: str) -> Student | None:
        """Estudiante creado a partir del candidato. Si hay varios se usa el primero."""
        if not candidate_id:
            return None
        encontrados = await self.repo.query(
            where={"candidate_id": candidate_id}, order_by=[Student.created_at.asc()]
        )
        if len(encontrados) > 1:
            logger.warning(
                "Hay %d estudiantes con candidateId=%s; se usa %s",
                len(encontrados),
                candidate_id,
                encontrados[0].id,
            )
        return encontrados[0] if encontrados else None

    async def generate_next_matriculation_number(self) -> str:
        """Siguiente MAT-NNN a partir del mayor número existente.

        No es seguro ante altas concurrentes: dos altas simultáneas pueden
        recibir el mismo número.
        """
        try:
            result = await self.db.execute(
                select(Student.matriculation_number)
                .where(Student.matriculation_number.is_not(None))
                .order_by(Student.matriculation_number.desc())
                .limit(1)
            )
            ultimo = result.scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("No se pudo consultar el último número de matrícula")
            return f"{PREFIJO_MATRICULA}{str(int(time.time() * 1000))[-6:]}"

        if not ultimo:
            return format_matriculation_number(1)
        sufijo = ultimo.split("-", 1)[1] if "-" in ultimo else ""
        actual = int(sufijo) if sufijo.isdigit() else 0
        return format_matriculation_number(actual + 1)

    async def create(self, data: dict[str, Any]) -> Student:
        ahora = utcnow()
        data = with_full_name(data)
        if not data.get("matriculation_number"):
            data["matriculation_number"] = await self.generate_next_matriculation_number()
        if data.get("status") is None:
            data["status"] = StudentStatus.ACTIVE
        if data.get("payment_status") is None:
            data["payment_status"] = PaymentStatus.PENDING
        data.setdefault("full_name", "")
        data.setdefault("created_at", ahora)
        data["updated_at"] = ahora
        return await self.repo.create(data)

    async def update(self, student_id: str, partial: dict[str, Any]) -> Student | None:
        """Actualización parcial. Escribir status='inactive' borra la copia del padrino."""
        actual = await self.repo.get(student_id)
        if actual is None:
            return None
        partial = with_full_name(partial, actual)
        if partial.get("status") == StudentStatus.INACTIVE:
            partial.update(CAMPOS_PADRINO_VACIOS)
        partial["updated_at"] = utcnow()
        return await self.repo.update(student_id, partial)

    async def delete(self, student_id: str) -> bool:
        """Borra el estudiante y sus pagos."""
        if await self.repo.get(student_id) is None:
            return False
        await self.db.execute(delete(Payment).where(Payment.student_id == student_id))
        return await self.repo.delete(student_id)

    async def set_status_by_candidate_id(
        self, candidate_id: str, status: str, student_id: str | None = None
    ) -> Student | None:
        """Cambia el estado del estudiante vinculado al candidato (prefiere student_id).

        Sin estudiante vinculado no hace nada y devuelve None.
        """
        estudiante = await self.repo.get(student_id) if student_id else None
        if estudiante is None:
            estudiante = await self.find_by_candidate_id(candidate_id)
        if estudiante is None:
            logger.info("Candidato %s sin estudiante vinculado; no se cambia estado", candidate_id)
            return None
        return await self.update(estudiante.id, {"status": status})
