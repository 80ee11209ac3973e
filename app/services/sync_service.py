"""Sincronización del ciclo candidato -> estudiante -> padrino.

Reglas al cambiar el estado de un candidato (se evalúan antes de escribir):

    pending -> active, sin padrino      SponsorRequiredError, no se escribe nada.
                                        Se completa con approve_candidate.
    pending -> active, con padrino      se guarda el candidato y se crea o
                                        actualiza su estudiante. Un padrino
                                        inexistente da EntityNotFoundError.
    active -> otro                      con padrino exige confirmación
                                        (SponsorRemovalNotConfirmedError); se
                                        borra el padrino del candidato y el
                                        estudiante pasa a 'inactive'.
    otro no activo -> active            se guarda y se crea o actualiza el
                                        estudiante con el padrino que tenga.
    resto                               actualización simple de campos.

Cada operación confirma primero la escritura principal y después intenta la
secundaria. Un fallo en la secundaria se registra, se deshace y se informa en
el SyncResult; la escritura principal no se revierte.
"""
import logging
from typing import Any, Awaitable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    EntityNotFoundError,
    SponsorRemovalNotConfirmedError,
    SponsorRequiredError,
)
from app.models import Candidate, CandidateStatus, PaymentStatus, Sponsor, Student, StudentStatus
from app.models.mixins import utcnow
from app.schemas.sponsor import SponsorSnapshot
from app.schemas.sync import SyncResult
from app.services.candidate_service import CandidateRegistry
from app.services.sponsor_service import SponsorRegistry
from app.services.student_service import StudentRegistry

logger = logging.getLogger(__name__)

# Campos del estudiante que se copian al candidato (campo estudiante -> campo candidato)
CAMPOS_ESPEJO = {
    "first_name": "first_name",
    "last_name": "last_name",
    "full_name": "full_name",
    "document_id": "document_id",
    "gender": "gender",
    "birth_date": "birth_date",
    "current_grade": "level",
    "academic_year": "period",
    "city": "city",
    "province": "province",
    "country": "country",
    "notes": "notes",
    "photo_url": "photo_url",
    "photo_path": "photo_path",
}
CAMPOS_TEXTO_OBLIGATORIO = ("first_name", "last_name", "full_name", "document_id")


def sponsor_snapshot(sponsor: Sponsor) -> dict[str, str]:
    """Copia de contacto del padrino para guardar en el estudiante."""
    return {campo: getattr(sponsor, campo, None) or "" for campo in SponsorSnapshot.model_fields}


class LifecycleSynchronizer:
    """Coordina los registros de candidatos, estudiantes y padrinos."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.candidates = CandidateRegistry(db)
        self.students = StudentRegistry(db)
        self.sponsors = SponsorRegistry(db)

    async def _secondary(self, primario: Any, paso: Awaitable[str | None], descripcion: str) -> SyncResult:
        try:
            entity_id = await paso
            await self.db.commit()
        except Exception as exc:
            logger.exception("Fallo de sincronización (%s) tras guardar %s", descripcion, primario.id)
            await self.db.rollback()
            await self.db.refresh(primario)
            return SyncResult(secondary_ok=False, secondary_error=str(exc))
        return SyncResult(entity_id=entity_id)

    async def update_candidate(
        self,
        candidate_id: str,
        partial: dict[str, Any],
        confirm_sponsor_removal: bool = False,
    ) -> tuple[Candidate, SyncResult]:
        actual = await self.candidates.get_by_id(candidate_id)
        if actual is None:
            raise EntityNotFoundError("Candidato", candidate_id)

        partial = dict(partial)
        if partial.get("status") is None:
            partial.pop("status", None)
        anterior = actual.status
        nuevo = partial.get("status", anterior)
        sponsor_id = partial["sponsor_id"] if "sponsor_id" in partial else actual.sponsor_id

        activa = nuevo == CandidateStatus.ACTIVE and anterior != CandidateStatus.ACTIVE
        desactiva = anterior == CandidateStatus.ACTIVE and nuevo != CandidateStatus.ACTIVE

        if activa:
            if anterior == CandidateStatus.PENDING and not sponsor_id:
                raise SponsorRequiredError(candidate_id)
            if sponsor_id and await self.sponsors.get_by_id(sponsor_id) is None:
                raise EntityNotFoundError("Padrino", sponsor_id)
            if sponsor_id and not (partial.get("sponsor_assigned_date") or actual.sponsor_assigned_date):
                partial["sponsor_assigned_date"] = utcnow()
        elif desactiva:
            if actual.sponsor_id and not confirm_sponsor_removal:
                raise SponsorRemovalNotConfirmedError(candidate_id, actual.sponsor_id)
            partial.update(sponsor_id=None, sponsor_assigned_date=None)

        candidato = await self.candidates.update(candidate_id, partial)
        await self.db.commit()

        if activa:
            resultado = await self._secondary(
                candidato,
                self.create_or_update_student_from_candidate(candidato),
                "alta de estudiante",
            )
        elif desactiva:
            resultado = await self._secondary(
                candidato, self._deactivate_student(candidato.id), "baja de estudiante"
            )
        else:
            resultado = SyncResult()
        return candidato, resultado

    async def _deactivate_student(self, candidate_id: str) -> str | None:
        estudiante = await self.students.set_status_by_candidate_id(candidate_id, StudentStatus.INACTIVE)
        return estudiante.id if estudiante else None

    async def approve_candidate(
        self,
        candidate_id: str,
        sponsor_id: str | None = None,
        new_sponsor: dict[str, Any] | None = None,
    ) -> tuple[Candidate, SyncResult]:
        """Aprueba el candidato con un padrino existente (sponsor_id) o uno nuevo."""
        if await self.candidates.get_by_id(candidate_id) is None:
            raise EntityNotFoundError("Candidato", candidate_id)
        if sponsor_id:
            padrino = await self.sponsors.get_by_id(sponsor_id)
            if padrino is None:
                raise EntityNotFoundError("Padrino", sponsor_id)
        elif new_sponsor:
            padrino = await self.sponsors.create(new_sponsor)
        else:
            raise SponsorRequiredError(candidate_id)

        candidato = await self.candidates.update(
            candidate_id,
            {
                "sponsor_id": padrino.id,
                "sponsor_assigned_date": utcnow(),
                "status": CandidateStatus.ACTIVE,
            },
        )
        await self.db.commit()
        logger.info("Candidato %s aprobado con padrino %s", candidate_id, padrino.id)
        resultado = await self._secondary(
            candidato,
            self.create_or_update_student_from_candidate(candidato, padrino),
            "alta de estudiante",
        )
        return candidato, resultado

    async def create_or_update_student_from_candidate(
        self, candidate: Candidate, sponsor: Sponsor | None = None
    ) -> str:
        """Crea el estudiante del candidato o actualiza el existente. Devuelve su id.

        El estudiante existente conserva matrícula, fecha de inscripción,
        createdAt y los datos de pagos.
        """
        existente = await self.students.find_by_candidate_id(candidate.id)
        ahora = utcnow()
        datos: dict[str, Any] = {
            "first_name": candidate.first_name or "",
            "last_name": candidate.last_name or "",
            "full_name": candidate.full_name or "",
            "document_id": candidate.document_id or "",
            "gender": candidate.gender or "",
            "birth_date": candidate.birth_date or "",
            "current_grade": candidate.level or settings.default_grade,
            "academic_year": candidate.period or str(ahora.year),
            "status": StudentStatus.ACTIVE,
            "city": candidate.city or settings.default_city,
            "province": candidate.province or settings.default_province,
            "country": candidate.country or settings.default_country,
            "notes": candidate.notes or "",
            "photo_url": candidate.photo_url or "",
            "photo_path": candidate.photo_path or "",
        }

        sponsor_id = candidate.sponsor_id or (sponsor.id if sponsor else None)
        if sponsor_id:
            if sponsor is None:
                sponsor = await self.sponsors.get_by_id(sponsor_id)
                if sponsor is None:
                    logger.warning("Padrino %s del candidato %s no existe", sponsor_id, candidate.id)
            datos["sponsor_id"] = sponsor_id
            if sponsor is not None:
                datos["sponsor"] = sponsor_snapshot(sponsor)
            datos["sponsor_assigned_date"] = candidate.sponsor_assigned_date or ahora

        if existente is not None:
            if not existente.matriculation_number:
                datos["matriculation_number"] = await self.students.generate_next_matriculation_number()
            if not existente.enrollment_date:
                datos["enrollment_date"] = ahora
            await self.students.update(existente.id, datos)
            return existente.id

        datos.update(
            candidate_id=candidate.id,
            payment_status=PaymentStatus.PENDING,
            enrollment_date=ahora,
            created_at=ahora,
        )
        estudiante = await self.students.create(datos)
        logger.info("Estudiante %s creado desde el candidato %s", estudiante.matriculation_number, candidate.id)
        return estudiante.id

    async def update_student(self, student_id: str, partial: dict[str, Any]) -> tuple[Student, SyncResult]:
        """Edita el estudiante y copia sus datos personales al candidato vinculado."""
        estudiante = await self.students.update(student_id, partial)
        if estudiante is None:
            raise EntityNotFoundError("Estudiante", student_id)
        await self.db.commit()
        if not estudiante.candidate_id:
            return estudiante, SyncResult()
        resultado = await self._secondary(
            estudiante, self.update_candidate_from_student(estudiante), "copia al candidato"
        )
        return estudiante, resultado

    async def update_candidate_from_student(self, student: Student) -> str | None:
        """Sobrescribe los campos espejo del candidato vinculado. No cambia su estado."""
        candidato = await self.candidates.get_by_id(student.candidate_id)
        if candidato is None:
            logger.warning(
                "Estudiante %s apunta a un candidato inexistente (%s)", student.id, student.candidate_id
            )
            return None
        datos = {destino: getattr(student, origen) for origen, destino in CAMPOS_ESPEJO.items()}
        for campo in CAMPOS_TEXTO_OBLIGATORIO:
            datos[campo] = datos[campo] or ""
        await self.candidates.update(candidato.id, datos)
        return candidato.id
