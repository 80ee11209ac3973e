"""Registro de candidatos: CRUD sobre la colección candidates.

Este registro es un simple asignador de campos: no aplica reglas de transición
de estado (p. ej. permite 'active' sin padrino). Las reglas entre candidato,
estudiante y padrino las aplica LifecycleSynchronizer (app/services/sync_service.py).
"""
from __future__ import annotations

import re
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.repository import Repository
from app.models import Candidate, CandidateStatus
from app.models.mixins import utcnow
from app.schemas.candidate import CandidatePublic, PublicGuardian

_ESPACIOS = re.compile(r"\s+")


def build_full_name(first_name: str | None, last_name: str | None) -> str:
    """Une nombre y apellido recortados con un solo espacio ("  Ana  ", " Silva" -> "Ana Silva")."""
    return _ESPACIOS.sub(" ", f"{(first_name or '').strip()} {(last_name or '').strip()}").strip()


def with_full_name(data: dict[str, Any], current: Any = None) -> dict[str, Any]:
    """Recalcula full_name en cada escritura a partir de nombre y apellido.

    Con ``current`` se toma del documento el campo que no llegó en ``data``.
    Si no hay nombre ni apellido (registros antiguos) se conserva el full_name
    existente o el enviado, normalizado.
    """
    data = dict(data)
    for campo in ("first_name", "last_name"):
        if campo in data:
            data[campo] = (data[campo] or "").strip()
    first = data.get("first_name", getattr(current, "first_name", None))
    last = data.get("last_name", getattr(current, "last_name", None))
    if first or last:
        data["full_name"] = build_full_name(first, last)
    elif "full_name" in data:
        data["full_name"] = build_full_name(data["full_name"], "")
    return data


class CandidateRegistry:
    """CRUD de candidatos. Listados ordenados por fecha de creación descendente."""

    def __init__(self, db: AsyncSession):
        self.repo = Repository(db, Candidate)

    async def list(self) -> list[Candidate]:
        return await self.repo.query(order_by=[Candidate.created_at.desc()])

    async def get_by_id(self, candidate_id: str) -> Candidate | None:
        return await self.repo.get(candidate_id)

    async def list_by_status(self, status: str) -> list[Candidate]:
        return await self.repo.query(
            where={"status": status}, order_by=[Candidate.created_at.desc()]
        )

    async def list_by_period(self, period: str) -> list[Candidate]:
        return await self.repo.query(
            where={"period": period}, order_by=[Candidate.created_at.desc()]
        )

    async def list_public(self) -> list[CandidatePublic]:
        """Candidatos pendientes sin hogar ni auditoría; del tutor solo el parentesco."""
        pendientes = await self.list_by_status(CandidateStatus.PENDING)
        campos = [campo for campo in CandidatePublic.model_fields if campo != "guardian"]
        return [
            CandidatePublic(
                **{campo: getattr(c, campo) for campo in campos},
                guardian=PublicGuardian(relationship=(c.guardian or {}).get("relationship") or ""),
            )
            for c in pendientes
        ]

    async def create(self, data: dict[str, Any]) -> Candidate:
        ahora = utcnow()
        data = with_full_name(data)
        data.setdefault("full_name", "")
        data.setdefault("status", CandidateStatus.PENDING)
        data.update(created_at=ahora, updated_at=ahora)
        return await self.repo.create(data)

    async def update(self, candidate_id: str, partial: dict[str, Any]) -> Candidate | None:
        """Escribe los campos dados tal cual (más full_name y updated_at). None si no existe."""
        actual = await self.repo.get(candidate_id)
        if actual is None:
            return None
        partial = with_full_name(partial, actual)
        partial["updated_at"] = utcnow()
        return await self.repo.update(candidate_id, partial)

    async def delete(self, candidate_id: str) -> bool:
        return await self.repo.delete(candidate_id)
