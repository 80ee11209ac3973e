"""Registro de padrinos."""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.repository import Repository
from app.models import Sponsor
from app.models.mixins import utcnow


class SponsorRegistry:
    """CRUD y búsqueda de padrinos, ordenados por apellido y nombre."""

    def __init__(self, db: AsyncSession):
        self.repo = Repository(db, Sponsor)

    async def list(self) -> list[Sponsor]:
        return await self.repo.query(order_by=[Sponsor.last_name.asc(), Sponsor.first_name.asc()])

    async def get_by_id(self, sponsor_id: str) -> Sponsor | None:
        return await self.repo.get(sponsor_id)

    async def search(self, term: str | None) -> list[Sponsor]:
        """Coincidencia parcial sin distinguir mayúsculas en nombre, apellido o "nombre apellido".

        Se filtra en memoria sobre la colección completa: la consulta de igualdad
        del almacén no cubre búsquedas sin distinción de mayúsculas.
        """
        if not term or not term.strip():
            return []
        buscado = term.strip().lower()
        encontrados = []
        for s in await self.list():
            nombre = (s.first_name or "").lower()
            apellido = (s.last_name or "").lower()
            completo = f"{nombre} {apellido}".strip()
            if buscado in nombre or buscado in apellido or buscado in completo:
                encontrados.append(s)
        return encontrados

    async def create(self, data: dict[str, Any]) -> Sponsor:
        ahora = utcnow()
        return await self.repo.create({**data, "created_at": ahora, "updated_at": ahora})

    async def update(self, sponsor_id: str, partial: dict[str, Any]) -> Sponsor | None:
        """Edita el padrino. Las copias guardadas en estudiantes no se actualizan."""
        partial = {k: v for k, v in partial.items() if not (k == "email" and v is None)}
        return await self.repo.update(sponsor_id, {**partial, "updated_at": utcnow()})

    async def delete(self, sponsor_id: str) -> bool:
        return await self.repo.delete(sponsor_id)

    async def list_by_candidate_ids(self, candidate_id: str) -> list[Sponsor]:
        """Padrinos cuyo campo heredado candidate_ids contiene el candidato."""
        return [s for s in await self.list() if candidate_id in (s.candidate_ids or [])]
