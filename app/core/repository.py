"""Adaptador mínimo de almacén de documentos sobre SQLAlchemy.

Cada repositorio representa una colección (tabla) con ids opacos generados por
el almacén. Ofrece exactamente lo que usa la aplicación: lectura por id,
creación, actualización parcial (merge de campos), borrado y consultas con
filtros de igualdad, orden y límite. No se usan transacciones entre documentos:
cada escritura se hace visible con ``flush`` y la confirma quien llama.
"""
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Operaciones de documento sobre un modelo."""

    def __init__(self, db: AsyncSession, model: type[ModelT]):
        self.db = db
        self.model = model
        self._fields = set(inspect(model).column_attrs.keys())

    def _check_fields(self, data: dict[str, Any]) -> None:
        desconocidos = set(data) - self._fields
        if desconocidos:
            raise ValueError(
                f"Campos desconocidos para {self.model.__tablename__}: {', '.join(sorted(desconocidos))}"
            )

    async def get(self, entity_id: str) -> ModelT | None:
        if not entity_id:
            return None
        return await self.db.get(self.model, entity_id)

    async def create(self, data: dict[str, Any]) -> ModelT:
        self._check_fields(data)
        obj = self.model(**data)
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def update(self, entity_id: str, partial: dict[str, Any]) -> ModelT | None:
        """Mezcla los campos dados en el documento. Devuelve None si no existe."""
        self._check_fields(partial)
        obj = await self.get(entity_id)
        if obj is None:
            return None
        for campo, valor in partial.items():
            setattr(obj, campo, valor)
        await self.db.flush()
        return obj

    async def delete(self, entity_id: str) -> bool:
        obj = await self.get(entity_id)
        if obj is None:
            return False
        await self.db.delete(obj)
        await self.db.flush()
        return True

    async def query(
        self,
        where: dict[str, Any] | None = None,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[ModelT]:
        """Consulta con filtros de igualdad, orden y límite opcionales."""
        q = select(self.model)
        for campo, valor in (where or {}).items():
            q = q.where(getattr(self.model, campo) == valor)
        if order_by:
            q = q.order_by(*order_by)
        if limit is not None:
            q = q.limit(limit)
        result = await self.db.execute(q)
        return list(result.scalars().all())
