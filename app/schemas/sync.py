"""Resultado compuesto de las operaciones en dos fases (escritura principal + sincronización)."""
from pydantic import Field

from app.schemas.base import CamelModel


class SyncResult(CamelModel):
    """La escritura principal ya quedó confirmada cuando primary_ok es True,
    aunque la sincronización secundaria haya fallado."""

    primary_ok: bool = Field(default=True, description="La escritura principal se confirmó")
    secondary_ok: bool = Field(default=True, description="La sincronización secundaria terminó bien (o no hizo falta)")
    secondary_error: str | None = Field(default=None, description="Mensaje del fallo de sincronización, si lo hubo")
    entity_id: str | None = Field(default=None, description="Id del documento afectado por la sincronización (p. ej. el estudiante)")

    @property
    def warning(self) -> str | None:
        """Aviso combinado para el operador cuando la sincronización falló."""
        if self.primary_ok and not self.secondary_ok:
            return (
                "El registro principal se actualizó, pero la sincronización falló. "
                "Verifique ambos registros."
            )
        return None
