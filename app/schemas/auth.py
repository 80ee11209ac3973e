"""Esquemas para autenticación y JWT."""
from pydantic import BaseModel, Field


class AdminPrincipal(BaseModel):
    """Administrador autenticado, tomado de los claims del JWT."""

    uid: str = Field(description="Identificador del administrador (claim 'sub')")
    email: str | None = Field(default=None, description="Correo del administrador, si viene en el token")
