"""Base común de esquemas: JSON en camelCase, atributos en snake_case."""
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Acepta tanto camelCase como snake_case al entrar; responde en camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """Edición parcial: solo se escriben los campos enviados."""

    # Columnas obligatorias: un null explícito se ignora
    campos_no_nulos: ClassVar[tuple[str, ...]] = ()

    def to_partial(self) -> dict[str, Any]:
        datos = self.model_dump(exclude_unset=True)
        return {k: v for k, v in datos.items() if not (v is None and k in self.campos_no_nulos)}


def validar_opcion(valor: str | None, opciones: tuple[str, ...], campo: str) -> str | None:
    """Comprueba que el valor esté entre las opciones permitidas (None pasa)."""
    if valor is not None and valor not in opciones:
        raise ValueError(f"{campo} debe ser uno de: {', '.join(opciones)}")
    return valor
