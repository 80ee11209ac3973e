"""Excepciones de dominio. app/main.py las traduce a respuestas HTTP."""


class EntityNotFoundError(LookupError):
    """El documento solicitado no existe."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} no encontrado: {entity_id}")


class SponsorRequiredError(Exception):
    """Aprobar un candidato pendiente exige asignarle un padrino antes de guardar."""

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__(
            "El candidato no tiene padrino asignado. "
            "Seleccione o cree un padrino para completar la aprobación."
        )


class SponsorRemovalNotConfirmedError(Exception):
    """Sacar de 'active' a un candidato con padrino requiere confirmación del operador."""

    def __init__(self, candidate_id: str, sponsor_id: str):
        self.candidate_id = candidate_id
        self.sponsor_id = sponsor_id
        super().__init__(
            "El candidato tiene un padrino asignado que será desvinculado. "
            "Confirme la operación para continuar."
        )


class EmailRelayError(Exception):
    """El relay de correo respondió con error o no fue alcanzable."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StorageError(ValueError):
    """Archivo rechazado por el almacenamiento (tamaño, tipo o ruta)."""
