"""Cliente del relay de correo y recordatorio de pago al padrino."""
import logging
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import EmailRelayError, EntityNotFoundError
from app.models import PaymentStatus, Student
from app.services.finance_service import student_name
from app.services.payment_service import PaymentLedger

logger = logging.getLogger(__name__)

MENSAJE_ERROR_RELAY = "Error al enviar el recordatorio"


class EmailRelayClient:
    """POST JSON al relay HTTP. El relay responde {"success": true} si envió el correo."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.email_relay_url
        self.timeout = timeout if timeout is not None else settings.email_relay_timeout
        self.transport = transport

    async def send(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.error("Relay de correo no disponible: %s", e)
            raise EmailRelayError(f"{MENSAJE_ERROR_RELAY}: {e}") from e

        if not response.is_success:
            raise EmailRelayError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError:
            return {"success": True}


def _error_message(response: httpx.Response) -> str:
    """message o error del cuerpo JSON; si no se puede leer, 'Error <status>: <motivo>'."""
    try:
        datos = response.json()
    except ValueError:
        return f"Error {response.status_code}: {response.reason_phrase}"
    if isinstance(datos, dict):
        return datos.get("message") or datos.get("error") or MENSAJE_ERROR_RELAY
    return MENSAJE_ERROR_RELAY


def build_payment_reminder(student: Student, total_paid: float, total_due: float) -> dict[str, Any]:
    copia = student.sponsor or {}
    return {
        "sponsorEmail": copia.get("email") or "",
        "sponsorFirstName": copia.get("first_name") or "",
        "sponsorLastName": copia.get("last_name") or "",
        "studentName": student_name(student),
        "studentMatriculationNumber": student.matriculation_number or "",
        "totalDue": total_due,
        "totalPaid": total_paid,
        "paymentStatus": student.payment_status or PaymentStatus.PENDING,
        "academicYear": student.academic_year or "",
    }


async def send_payment_reminder(
    db: AsyncSession, student_id: str, client: EmailRelayClient | None = None
) -> tuple[str, dict[str, Any]]:
    """Envía al padrino el estado de pagos del estudiante. Devuelve (email, respuesta del relay).

    Lanza ValueError si el estudiante no tiene email de padrino.
    """
    estudiante = await db.get(Student, student_id)
    if estudiante is None:
        raise EntityNotFoundError("Estudiante", student_id)
    email = (estudiante.sponsor or {}).get("email")
    if not email:
        raise ValueError("Este estudiante no tiene un email de patrocinador registrado.")

    ledger = PaymentLedger(db)
    payload = build_payment_reminder(
        estudiante,
        total_paid=await ledger.total_paid(student_id),
        total_due=ledger.total_due(estudiante),
    )
    respuesta = await (client or EmailRelayClient()).send(payload)
    logger.info("Recordatorio de pago enviado a %s (estudiante %s)", email, student_id)
    return email, respuesta


def get_email_relay() -> EmailRelayClient:
    """Dependencia FastAPI con el cliente del relay configurado."""
    return EmailRelayClient()
