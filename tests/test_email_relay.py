import json

import httpx
import pytest

from app.core.exceptions import EmailRelayError, EntityNotFoundError
from app.services.email_relay import EmailRelayClient, send_payment_reminder
from app.services.payment_service import PaymentLedger
from app.services.student_service import StudentRegistry


def _cliente(handler) -> EmailRelayClient:
    return EmailRelayClient(url="http://relay.test/send", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_send_returns_relay_json():
    cliente = _cliente(lambda request: httpx.Response(200, json={"success": True, "message": "Enviado"}))
    assert await cliente.send({"a": 1}) == {"success": True, "message": "Enviado"}


@pytest.mark.asyncio
async def test_send_non_json_success():
    cliente = _cliente(lambda request: httpx.Response(200, text="ok"))
    assert await cliente.send({}) == {"success": True}


@pytest.mark.asyncio
async def test_error_message_from_json_body():
    cliente = _cliente(lambda request: httpx.Response(400, json={"message": "Email inválido"}))
    with pytest.raises(EmailRelayError) as info:
        await cliente.send({})
    assert info.value.message == "Email inválido"
    assert info.value.status_code == 400


@pytest.mark.asyncio
async def test_error_field_from_json_body():
    cliente = _cliente(lambda request: httpx.Response(500, json={"error": "SMTP caído"}))
    with pytest.raises(EmailRelayError, match="SMTP caído"):
        await cliente.send({})


@pytest.mark.asyncio
async def test_error_without_json_uses_status_line():
    cliente = _cliente(lambda request: httpx.Response(503, text="<html>down</html>"))
    with pytest.raises(EmailRelayError) as info:
        await cliente.send({})
    assert info.value.message == "Error 503: Service Unavailable"


@pytest.mark.asyncio
async def test_unreachable_relay():
    def handler(request):
        raise httpx.ConnectError("conexión rechazada", request=request)

    with pytest.raises(EmailRelayError) as info:
        await _cliente(handler).send({})
    assert info.value.status_code is None
    assert "conexión rechazada" in info.value.message


@pytest.mark.asyncio
async def test_payment_reminder_payload(db_session):
    estudiante = await StudentRegistry(db_session).create(
        {
            "first_name": "Ana",
            "last_name": "Silva",
            "academic_year": "2026",
            "sponsor_id": "p1",
            "sponsor": {"first_name": "Maria", "last_name": "Gonzalez", "email": "maria@example.com"},
        }
    )
    await PaymentLedger(db_session).add(estudiante.id, {"type": "enrollment", "amount": 20})

    recibido = {}

    def handler(request):
        recibido.update(json.loads(request.content))
        return httpx.Response(200, json={"success": True})

    email, respuesta = await send_payment_reminder(db_session, estudiante.id, _cliente(handler))
    assert email == "maria@example.com"
    assert respuesta == {"success": True}
    assert recibido == {
        "sponsorEmail": "maria@example.com",
        "sponsorFirstName": "Maria",
        "sponsorLastName": "Gonzalez",
        "studentName": "Ana Silva",
        "studentMatriculationNumber": "MAT-001",
        "totalDue": 420.0,
        "totalPaid": 20.0,
        "paymentStatus": "current",
        "academicYear": "2026",
    }


@pytest.mark.asyncio
async def test_reminder_needs_sponsor_email(db_session):
    estudiante = await StudentRegistry(db_session).create({"first_name": "Sin padrino"})

    def handler(request):
        raise AssertionError("no debe llamar al relay")

    with pytest.raises(ValueError, match="email de patrocinador"):
        await send_payment_reminder(db_session, estudiante.id, _cliente(handler))
    with pytest.raises(EntityNotFoundError):
        await send_payment_reminder(db_session, "no-existe", _cliente(handler))
