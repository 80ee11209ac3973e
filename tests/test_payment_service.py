from datetime import timedelta

import pytest

from app.core.exceptions import EntityNotFoundError
from app.models import PaymentRecordStatus, PaymentStatus, Student
from app.models.mixins import utcnow
from app.services.payment_service import (
    PaymentLedger,
    calculate_total_due,
    classify_payment_status,
)
from app.services.student_service import StudentRegistry


@pytest.fixture
async def estudiante(db_session) -> Student:
    estudiante = await StudentRegistry(db_session).create({"first_name": "Rui", "last_name": "Mussa"})
    await db_session.commit()
    return estudiante


def test_total_due_uses_defaults():
    assert calculate_total_due(Student()) == 420


def test_total_due_full_payment_has_priority():
    assert calculate_total_due(Student(full_payment_amount=300, monthly_fee=99)) == 300


def test_total_due_from_plan():
    assert calculate_total_due(Student(enrollment_fee=50, monthly_fee=30, number_of_months=5)) == 200
    # Cero o vacío toma el valor por defecto
    assert calculate_total_due(Student(enrollment_fee=0, monthly_fee=30, number_of_months=0)) == 320


def test_classify_never_returns_pending():
    assert classify_payment_status(0, 420, []) == PaymentStatus.OVERDUE
    assert classify_payment_status(420, 420, []) == PaymentStatus.PAID
    assert classify_payment_status(500, 420, []) == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_add_full_payment_marks_paid(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    pago, resultado = await ledger.add(estudiante.id, {"type": "full", "amount": 420})
    assert resultado.primary_ok and resultado.secondary_ok
    assert pago.date is not None
    assert estudiante.payment_status == PaymentStatus.PAID
    assert estudiante.total_paid == 420
    assert estudiante.total_due == 420


@pytest.mark.asyncio
async def test_payment_this_month_is_current(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    await ledger.add(estudiante.id, {"type": "monthly", "amount": 40, "month": utcnow().month})
    assert estudiante.payment_status == PaymentStatus.CURRENT
    assert estudiante.total_paid == 40


@pytest.mark.asyncio
async def test_old_payment_only_is_overdue(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    hace_ocho_meses = utcnow() - timedelta(days=240)
    await ledger.add(
        estudiante.id, {"type": "monthly", "amount": 40, "month": hace_ocho_meses.month, "date": hace_ocho_meses}
    )
    assert estudiante.payment_status == PaymentStatus.OVERDUE


@pytest.mark.asyncio
async def test_only_paid_payments_count(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    await ledger.add(estudiante.id, {"type": "full", "amount": 420, "status": PaymentRecordStatus.PENDING})
    await ledger.add(estudiante.id, {"type": "enrollment", "amount": 20})
    assert await ledger.total_paid(estudiante.id) == 20
    assert estudiante.payment_status == PaymentStatus.CURRENT


@pytest.mark.asyncio
async def test_monthly_requires_month(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    with pytest.raises(ValueError):
        await ledger.add(estudiante.id, {"type": "monthly", "amount": 40})

    pago, _ = await ledger.add(estudiante.id, {"type": "other", "amount": 5})
    with pytest.raises(ValueError):
        await ledger.update(estudiante.id, pago.id, {"type": "monthly"})


@pytest.mark.asyncio
async def test_add_to_missing_student(db_session):
    with pytest.raises(EntityNotFoundError):
        await PaymentLedger(db_session).add("no-existe", {"type": "full", "amount": 1})


@pytest.mark.asyncio
async def test_update_and_remove_recalculate(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    pago, _ = await ledger.add(estudiante.id, {"type": "balance", "amount": 100})
    assert estudiante.payment_status == PaymentStatus.CURRENT

    actualizado, resultado = await ledger.update(estudiante.id, pago.id, {"amount": 420})
    assert actualizado.amount == 420
    assert resultado.secondary_ok
    assert estudiante.payment_status == PaymentStatus.PAID

    resultado = await ledger.remove(estudiante.id, pago.id)
    assert resultado.primary_ok
    assert estudiante.total_paid == 0
    assert estudiante.payment_status == PaymentStatus.OVERDUE
    assert await ledger.list_for_student(estudiante.id) == []


@pytest.mark.asyncio
async def test_payment_belongs_to_student(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    otro = await StudentRegistry(db_session).create({"first_name": "Otro"})
    pago, _ = await ledger.add(estudiante.id, {"type": "full", "amount": 1})

    assert await ledger.get(otro.id, pago.id) is None
    actualizado, resultado = await ledger.update(otro.id, pago.id, {"amount": 2})
    assert actualizado is None
    assert resultado.primary_ok is False
    assert (await ledger.remove(otro.id, pago.id)).primary_ok is False


@pytest.mark.asyncio
async def test_list_for_student_newest_first(db_session, estudiante):
    ledger = PaymentLedger(db_session)
    ahora = utcnow()
    await ledger.add(estudiante.id, {"type": "other", "amount": 1, "date": ahora - timedelta(days=30)})
    await ledger.add(estudiante.id, {"type": "other", "amount": 2, "date": ahora})
    assert [p.amount for p in await ledger.list_for_student(estudiante.id)] == [2, 1]


@pytest.mark.asyncio
async def test_payment_kept_when_recalculation_fails(db_session, estudiante, monkeypatch):
    ledger = PaymentLedger(db_session)
    student_id = estudiante.id

    async def falla(*args, **kwargs):
        raise RuntimeError("sin conexión")

    monkeypatch.setattr(ledger, "refresh_student_payment_status", falla)
    pago, resultado = await ledger.add(student_id, {"type": "full", "amount": 420})

    assert resultado.primary_ok is True
    assert resultado.secondary_ok is False
    assert "sin conexión" in resultado.secondary_error
    assert resultado.warning is not None
    assert pago.amount == 420
    assert [p.id for p in await ledger.list_for_student(student_id)] == [pago.id]


@pytest.mark.asyncio
async def test_refresh_missing_student_is_noop(db_session):
    assert await PaymentLedger(db_session).refresh_student_payment_status("no-existe") is None
