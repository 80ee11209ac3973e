"""Endpoints de pagos de un estudiante."""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_admin
from app.core.database import get_db
from app.models import PaymentStatus
from app.schemas.auth import AdminPrincipal
from app.schemas.payment import (
    PaymentCreate,
    PaymentListResponse,
    PaymentRead,
    PaymentUpdate,
    PaymentWriteResponse,
    ReceiptUploadResponse,
)
from app.services.payment_service import PaymentLedger
from app.services.storage_service import LocalBlobStore
from app.services.student_service import StudentRegistry

router = APIRouter(prefix="/students/{student_id}/payments", tags=["pagos"])


async def _estudiante_o_404(db: AsyncSession, student_id: str):
    estudiante = await StudentRegistry(db).get_by_id(student_id)
    if not estudiante:
        raise HTTPException(status_code=404, detail="Estudiante no encontrado")
    return estudiante


@router.get(
    "",
    response_model=PaymentListResponse,
    summary="Pagos del estudiante",
    description="Pagos por fecha descendente, con total pagado, total a pagar y condición de pago actual.",
)
async def listar_pagos(
    student_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    estudiante = await _estudiante_o_404(db, student_id)
    ledger = PaymentLedger(db)
    pagos = await ledger.list_for_student(student_id)
    return PaymentListResponse(
        payments=pagos,
        total_paid=await ledger.total_paid(student_id),
        total_due=ledger.total_due(estudiante),
        payment_status=estudiante.payment_status or PaymentStatus.PENDING,
    )


@router.post(
    "/receipts",
    response_model=ReceiptUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Subir comprobante de pago",
    description="Imagen o PDF de hasta 10 MB. Devuelve receiptURL y receiptPath para guardar en el pago.",
)
async def subir_comprobante(
    student_id: str,
    archivo: UploadFile = File(..., description="Comprobante (imagen o PDF)"),
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    await _estudiante_o_404(db, student_id)
    url, path = LocalBlobStore().upload_payment_receipt(
        student_id, archivo.filename, archivo.content_type, await archivo.read()
    )
    return ReceiptUploadResponse(receipt_url=url, receipt_path=path)


@router.get("/{payment_id}", response_model=PaymentRead, summary="Obtener pago")
async def obtener_pago(
    student_id: str,
    payment_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    pago = await PaymentLedger(db).get(student_id, payment_id)
    if not pago:
        raise HTTPException(status_code=404, detail="Pago no encontrado")
    return pago


@router.post(
    "",
    response_model=PaymentWriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar pago",
    description="Guarda el pago y recalcula paymentStatus, totalPaid y totalDue del estudiante.",
)
async def registrar_pago(
    student_id: str,
    body: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    pago, resultado = await PaymentLedger(db).add(student_id, body.model_dump(exclude_none=True))
    return PaymentWriteResponse(
        payment=PaymentRead.model_validate(pago), sync=resultado, warning=resultado.warning
    )


@router.patch(
    "/{payment_id}",
    response_model=PaymentWriteResponse,
    summary="Actualizar pago",
)
async def actualizar_pago(
    student_id: str,
    payment_id: str,
    body: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    try:
        pago, resultado = await PaymentLedger(db).update(student_id, payment_id, body.to_partial())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if pago is None:
        raise HTTPException(status_code=404, detail="Pago no encontrado")
    return PaymentWriteResponse(
        payment=PaymentRead.model_validate(pago), sync=resultado, warning=resultado.warning
    )


@router.delete(
    "/{payment_id}",
    response_model=PaymentWriteResponse,
    summary="Eliminar pago",
)
async def eliminar_pago(
    student_id: str,
    payment_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    resultado = await PaymentLedger(db).remove(student_id, payment_id)
    if not resultado.primary_ok:
        raise HTTPException(status_code=404, detail="Pago no encontrado")
    return PaymentWriteResponse(sync=resultado, warning=resultado.warning)
