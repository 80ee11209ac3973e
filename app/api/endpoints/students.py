"""Endpoints de estudiantes."""
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_admin
from app.core.database import get_db
from app.schemas.auth import AdminPrincipal
from app.schemas.student import (
    MatriculationNumberResponse,
    PaymentReminderResponse,
    StudentCreate,
    StudentListResponse,
    StudentRead,
    StudentUpdate,
    StudentWriteResponse,
)
from app.services.email_relay import EmailRelayClient, get_email_relay, send_payment_reminder
from app.services.storage_service import LocalBlobStore
from app.services.student_service import StudentRegistry
from app.services.sync_service import LifecycleSynchronizer

router = APIRouter(prefix="/students", tags=["estudiantes"])


@router.get(
    "",
    response_model=StudentListResponse,
    summary="Listar estudiantes",
    description="Estudiantes ordenados por fecha de creación. Filtros opcionales por estado o año académico.",
)
async def listar_estudiantes(
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
    estado: Annotated[str | None, Query(alias="status", description="active, inactive, graduated o suspended")] = None,
    anio: Annotated[str | None, Query(alias="academicYear", description="Año académico")] = None,
):
    registro = StudentRegistry(db)
    if estado:
        estudiantes = await registro.list_by_status(estado)
    elif anio:
        estudiantes = await registro.list_by_academic_year(anio)
    else:
        estudiantes = await registro.list()
    return StudentListResponse(students=estudiantes)


@router.get(
    "/next-matriculation-number",
    response_model=MatriculationNumberResponse,
    summary="Siguiente número de matrícula",
)
async def siguiente_matricula(
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    numero = await StudentRegistry(db).generate_next_matriculation_number()
    return MatriculationNumberResponse(matriculation_number=numero)


@router.get(
    "/by-matriculation/{matriculation_number}",
    response_model=StudentRead,
    summary="Buscar estudiante por número de matrícula",
)
async def obtener_por_matricula(
    matriculation_number: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    estudiante = await StudentRegistry(db).get_by_matriculation_number(matriculation_number)
    if not estudiante:
        raise HTTPException(status_code=404, detail="Estudiante no encontrado")
    return estudiante


@router.get("/{student_id}", response_model=StudentRead, summary="Obtener estudiante")
async def obtener_estudiante(
    student_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    estudiante = await StudentRegistry(db).get_by_id(student_id)
    if not estudiante:
        raise HTTPException(status_code=404, detail="Estudiante no encontrado")
    return estudiante


@router.post(
    "",
    response_model=StudentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Crear estudiante",
    description="Alta directa (sin candidato). Recibe el siguiente número de matrícula.",
)
async def crear_estudiante(
    body: StudentCreate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    return await StudentRegistry(db).create(body.model_dump(exclude_none=True))


@router.patch(
    "/{student_id}",
    response_model=StudentWriteResponse,
    summary="Actualizar estudiante",
    description=(
        "Edición parcial. Pasar a 'inactive' desvincula al padrino. "
        "Los datos personales se copian al candidato vinculado."
    ),
)
async def actualizar_estudiante(
    student_id: str,
    body: StudentUpdate,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    estudiante, resultado = await LifecycleSynchronizer(db).update_student(student_id, body.to_partial())
    return StudentWriteResponse(
        student=StudentRead.model_validate(estudiante),
        sync=resultado,
        warning=resultado.warning,
    )


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar estudiante",
    description="Elimina el estudiante y todos sus pagos.",
)
async def eliminar_estudiante(
    student_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    if not await StudentRegistry(db).delete(student_id):
        raise HTTPException(status_code=404, detail="Estudiante no encontrado")


@router.post(
    "/{student_id}/photo",
    response_model=StudentWriteResponse,
    summary="Subir foto del estudiante",
    description="Imagen de hasta 5 MB. Se guarda en students/{id}/profile.{ext} y se copia al candidato.",
)
async def subir_foto_estudiante(
    student_id: str,
    archivo: UploadFile = File(..., description="Imagen (jpg, png, gif o webp)"),
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    if await StudentRegistry(db).get_by_id(student_id) is None:
        raise HTTPException(status_code=404, detail="Estudiante no encontrado")
    url, path = LocalBlobStore().upload_profile_photo(
        "students", student_id, archivo.filename, archivo.content_type, await archivo.read()
    )
    estudiante, resultado = await LifecycleSynchronizer(db).update_student(
        student_id, {"photo_url": url, "photo_path": path}
    )
    return StudentWriteResponse(
        student=StudentRead.model_validate(estudiante),
        sync=resultado,
        warning=resultado.warning,
    )


@router.post(
    "/{student_id}/payment-reminder",
    response_model=PaymentReminderResponse,
    summary="Enviar recordatorio de pago al padrino",
    responses={
        400: {"description": "El estudiante no tiene email de padrino"},
        502: {"description": "El relay de correo respondió con error"},
    },
)
async def enviar_recordatorio(
    student_id: str,
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
    relay: EmailRelayClient = Depends(get_email_relay),
):
    try:
        email, respuesta = await send_payment_reminder(db, student_id, relay)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return PaymentReminderResponse(
        success=bool(respuesta.get("success", True)),
        message=respuesta.get("message"),
        sponsor_email=email,
    )
