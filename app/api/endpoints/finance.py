"""Endpoint del resumen financiero."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_admin
from app.core.database import get_db
from app.schemas.auth import AdminPrincipal
from app.schemas.finance import FinanceSummary
from app.services.finance_service import get_finance_summary

router = APIRouter(prefix="/finance", tags=["finanzas"])


@router.get(
    "/summary",
    response_model=FinanceSummary,
    summary="Resumen financiero",
    description=(
        "Sobre estudiantes activos con padrino: total a pagar, pagado y pendiente (USD), "
        "conteo por condición de pago, desglose por curso y los 8 mayores saldos."
    ),
)
async def resumen_financiero(
    db: AsyncSession = Depends(get_db),
    _: AdminPrincipal = Depends(get_current_admin),
):
    return await get_finance_summary(db)
