"""Esquemas para pagos de matrícula y cuotas."""
from datetime import datetime

from pydantic import Field, field_validator, model_validator

from app.models.payment import PaymentRecordStatus, PaymentType
from app.schemas.base import CamelModel, PartialUpdate, validar_opcion
from app.schemas.sync import SyncResult


class PaymentCreate(CamelModel):
    """Registro de un pago. 'month' es obligatorio para cuotas mensuales."""

    type: str = Field(description="enrollment, monthly, full, balance u other")
    amount: float = Field(ge=0, description="Importe en USD")
    date: datetime | None = Field(default=None, description="Fecha del pago (por defecto, ahora)")
    month: int | None = Field(default=None, ge=1, le=12, description="Mes de la cuota (1-12)")
    receipt_number: str | None = None
    receipt_url: str | None = Field(default=None, alias="receiptURL")
    receipt_path: str | None = None
    notes: str | None = None
    status: str = Field(default=PaymentRecordStatus.PAID, description="paid, pending o cancelled")

    @field_validator("type")
    @classmethod
    def validar_tipo(cls, v: str) -> str:
        return validar_opcion(v, PaymentType.ALL, "type")

    @field_validator("status")
    @classmethod
    def validar_estado(cls, v: str) -> str:
        return validar_opcion(v, PaymentRecordStatus.ALL, "status")

    @model_validator(mode="after")
    def mes_para_cuota_mensual(self):
        if self.type == PaymentType.MONTHLY and self.month is None:
            raise ValueError("month es obligatorio para pagos de tipo monthly")
        return self


class PaymentUpdate(PartialUpdate):
    campos_no_nulos = ("type", "amount", "date", "status")

    type: str | None = None
    amount: float | None = Field(default=None, ge=0)
    date: datetime | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    receipt_number: str | None = None
    receipt_url: str | None = Field(default=None, alias="receiptURL")
    receipt_path: str | None = None
    notes: str | None = None
    status: str | None = None

    @field_validator("type")
    @classmethod
    def validar_tipo(cls, v: str | None) -> str | None:
        return validar_opcion(v, PaymentType.ALL, "type")

    @field_validator("status")
    @classmethod
    def validar_estado(cls, v: str | None) -> str | None:
        return validar_opcion(v, PaymentRecordStatus.ALL, "status")


class PaymentRead(CamelModel):
    id: str
    student_id: str
    type: str
    amount: float
    date: datetime
    month: int | None = None
    receipt_number: str | None = None
    receipt_url: str | None = Field(default=None, alias="receiptURL")
    receipt_path: str | None = None
    notes: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class PaymentListResponse(CamelModel):
    payments: list[PaymentRead]
    total_paid: float
    total_due: float
    payment_status: str


class PaymentWriteResponse(CamelModel):
    """Pago guardado y resultado del recálculo de la condición de pago del estudiante."""

    payment: PaymentRead | None = None
    sync: SyncResult
    warning: str | None = None


class ReceiptUploadResponse(CamelModel):
    receipt_url: str = Field(alias="receiptURL")
    receipt_path: str
