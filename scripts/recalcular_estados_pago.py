"""Recalcula paymentStatus, totalPaid y totalDue de todos los estudiantes con pagos."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from app.core.database import AsyncSessionLocal
from app.models import Payment
from app.services.payment_service import PaymentLedger


async def main():
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Payment.student_id).distinct())
        student_ids = result.scalars().all()
        ledger = PaymentLedger(db)
        for student_id in student_ids:
            estudiante = await ledger.refresh_student_payment_status(student_id)
            if estudiante is not None:
                print(
                    f"  {estudiante.matriculation_number or estudiante.id}: "
                    f"{estudiante.payment_status} ({estudiante.total_paid}/{estudiante.total_due} USD)"
                )
        await db.commit()
    print(f"Listo. Estudiantes recalculados: {len(student_ids)}")


if __name__ == "__main__":
    asyncio.run(main())
