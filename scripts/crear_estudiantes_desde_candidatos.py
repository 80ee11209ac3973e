"""Crea el estudiante de cada candidato activo que todavía no tiene uno.

Uso: python scripts/crear_estudiantes_desde_candidatos.py [--dry-run]
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.database import AsyncSessionLocal
from app.models import CandidateStatus
from app.services.sync_service import LifecycleSynchronizer


async def main(dry_run: bool = False):
    creados = 0
    async with AsyncSessionLocal() as db:
        sync = LifecycleSynchronizer(db)
        activos = await sync.candidates.list_by_status(CandidateStatus.ACTIVE)
        print(f"Candidatos activos: {len(activos)}")
        for c in activos:
            if await sync.students.find_by_candidate_id(c.id) is not None:
                continue
            if dry_run:
                print(f"  ~ Se crearía estudiante para {c.full_name} ({c.id})")
                continue
            student_id = await sync.create_or_update_student_from_candidate(c)
            await db.commit()
            creados += 1
            print(f"  + Estudiante {student_id} creado para {c.full_name} ({c.id})")
    print(f"Listo. Estudiantes creados: {creados}")


if __name__ == "__main__":
    asyncio.run(main(dry_run="--dry-run" in sys.argv))
