"""Lista los estudiantes que no tienen un candidato asociado.

Un estudiante queda sin candidato cuando se dio de alta directamente o cuando
su candidateId apunta a un candidato que ya no existe.
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from app.core.database import AsyncSessionLocal
from app.models import Candidate
from app.services.finance_service import student_name
from app.services.student_service import StudentRegistry


async def main():
    async with AsyncSessionLocal() as db:
        estudiantes = await StudentRegistry(db).list()
        result = await db.execute(select(Candidate.id))
        candidatos = set(result.scalars().all())

    sin_candidato = [e for e in estudiantes if not (e.candidate_id and e.candidate_id in candidatos)]

    print("=" * 60)
    print(f"Estudiantes: {len(estudiantes)}")
    print(f"Con candidato asociado: {len(estudiantes) - len(sin_candidato)}")
    print(f"SIN candidato asociado: {len(sin_candidato)}")
    print("=" * 60)
    for i, e in enumerate(sin_candidato, start=1):
        print(f"\n{i}. {student_name(e)}")
        print(f"   ID estudiante: {e.id}")
        print(f"   Matrícula: {e.matriculation_number or 'N/A'}")
        if e.current_grade:
            print(f"   Curso: {e.current_grade}")
        print(f"   Estado: {e.status}")
        if e.academic_year:
            print(f"   Año académico: {e.academic_year}")
        if e.candidate_id:
            print(f"   candidateId (inexistente): {e.candidate_id}")


if __name__ == "__main__":
    asyncio.run(main())
