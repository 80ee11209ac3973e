"""Modelos SQLAlchemy (tablas de la base de datos)."""
from app.models.sponsor import Sponsor
from app.models.candidate import Candidate, CandidatePriority, CandidateStatus
from app.models.student import PaymentStatus, Student, StudentStatus
from app.models.payment import Payment, PaymentRecordStatus, PaymentType

__all__ = [
    "Sponsor",
    "Candidate",
    "CandidatePriority",
    "CandidateStatus",
    "Student",
    "StudentStatus",
    "PaymentStatus",
    "Payment",
    "PaymentRecordStatus",
    "PaymentType",
]
