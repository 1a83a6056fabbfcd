from sqlalchemy import Column, String, ForeignKey, JSON
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class ExamResult:
    NORMAL = "normal"
    ABNORMAL = "abnormal"

    ALL = [NORMAL, ABNORMAL]


class FitnessStatus:
    UNRESTRICTED = "unrestricted"
    CONDITIONAL = "conditional"

    ALL = [UNRESTRICTED, CONDITIONAL]


class Personnel(Base, TimestampMixin):
    __tablename__ = "personnel"

    id = Column(String, primary_key=True, default=generate_uuid)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    national_id = Column(String(20), nullable=False, index=True)
    personnel_id = Column(String(50), nullable=False, index=True)  # Company-issued number
    hire_date = Column(String(10), nullable=True)  # Jalali YYYY/MM/DD
    position = Column(String(100), nullable=True)

    medical_records = relationship(
        "MedicalRecord", back_populates="personnel", order_by="MedicalRecord.created_at"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class MedicalRecord(Base, TimestampMixin):
    """Periodic occupational-medicine exam. Append-only."""
    __tablename__ = "medical_records"

    id = Column(String, primary_key=True, default=generate_uuid)
    personnel_id = Column(String, ForeignKey("personnel.id"), nullable=False, index=True)
    exam_date = Column(String(10), nullable=False)       # Jalali YYYY/MM/DD
    next_exam_date = Column(String(10), nullable=False)  # Jalali YYYY/MM/DD

    # Exam panels; values are kept as entered
    vitals = Column(JSON, nullable=False, default=dict)
    blood_test = Column(JSON, nullable=False, default=dict)
    urinalysis = Column(JSON, nullable=False, default=dict)
    vision_test = Column(JSON, nullable=False, default=dict)
    audiometry = Column(JSON, nullable=False, default=dict)
    spirometry = Column(String(10), nullable=False, default="")  # normal, abnormal or ""
    ecg = Column(String(10), nullable=False, default="")
    physician_opinion = Column(JSON, nullable=False, default=dict)

    personnel = relationship("Personnel", back_populates="medical_records")
