from sqlalchemy import Column, String, Text, Boolean, Integer, ForeignKey, JSON
from .base import Base, TimestampMixin, generate_uuid


class PatientType:
    COMPLEX = "complex"        # Own personnel
    CONTRACTOR = "contractor"  # Contractor staff, identified inline

    ALL = [COMPLEX, CONTRACTOR]


class ActionResult:
    RETURN_TO_WORK = "returnToWork"
    REFERRAL = "referral"
    HOSPITAL_DISPATCH = "hospitalDispatch"

    ALL = [RETURN_TO_WORK, REFERRAL, HOSPITAL_DISPATCH]


class Medicine(Base, TimestampMixin):
    __tablename__ = "medicines"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    type = Column(String(100), nullable=False)  # tablet, syrup, ...
    # Changed by visit create/edit/delete and by direct pharmacy edits
    stock = Column(Integer, nullable=False, default=0)


class VisitRecord(Base, TimestampMixin):
    __tablename__ = "visit_records"

    id = Column(String, primary_key=True, default=generate_uuid)
    visit_date = Column(String(10), nullable=False)  # Jalali YYYY/MM/DD
    visit_time = Column(String(5), nullable=False)   # HH:MM
    reason = Column(Text, nullable=False)
    diagnosis = Column(Text, nullable=False)
    recommendations = Column(Text, nullable=False, default="")
    physician_name = Column(String(200), nullable=False, default="")

    patient_type = Column(String(20), nullable=False, default=PatientType.COMPLEX)
    personnel_id = Column(String, ForeignKey("personnel.id"), nullable=True, index=True)
    contractor_info = Column(JSON, nullable=True)  # first_name, last_name, age, national_id, company

    # [{"medicine_id": str, "quantity": int}, ...]
    prescribed_medications = Column(JSON, nullable=False, default=list)

    action_result = Column(String(30), nullable=False, default=ActionResult.RETURN_TO_WORK)
    hospital_dispatch_details = Column(JSON, nullable=True)  # driver_name, dispatch_time
    consulting_physician_name = Column(String(200), nullable=False, default="")
    has_electronic_prescription = Column(Boolean, nullable=False, default=False)
    electronic_prescription_code = Column(String(100), nullable=True)
