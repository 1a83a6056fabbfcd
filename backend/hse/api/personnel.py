"""Occupational medicine: personnel registry, exam records and the checkup schedule."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.dates import JalaliDate, JalaliDateStr, add_years
from ..core.exceptions import ValidationFailed
from ..core.permissions import TAB_OCCUPATIONAL_MEDICINE, TAB_TREATMENT
from ..core.security import require_tab
from ..models.base import get_db
from ..models.personnel import ExamResult, FitnessStatus
from ..services import personnel as personnel_service
from ..services.validators import require_choice

router = APIRouter(prefix="/personnel", tags=["occupational-medicine"])
records_router = APIRouter(prefix="/medical-records", tags=["occupational-medicine"])

occupational_medicine = require_tab(TAB_OCCUPATIONAL_MEDICINE)


class PersonnelCreate(BaseModel):
    first_name: str
    last_name: str
    national_id: str
    personnel_id: str
    hire_date: Optional[JalaliDateStr] = None
    position: Optional[str] = None


class PersonnelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    national_id: str
    personnel_id: str
    hire_date: Optional[str]
    position: Optional[str]


class PhysicianOpinion(BaseModel):
    specialist_opinion: str = ""
    recommendations: str = ""
    referral: bool = False
    status: str = FitnessStatus.UNRESTRICTED
    referral_details: str = ""


class MedicalRecordCreate(BaseModel):
    personnel_id: str
    exam_date: JalaliDateStr
    # Defaults to one year after the exam
    next_exam_date: Optional[JalaliDateStr] = None
    vitals: Dict[str, Any] = {}
    blood_test: Dict[str, Any] = {}
    urinalysis: Dict[str, Any] = {}
    vision_test: Dict[str, Any] = {}
    audiometry: Dict[str, Any] = {}
    spirometry: str = ""
    ecg: str = ""
    physician_opinion: PhysicianOpinion = PhysicianOpinion()


class MedicalRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    personnel_id: str
    exam_date: str
    next_exam_date: str
    vitals: Dict[str, Any]
    blood_test: Dict[str, Any]
    urinalysis: Dict[str, Any]
    vision_test: Dict[str, Any]
    audiometry: Dict[str, Any]
    spirometry: str
    ecg: str
    physician_opinion: Dict[str, Any]
    created_at: datetime


class PersonnelDetail(PersonnelResponse):
    medical_records: List[MedicalRecordResponse]


class DueCheckupResponse(BaseModel):
    personnel: PersonnelResponse
    status: str
    next_due_date: Optional[str]


# ── Personnel ────────────────────────────────────────────────────────────────

@router.get("", response_model=List[PersonnelResponse])
def list_personnel(
    search: Optional[str] = Query(None, description="Name, personnel ID or national ID"),
    db: Session = Depends(get_db),
    _user=Depends(require_tab(TAB_OCCUPATIONAL_MEDICINE, TAB_TREATMENT)),
):
    return personnel_service.search_personnel(db, search)


@router.post("", response_model=PersonnelResponse, status_code=status.HTTP_201_CREATED)
def create_personnel(
    personnel_in: PersonnelCreate,
    db: Session = Depends(get_db),
    _user=Depends(occupational_medicine),
):
    return personnel_service.add_personnel(db, personnel_in.model_dump())


@router.get("/checkups", response_model=List[DueCheckupResponse])
def upcoming_checkups(
    limit: Optional[int] = Query(None, ge=1, description="Defaults to DUE_CHECKUPS_LIMIT"),
    db: Session = Depends(get_db),
    _user=Depends(occupational_medicine),
):
    """Personnel due for their next exam, soonest first, then those never examined."""
    due = personnel_service.due_checkups(db, limit=limit or settings.DUE_CHECKUPS_LIMIT)
    return [
        DueCheckupResponse(
            personnel=PersonnelResponse.model_validate(d.personnel),
            status=d.status,
            next_due_date=d.next_due_date,
        )
        for d in due
    ]


@router.get("/{personnel_id}", response_model=PersonnelDetail)
def get_personnel(
    personnel_id: str,
    db: Session = Depends(get_db),
    _user=Depends(occupational_medicine),
):
    personnel = personnel_service.get_personnel(db, personnel_id)
    return PersonnelDetail(
        **PersonnelResponse.model_validate(personnel).model_dump(),
        medical_records=[
            MedicalRecordResponse.model_validate(r)
            for r in personnel_service.records_for(db, personnel.id)
        ],
    )


@router.get("/{personnel_id}/medical-records", response_model=List[MedicalRecordResponse])
def list_medical_records(
    personnel_id: str,
    db: Session = Depends(get_db),
    _user=Depends(occupational_medicine),
):
    personnel_service.get_personnel(db, personnel_id)
    return personnel_service.records_for(db, personnel_id)


# ── Medical records ──────────────────────────────────────────────────────────

@records_router.post("", response_model=MedicalRecordResponse, status_code=status.HTTP_201_CREATED)
def create_medical_record(
    record_in: MedicalRecordCreate,
    db: Session = Depends(get_db),
    _user=Depends(occupational_medicine),
):
    require_choice(record_in.physician_opinion.status, FitnessStatus.ALL, "fitness status")
    for result in (record_in.spirometry, record_in.ecg):
        if result:
            require_choice(result, ExamResult.ALL, "exam result")

    data = record_in.model_dump()
    if not data["next_exam_date"]:
        try:
            data["next_exam_date"] = str(add_years(JalaliDate.parse(data["exam_date"]), 1))
        except ValueError:
            raise ValidationFailed("Next exam date is out of range; enter it manually.")
    return personnel_service.add_medical_record(db, data)
