"""
Treatment clinic visits.

The form rules run here before the visit service touches the store: required
fields, prescription lines and stock sufficiency. The service then applies the
stock change together with the visit in one commit.
"""
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.dates import JalaliDateStr, TimeStr
from ..core.exceptions import ValidationFailed
from ..core.permissions import TAB_TREATMENT
from ..core.security import require_tab
from ..models.base import get_db
from ..models.personnel import Personnel
from ..models.treatment import ActionResult, PatientType, VisitRecord
from ..services import visits as visit_service
from ..services.validators import check_stock_available, merge_prescriptions, require_choice, require_text

router = APIRouter(prefix="/visits", tags=["treatment"])

treatment = require_tab(TAB_TREATMENT)


class ContractorInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    age: Optional[int] = None
    national_id: str = ""
    company: str = ""


class HospitalDispatch(BaseModel):
    driver_name: str = ""
    dispatch_time: Optional[TimeStr] = None


class PrescribedMedication(BaseModel):
    medicine_id: str
    quantity: int


class VisitUpdate(BaseModel):
    visit_date: JalaliDateStr
    visit_time: TimeStr
    reason: str
    diagnosis: str
    recommendations: str = ""
    physician_name: str = ""
    prescribed_medications: List[PrescribedMedication] = []
    action_result: str = ActionResult.RETURN_TO_WORK
    hospital_dispatch_details: Optional[HospitalDispatch] = None
    consulting_physician_name: str = ""
    has_electronic_prescription: bool = False
    electronic_prescription_code: Optional[str] = None


class VisitCreate(VisitUpdate):
    """The patient is fixed at creation; edits cannot change it."""
    patient_type: str = PatientType.COMPLEX
    personnel_id: Optional[str] = None
    contractor_info: Optional[ContractorInfo] = None


class VisitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    visit_date: str
    visit_time: str
    reason: str
    diagnosis: str
    recommendations: str
    physician_name: str
    patient_type: str
    personnel_id: Optional[str]
    contractor_info: Optional[Dict]
    prescribed_medications: List[Dict]
    action_result: str
    hospital_dispatch_details: Optional[Dict]
    consulting_physician_name: str
    has_electronic_prescription: bool
    electronic_prescription_code: Optional[str]
    patient_name: str = ""
    created_at: datetime


# ── Form checks ──────────────────────────────────────────────────────────────

def _clean_common(db: Session, data: Dict, held: Optional[List[Dict]] = None) -> Dict:
    data["reason"] = require_text(data.get("reason"), "Reason and diagnosis are required.")
    data["diagnosis"] = require_text(data.get("diagnosis"), "Reason and diagnosis are required.")
    require_choice(data["action_result"], ActionResult.ALL, "action result")
    data["prescribed_medications"] = merge_prescriptions(data.get("prescribed_medications"))
    check_stock_available(db, data["prescribed_medications"], held=held)
    if data["action_result"] != ActionResult.HOSPITAL_DISPATCH:
        data["hospital_dispatch_details"] = None
    if not data["has_electronic_prescription"]:
        data["electronic_prescription_code"] = None
    return data


def _clean_patient(db: Session, data: Dict) -> Dict:
    require_choice(data["patient_type"], PatientType.ALL, "patient type")
    if data["patient_type"] == PatientType.COMPLEX:
        personnel_id = data.get("personnel_id")
        if not personnel_id or not db.query(Personnel).filter(Personnel.id == personnel_id).first():
            raise ValidationFailed("Please select a personnel member.")
        data["contractor_info"] = None
    else:
        info = data.get("contractor_info") or {}
        for field in ("first_name", "last_name", "national_id"):
            if not (info.get(field) or "").strip():
                raise ValidationFailed("Contractor name and national ID are required.")
        data["personnel_id"] = None
    return data


def _response(db: Session, visit: VisitRecord) -> VisitResponse:
    personnel_by_id = {}
    if visit.personnel_id:
        personnel = db.query(Personnel).filter(Personnel.id == visit.personnel_id).first()
        if personnel:
            personnel_by_id[personnel.id] = personnel
    response = VisitResponse.model_validate(visit)
    response.patient_name = visit_service.patient_name(visit, personnel_by_id)
    return response


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.get("", response_model=List[VisitResponse])
def list_visits(
    search: Optional[str] = Query(None, description="Patient name, reason or diagnosis"),
    db: Session = Depends(get_db),
    _user=Depends(treatment),
):
    """Visit history, newest first."""
    rows = visit_service.list_visits(db, search)
    results = []
    for row in rows:
        response = VisitResponse.model_validate(row["visit"])
        response.patient_name = row["patient_name"]
        results.append(response)
    return results


@router.post("", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
def create_visit(
    visit_in: VisitCreate,
    db: Session = Depends(get_db),
    _user=Depends(treatment),
):
    data = _clean_patient(db, _clean_common(db, visit_in.model_dump()))
    visit = visit_service.add_visit(db, data)
    return _response(db, visit)


@router.get("/{visit_id}", response_model=VisitResponse)
def get_visit(visit_id: str, db: Session = Depends(get_db), _user=Depends(treatment)):
    return _response(db, visit_service.get_visit(db, visit_id))


@router.put("/{visit_id}", response_model=VisitResponse)
def update_visit(
    visit_id: str,
    visit_in: VisitUpdate,
    db: Session = Depends(get_db),
    _user=Depends(treatment),
):
    """Edit a visit; stock moves by the difference between the old and new prescriptions."""
    original = visit_service.get_visit(db, visit_id)
    data = _clean_common(db, visit_in.model_dump(), held=original.prescribed_medications)
    visit = visit_service.edit_visit(db, visit_id, data)
    return _response(db, visit)


@router.delete("/{visit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_visit(visit_id: str, db: Session = Depends(get_db), _user=Depends(treatment)):
    visit_service.delete_visit(db, visit_id)
