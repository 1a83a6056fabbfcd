"""
Clinic visit records and their effect on pharmacy stock.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFound
from ..models.base import generate_uuid
from ..models.personnel import Personnel
from ..models.treatment import PatientType, VisitRecord
from .stock import apply_stock_deltas, deltas_for_create, deltas_for_delete, deltas_for_edit

logger = logging.getLogger(__name__)

PERSONNEL_NOT_FOUND = "personnel not found"
UNKNOWN_PATIENT = "unknown"


def get_visit(db: Session, visit_id: str) -> VisitRecord:
    visit = db.query(VisitRecord).filter(VisitRecord.id == visit_id).first()
    if not visit:
        raise NotFound("Visit record not found")
    return visit


def add_visit(db: Session, data: Dict) -> VisitRecord:
    """Insert a visit and take its prescribed quantities out of stock."""
    visit = VisitRecord(id=generate_uuid(), **data)
    db.add(visit)
    apply_stock_deltas(db, deltas_for_create(visit.prescribed_medications))
    db.commit()
    db.refresh(visit)
    logger.info("Visit %s recorded with %d prescription line(s)", visit.id, len(visit.prescribed_medications or []))
    return visit


def edit_visit(db: Session, visit_id: str, data: Dict) -> VisitRecord:
    """Replace a visit's fields and apply the net stock change in one commit."""
    visit = get_visit(db, visit_id)
    deltas = deltas_for_edit(visit.prescribed_medications, data.get("prescribed_medications"))
    for field, value in data.items():
        setattr(visit, field, value)
    apply_stock_deltas(db, deltas)
    db.commit()
    db.refresh(visit)
    logger.info("Visit %s edited; stock deltas %s", visit.id, {k: v for k, v in deltas.items() if v})
    return visit


def delete_visit(db: Session, visit_id: str) -> None:
    """Remove a visit and return its prescribed quantities to stock."""
    visit = get_visit(db, visit_id)
    apply_stock_deltas(db, deltas_for_delete(visit.prescribed_medications))
    db.delete(visit)
    db.commit()
    logger.info("Visit %s deleted", visit_id)


def patient_name(visit: VisitRecord, personnel_by_id: Dict[str, Personnel]) -> str:
    if visit.patient_type == PatientType.COMPLEX and visit.personnel_id:
        personnel = personnel_by_id.get(visit.personnel_id)
        return personnel.full_name if personnel else PERSONNEL_NOT_FOUND
    if visit.patient_type == PatientType.CONTRACTOR and visit.contractor_info:
        info = visit.contractor_info
        return f"{info.get('first_name', '')} {info.get('last_name', '')} (contractor)"
    return UNKNOWN_PATIENT


def list_visits(db: Session, search: Optional[str] = None) -> List[Dict]:
    """Visit history, newest first, optionally filtered by patient name, reason or diagnosis."""
    visits = db.query(VisitRecord).order_by(VisitRecord.created_at.desc()).all()
    personnel_by_id = {p.id: p for p in db.query(Personnel).all()}
    rows = [(visit, patient_name(visit, personnel_by_id)) for visit in visits]
    if search:
        term = search.lower()
        rows = [
            (visit, name)
            for visit, name in rows
            if term in name.lower() or term in visit.reason.lower() or term in visit.diagnosis.lower()
        ]
    return [{"visit": visit, "patient_name": name} for visit, name in rows]
