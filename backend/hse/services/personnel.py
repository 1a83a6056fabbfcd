"""
Personnel registry, occupational-medicine exams and the checkup schedule.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.dates import JalaliDate, parse_or_none, today_jalali
from ..core.exceptions import NotFound
from ..models.base import generate_uuid
from ..models.personnel import MedicalRecord, Personnel
from .validators import require_text

logger = logging.getLogger(__name__)


class CheckupStatus:
    OVERDUE = "overdue"
    DUE_SOON = "dueSoon"
    NEEDS_FIRST = "needsFirst"


@dataclass
class DuePersonnel:
    personnel: Personnel
    status: str
    next_due_date: Optional[str]


_REQUIRED_FIELDS = ("first_name", "last_name", "national_id", "personnel_id")


def add_personnel(db: Session, data: Dict) -> Personnel:
    cleaned = dict(data)
    for field in _REQUIRED_FIELDS:
        cleaned[field] = require_text(data.get(field), "Name, national ID and personnel ID are required.")
    personnel = Personnel(id=generate_uuid(), **cleaned)
    db.add(personnel)
    db.commit()
    db.refresh(personnel)
    logger.info("Personnel %s (%s) registered", personnel.personnel_id, personnel.id)
    return personnel


def get_personnel(db: Session, personnel_id: str) -> Personnel:
    personnel = db.query(Personnel).filter(Personnel.id == personnel_id).first()
    if not personnel:
        raise NotFound("Personnel not found")
    return personnel


def search_personnel(db: Session, term: Optional[str] = None) -> List[Personnel]:
    """Case-insensitive substring match on names, personnel id and national id."""
    personnel_list = db.query(Personnel).order_by(Personnel.created_at).all()
    if not term:
        return personnel_list
    needle = term.casefold()
    return [
        p for p in personnel_list
        if any(
            needle in (value or "").casefold()
            for value in (p.first_name, p.last_name, p.personnel_id, p.national_id)
        )
    ]


def add_medical_record(db: Session, data: Dict) -> MedicalRecord:
    get_personnel(db, data["personnel_id"])
    record = MedicalRecord(id=generate_uuid(), **data)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Medical record %s added for personnel %s", record.id, record.personnel_id)
    return record


def records_for(db: Session, personnel_id: str) -> List[MedicalRecord]:
    return (
        db.query(MedicalRecord)
        .filter(MedicalRecord.personnel_id == personnel_id)
        .order_by(MedicalRecord.created_at)
        .all()
    )


def _exam_sort_key(record: MedicalRecord):
    # Unparseable dates sort before every real date
    parsed = parse_or_none(record.exam_date)
    return (parsed is not None, parsed or JalaliDate(1, 1, 1))


def _due_sort_key(due: DuePersonnel):
    parsed = parse_or_none(due.next_due_date)
    return (parsed is None, parsed or JalaliDate(1, 1, 1))


def due_checkups(
    db: Session,
    limit: int = 10,
    today: Optional[JalaliDate] = None,
) -> List[DuePersonnel]:
    """
    Who needs an exam next. Personnel with records report the next exam date
    of their latest record (ordered soonest first); personnel without any
    record follow, flagged as needing a first exam.
    """
    today = today or today_jalali()
    personnel_list = db.query(Personnel).order_by(Personnel.created_at).all()
    records_by_personnel: Dict[str, List[MedicalRecord]] = {}
    for record in db.query(MedicalRecord).all():
        records_by_personnel.setdefault(record.personnel_id, []).append(record)

    scheduled: List[DuePersonnel] = []
    needs_first: List[DuePersonnel] = []
    for personnel in personnel_list:
        records = records_by_personnel.get(personnel.id)
        if not records:
            needs_first.append(DuePersonnel(personnel, CheckupStatus.NEEDS_FIRST, None))
            continue
        latest = max(records, key=_exam_sort_key)
        next_date = parse_or_none(latest.next_exam_date)
        status = CheckupStatus.OVERDUE if next_date is not None and next_date < today else CheckupStatus.DUE_SOON
        scheduled.append(DuePersonnel(personnel, status, latest.next_exam_date))

    scheduled.sort(key=_due_sort_key)
    return (scheduled + needs_first)[:limit]
