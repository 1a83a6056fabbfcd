"""
Safety checklists: categories, checklist templates and performed submissions.

Deleting a category cascades to its checklists. Submissions are never
cascaded; they outlive their checklist and show a fallback title.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.dates import today_jalali
from ..core.exceptions import NotFound, ValidationFailed
from ..models.base import generate_uuid
from ..models.safety import Checklist, ChecklistCategory, ChecklistSubmission, SubmissionStatus
from .validators import require_text

logger = logging.getLogger(__name__)

DELETED_CHECKLIST_TITLE = "deleted checklist"
UNKNOWN_CATEGORY = "unknown"


# ── Categories ───────────────────────────────────────────────────────────────

def get_category(db: Session, category_id: str) -> ChecklistCategory:
    category = db.query(ChecklistCategory).filter(ChecklistCategory.id == category_id).first()
    if not category:
        raise NotFound("Checklist category not found")
    return category


def add_category(db: Session, name: str) -> ChecklistCategory:
    category = ChecklistCategory(id=generate_uuid(), name=require_text(name, "Category name is required."))
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Checklist category '%s' created", category.name)
    return category


def edit_category(db: Session, category_id: str, name: str) -> ChecklistCategory:
    category = get_category(db, category_id)
    category.name = require_text(name, "Category name is required.")
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: str) -> int:
    """Delete a category and every checklist in it. Returns the checklist count removed."""
    category = get_category(db, category_id)
    removed = len(category.checklists)
    # cascade="all, delete-orphan" on the relationship removes the checklists
    db.delete(category)
    db.commit()
    logger.info("Checklist category %s deleted with %d checklist(s)", category_id, removed)
    return removed


def list_categories(db: Session) -> List[ChecklistCategory]:
    return db.query(ChecklistCategory).order_by(ChecklistCategory.created_at).all()


# ── Checklists ───────────────────────────────────────────────────────────────

def _prepare_items(items: Optional[List[Dict]]) -> List[Dict]:
    """
    Drop blank items and give new items an id. Existing ids are kept so
    earlier submissions keep pointing at the same items.
    """
    prepared = []
    for item in items or ():
        text = (item.get("text") or "").strip()
        if not text:
            continue
        prepared.append({"id": item.get("id") or generate_uuid(), "text": text})
    if not prepared:
        raise ValidationFailed("A checklist needs at least one item.")
    return prepared


def get_checklist(db: Session, checklist_id: str) -> Checklist:
    checklist = db.query(Checklist).filter(Checklist.id == checklist_id).first()
    if not checklist:
        raise NotFound("Checklist not found")
    return checklist


def add_checklist(db: Session, category_id: str, title: str, items: List[Dict]) -> Checklist:
    get_category(db, category_id)
    checklist = Checklist(
        id=generate_uuid(),
        category_id=category_id,
        title=require_text(title, "Checklist title is required."),
        items=_prepare_items(items),
    )
    db.add(checklist)
    db.commit()
    db.refresh(checklist)
    logger.info("Checklist '%s' created with %d item(s)", checklist.title, len(checklist.items))
    return checklist


def edit_checklist(db: Session, checklist_id: str, title: str, items: List[Dict]) -> Checklist:
    """Replace title and items; the checklist stays in its category."""
    checklist = get_checklist(db, checklist_id)
    checklist.title = require_text(title, "Checklist title is required.")
    checklist.items = _prepare_items(items)
    db.commit()
    db.refresh(checklist)
    return checklist


def delete_checklist(db: Session, checklist_id: str) -> None:
    checklist = get_checklist(db, checklist_id)
    db.delete(checklist)
    db.commit()
    logger.info("Checklist %s deleted", checklist_id)


def list_checklists(db: Session, category_id: Optional[str] = None) -> List[Checklist]:
    q = db.query(Checklist)
    if category_id:
        q = q.filter(Checklist.category_id == category_id)
    return q.order_by(Checklist.created_at).all()


# ── Submissions ──────────────────────────────────────────────────────────────

def add_submission(
    db: Session,
    checklist_id: str,
    items: List[Dict],
    location: str = "",
    performed_by: str = "",
    date: Optional[str] = None,
) -> ChecklistSubmission:
    """
    Record a performed checklist with one answer per checklist item.
    Unanswered items are recorded as ``na``.
    """
    checklist = get_checklist(db, checklist_id)
    answers = {}
    known_ids = {item["id"] for item in checklist.items}
    for answer in items or ():
        item_id = answer.get("item_id")
        if item_id not in known_ids:
            raise ValidationFailed(f"Unknown checklist item: {item_id}")
        status = answer.get("status", SubmissionStatus.NA)
        if status not in SubmissionStatus.ALL:
            raise ValidationFailed(f"Invalid status. Choose from: {SubmissionStatus.ALL}")
        answers[item_id] = {"item_id": item_id, "status": status, "comment": answer.get("comment") or ""}

    submission_items = [
        answers.get(item["id"], {"item_id": item["id"], "status": SubmissionStatus.NA, "comment": ""})
        for item in checklist.items
    ]
    submission = ChecklistSubmission(
        id=generate_uuid(),
        checklist_id=checklist.id,
        date=date or _now_jalali(),
        location=location or "",
        performed_by=performed_by or "",
        items=submission_items,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    failed = sum(1 for item in submission_items if item["status"] == SubmissionStatus.FAIL)
    logger.info("Checklist '%s' performed (%d failed item(s))", checklist.title, failed)
    return submission


def _now_jalali() -> str:
    return f"{today_jalali()} {datetime.now().strftime('%H:%M')}"


def get_submission(db: Session, submission_id: str) -> ChecklistSubmission:
    submission = db.query(ChecklistSubmission).filter(ChecklistSubmission.id == submission_id).first()
    if not submission:
        raise NotFound("Checklist submission not found")
    return submission


def submission_history(db: Session, search: Optional[str] = None) -> List[Dict]:
    """Submissions newest first, each with its checklist title (or the fallback)."""
    titles = {c.id: c.title for c in db.query(Checklist).all()}
    submissions = db.query(ChecklistSubmission).order_by(ChecklistSubmission.created_at.desc()).all()
    rows = [
        {"submission": s, "checklist_title": titles.get(s.checklist_id, DELETED_CHECKLIST_TITLE)}
        for s in submissions
    ]
    if search:
        term = search.lower()
        rows = [
            row for row in rows
            if term in row["checklist_title"].lower()
            or term in row["submission"].location.lower()
            or term in row["submission"].performed_by.lower()
        ]
    return rows


def submission_detail(db: Session, submission_id: str) -> Dict:
    submission = get_submission(db, submission_id)
    checklist = db.query(Checklist).filter(Checklist.id == submission.checklist_id).first()
    category = checklist.category if checklist else None
    return {
        "submission": submission,
        "checklist": checklist,
        "checklist_title": checklist.title if checklist else DELETED_CHECKLIST_TITLE,
        "category_name": category.name if category else UNKNOWN_CATEGORY,
    }
