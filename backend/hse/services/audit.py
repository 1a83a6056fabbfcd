"""Medical-data access log: writes from the middleware, reads for the admin view."""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.audit import AuditLog
from ..models.base import SessionLocal, generate_uuid

logger = logging.getLogger(__name__)

# Query parameter -> column, all exact matches
_EXACT_FILTERS = {
    "username": AuditLog.username,
    "action": AuditLog.action,
    "resource_type": AuditLog.resource_type,
    "resource_id": AuditLog.resource_id,
}


def record_access(entry: Dict) -> None:
    """
    Store one access entry in its own session.

    Runs outside the request's session (and off the event loop) so a failed
    write never changes the response the user already got.
    """
    db = SessionLocal()
    try:
        db.add(AuditLog(id=generate_uuid(), **entry))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(
            "Audit log write failed for %s %s (user=%s): %s",
            entry.get("request_method"), entry.get("request_path"), entry.get("username"), exc,
        )
    finally:
        db.close()


def search_access_log(
    db: Session,
    filters: Dict[str, Optional[str]],
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[AuditLog]:
    q = db.query(AuditLog)
    for name, value in filters.items():
        if value:
            q = q.filter(_EXACT_FILTERS[name] == value)
    if since:
        q = q.filter(AuditLog.created_at >= since)
    if until:
        q = q.filter(AuditLog.created_at <= until)
    return q.order_by(AuditLog.created_at.desc()).offset(skip).limit(limit).all()
