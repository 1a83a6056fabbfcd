import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ValidationFailed
from ..models.base import generate_uuid
from ..models.safety import Incident, IncidentParty

logger = logging.getLogger(__name__)


def add_incident(db: Session, data: Dict) -> Incident:
    if not (data.get("location") or "").strip() or not (data.get("description") or "").strip():
        raise ValidationFailed("Incident location and description are required.")
    if data.get("party") == IncidentParty.CONTRACTOR:
        if not (data.get("contractor_name") or "").strip():
            raise ValidationFailed("Contractor name is required.")
    else:
        data = {**data, "contractor_name": None}

    incident = Incident(id=generate_uuid(), **data)
    db.add(incident)
    db.commit()
    db.refresh(incident)
    logger.info("Incident %s logged (%s, %s)", incident.id, incident.severity, incident.party)
    return incident


def list_incidents(db: Session, search: Optional[str] = None) -> List[Incident]:
    """Newest first. Search covers location, description, corrective actions and contractor name."""
    incidents = db.query(Incident).order_by(Incident.created_at.desc()).all()
    if not search:
        return incidents
    term = search.lower()
    return [
        i for i in incidents
        if term in i.location.lower()
        or term in i.description.lower()
        or term in (i.corrective_actions or "").lower()
        or (i.party == IncidentParty.CONTRACTOR and term in (i.contractor_name or "").lower())
    ]
