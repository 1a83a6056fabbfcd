from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.dates import JalaliDateStr, TimeStr
from ..core.permissions import TAB_SAFETY
from ..core.security import require_tab
from ..models.base import get_db
from ..models.safety import IncidentParty, IncidentSeverity, IncidentStatus
from ..services import incidents as incident_service
from ..services.validators import require_choice

router = APIRouter(prefix="/incidents", tags=["safety"])


class IncidentCreate(BaseModel):
    date: JalaliDateStr
    time: TimeStr
    location: str
    description: str
    party: str = IncidentParty.COMPLEX
    contractor_name: Optional[str] = None
    severity: str = IncidentSeverity.MINOR
    corrective_actions: str = ""
    status: str = IncidentStatus.OPEN


class IncidentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: str
    time: str
    location: str
    description: str
    party: str
    contractor_name: Optional[str]
    severity: str
    corrective_actions: str
    status: str
    created_at: datetime


@router.get("", response_model=List[IncidentResponse])
def list_incidents(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _user=Depends(require_tab(TAB_SAFETY)),
):
    """Incident log, newest first."""
    return incident_service.list_incidents(db, search)


@router.post("", response_model=IncidentResponse, status_code=status.HTTP_201_CREATED)
def create_incident(
    incident_in: IncidentCreate,
    db: Session = Depends(get_db),
    _user=Depends(require_tab(TAB_SAFETY)),
):
    require_choice(incident_in.party, IncidentParty.ALL, "party")
    require_choice(incident_in.severity, IncidentSeverity.ALL, "severity")
    require_choice(incident_in.status, IncidentStatus.ALL, "status")
    return incident_service.add_incident(db, incident_in.model_dump())
