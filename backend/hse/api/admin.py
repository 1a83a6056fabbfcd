"""Admin endpoints: user management and the medical-data audit log (admin only)."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.security import require_role
from ..models.base import get_db
from ..models.user import UserRole
from ..services import audit as audit_service
from ..services import users as user_service

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_role(UserRole.ADMIN))])


class UserCreate(BaseModel):
    username: str
    password: str
    roles: List[str] = []


class UserUpdate(BaseModel):
    username: str
    roles: List[str] = []


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    roles: List[str]


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    action: str
    resource_type: str
    resource_id: str
    ip_address: Optional[str]
    request_method: Optional[str]
    request_path: Optional[str]
    status_code: Optional[str]
    created_at: datetime


# ── Users ────────────────────────────────────────────────────────────────────

@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, db: Session = Depends(get_db)):
    return user_service.create_user(db, user_in.model_dump())


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: str, user_in: UserUpdate, db: Session = Depends(get_db)):
    """Change username and roles; the password stays as it is."""
    return user_service.edit_user(db, user_id, user_in.model_dump())


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)


# ── Audit log ────────────────────────────────────────────────────────────────

@router.get("/audit-logs", response_model=List[AuditLogResponse])
def get_audit_logs(
    username: Optional[str] = None,
    action: Optional[str] = Query(None, description="view, create, update or delete"),
    resource_type: Optional[str] = Query(None, description="personnel, medical-records or visits"),
    resource_id: Optional[str] = Query(None, description="Entries for one record, e.g. a personnel id"),
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Who touched medical data, newest first."""
    filters = {
        "username": username,
        "action": action,
        "resource_type": resource_type,
        "resource_id": resource_id,
    }
    return audit_service.search_access_log(db, filters, since, until, skip, limit)
