"""Authentication endpoints: login, me, navigation."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..core.exceptions import AccessDenied
from ..core.permissions import initial_tab, visible_tabs
from ..core.security import get_current_user
from ..models.base import get_db
from ..models.user import User
from ..services.users import authenticate

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Request / Response schemas ──────────────────────────────────────────────

class LoginRequest(BaseModel):
    username: str
    password: str


class ProfileResponse(BaseModel):
    id: str
    username: str
    roles: List[str]
    tabs: List[str]
    active_tab: Optional[str]


class NavigationResponse(BaseModel):
    tabs: List[str]
    active_tab: str


def _profile(user: User) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        username=user.username,
        roles=list(user.roles or []),
        tabs=visible_tabs(user.roles),
        active_tab=initial_tab(user.roles),
    )


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.post("/login", response_model=ProfileResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """
    Check credentials and return the profile with visible tabs. No token is
    issued; later requests send the same credentials as HTTP Basic auth.
    """
    user = authenticate(db, req.username, req.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return _profile(user)


@router.get("/me", response_model=ProfileResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return _profile(current_user)


@router.get("/navigation", response_model=NavigationResponse)
def navigation(current_user: User = Depends(get_current_user)):
    """Tabs the user may open, in display order, and the one to open first."""
    tabs = visible_tabs(current_user.roles)
    if not tabs:
        raise AccessDenied("You do not have access to any section.")
    return NavigationResponse(tabs=tabs, active_tab=tabs[0])
