"""
Request authentication and role gates.

There are no tokens or sessions: every request carries HTTP Basic
credentials, which are compared verbatim with the users table.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from ..models.base import get_db
from ..models.user import User
from ..services.users import authenticate
from .permissions import can_view_tab

logger = logging.getLogger(__name__)

basic_scheme = HTTPBasic(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
    db: Session = Depends(get_db),
) -> User:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid username or password",
        headers={"WWW-Authenticate": "Basic"},
    )
    if credentials is None:
        raise unauthorized
    user = authenticate(db, credentials.username, credentials.password)
    if user is None:
        logger.warning("Rejected credentials for %r", credentials.username)
        raise unauthorized
    return user


def require_role(*roles: str):
    """Dependency factory: require at least one of the given roles."""
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not set(roles) & set(current_user.roles or ()):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires one of roles: {list(roles)}",
            )
        return current_user
    return checker


def require_tab(*tabs: str):
    """Dependency factory: the user must be able to open one of ``tabs``."""
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not any(can_view_tab(current_user.roles, tab) for tab in tabs):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have access to this section",
            )
        return current_user
    return checker
