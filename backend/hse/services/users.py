import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFound, ValidationFailed
from ..models.base import generate_uuid
from ..models.user import User, UserRole
from .validators import require_text

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """Flat lookup: both fields must match a stored user exactly."""
    user = db.query(User).filter(User.username == username).first()
    if user is None or user.password != password:
        return None
    return user


def _check_roles(roles: List[str]) -> List[str]:
    unknown = [r for r in roles if r not in UserRole.ALL]
    if unknown:
        raise ValidationFailed(f"Invalid role(s) {unknown}. Choose from: {UserRole.ALL}")
    # Keep order, drop repeats
    return list(dict.fromkeys(roles))


def _ensure_unique(db: Session, username: str, exclude_id: Optional[str] = None) -> None:
    q = db.query(User).filter(User.username == username)
    if exclude_id:
        q = q.filter(User.id != exclude_id)
    if q.first():
        raise ValidationFailed("Username already taken")


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at).all()


def create_user(db: Session, data: Dict) -> User:
    username = require_text(data.get("username"), "Username cannot be empty.")
    if not data.get("password"):
        raise ValidationFailed("A password is required for a new user.")
    _ensure_unique(db, username)
    user = User(
        id=generate_uuid(),
        username=username,
        password=data["password"],
        roles=_check_roles(data.get("roles") or []),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s created with roles %s", user.username, user.roles)
    return user


def edit_user(db: Session, user_id: str, data: Dict) -> User:
    """Update username and roles. The password is left as it is."""
    user = get_user(db, user_id)
    username = require_text(data.get("username"), "Username cannot be empty.")
    _ensure_unique(db, username, exclude_id=user.id)
    user.username = username
    user.roles = _check_roles(data.get("roles") or [])
    db.commit()
    db.refresh(user)
    logger.info("User %s updated", user.username)
    return user


def delete_user(db: Session, user_id: str) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted", user.username)
