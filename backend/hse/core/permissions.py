"""
Role matrix for the HSE dashboard.
Each non-admin role unlocks exactly the domain tab of the same name.
"""
from typing import Iterable, List

from ..models.user import UserRole

# Domain tabs, in display order
TAB_OCCUPATIONAL_MEDICINE = UserRole.OCCUPATIONAL_MEDICINE
TAB_TREATMENT = UserRole.TREATMENT
TAB_SAFETY = UserRole.SAFETY
TAB_FIRE_DEPARTMENT = UserRole.FIRE_DEPARTMENT
TAB_ENVIRONMENT = UserRole.ENVIRONMENT

DOMAIN_TABS: List[str] = [
    TAB_OCCUPATIONAL_MEDICINE,
    TAB_TREATMENT,
    TAB_SAFETY,
    TAB_FIRE_DEPARTMENT,
    TAB_ENVIRONMENT,
]


def visible_tabs(roles: Iterable[str]) -> List[str]:
    """Tabs a user may open. An empty list means access denied."""
    roles = set(roles or ())
    if UserRole.ADMIN in roles:
        return list(DOMAIN_TABS)
    return [tab for tab in DOMAIN_TABS if tab in roles]


def initial_tab(roles: Iterable[str]):
    tabs = visible_tabs(roles)
    return tabs[0] if tabs else None


def can_view_tab(roles: Iterable[str], tab: str) -> bool:
    return tab in visible_tabs(roles)


def is_admin(roles: Iterable[str]) -> bool:
    return UserRole.ADMIN in set(roles or ())
