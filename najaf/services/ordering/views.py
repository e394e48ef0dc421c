"""
Role-gated views.

Which screens each role may use. This is UI mode selection, not access
control: there are no credentials behind a role.
"""

from najaf.core.exceptions import ViewNotAvailableError
from najaf.models import ROLE_VIEWS, UserRole, View


def views_for(role: UserRole) -> list[View]:
    return list(ROLE_VIEWS[role])


def default_view(role: UserRole) -> View:
    return ROLE_VIEWS[role][0]


def can_use(role: UserRole, view: View) -> bool:
    return view in ROLE_VIEWS[role]


def ensure_view(role: UserRole, view: View) -> None:
    """
    Raises:
        ViewNotAvailableError: If the role does not include view
    """
    if not can_use(role, view):
        raise ViewNotAvailableError(role.value, view.value)
