import logging
from enum import Enum

from perf_portal.core.exceptions import PolicyConfigurationError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR_ADMIN = "hr_admin"


ROLE_DISPLAY_NAMES: dict[Role, str] = {
    Role.HR_ADMIN: "HR Administrator",
    Role.MANAGER: "Manager",
    Role.EMPLOYEE: "Employee",
}

ALL_PERMISSIONS = "*"

# Coarse page-level permissions. Record-level checks live in core.policy.
ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.HR_ADMIN: frozenset({ALL_PERMISSIONS}),
    Role.MANAGER: frozenset(
        {
            "view_own_team",
            "create_evaluation",
            "edit_evaluation",
            "view_evaluation",
            "view_reports",
        }
    ),
    Role.EMPLOYEE: frozenset({"view_own_evaluation", "view_own_profile"}),
}


def parse_role(value: Role | str | None) -> Role:
    """
    Coerce a stored/session role string into a Role.

    Anything outside the closed set is a configuration defect, not a
    low-privilege caller.
    """
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        logger.error("Unrecognized role reached policy engine", extra={"role": value})
        raise PolicyConfigurationError(
            f"Unrecognized role: {value!r}", details={"role": value}
        ) from None


def role_display_name(role: Role | str) -> str:
    return ROLE_DISPLAY_NAMES[parse_role(role)]


def has_permission(role: Role | str, permission: str) -> bool:
    granted = ROLE_PERMISSIONS[parse_role(role)]
    return ALL_PERMISSIONS in granted or permission in granted
