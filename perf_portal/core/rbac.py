from fastapi import Depends

from perf_portal.core.exceptions import AuthorizationDenied
from perf_portal.core.identity import IdentityContext
from perf_portal.core.roles import Role, has_permission, parse_role
from perf_portal.core.security import get_current_identity


def require_roles(*required: Role):
    """
    Usage:
      Depends(require_roles(Role.HR_ADMIN))
      Depends(require_roles(Role.HR_ADMIN, Role.MANAGER))  # any-of
    """
    required_set = set(required)

    def _dep(ctx: IdentityContext = Depends(get_current_identity)) -> IdentityContext:
        if parse_role(ctx.role) not in required_set:
            raise AuthorizationDenied(
                f"Forbidden. Requires one of: {sorted(r.value for r in required_set)}"
            )
        return ctx

    return _dep


def require_permission(permission: str):
    def _dep(ctx: IdentityContext = Depends(get_current_identity)) -> IdentityContext:
        if not has_permission(ctx.role, permission):
            raise AuthorizationDenied(f"Forbidden. Missing permission: {permission}")
        return ctx

    return _dep
