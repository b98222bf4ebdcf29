from fastapi import APIRouter, Depends

from perf_portal.core.identity import IdentityContext
from perf_portal.core.rbac import require_roles
from perf_portal.core.roles import Role

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/ping")
def admin_ping(ctx: IdentityContext = Depends(require_roles(Role.HR_ADMIN))):
    return {"status": "ok", "admin": str(ctx.user_id)}
