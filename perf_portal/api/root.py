from fastapi import APIRouter

from perf_portal.core.roles import Role, role_display_name

router = APIRouter()


@router.get("/")
def root():
    return {
        "name": "Performance Evaluation Portal",
        "status": "ok",
        "roles": {role.value: role_display_name(role) for role in Role},
        "docs": "/docs",
    }
