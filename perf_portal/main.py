import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from perf_portal.api.admin import router as admin_router
from perf_portal.api.audit import router as audit_router
from perf_portal.api.auth import router as auth_router
from perf_portal.api.employees import router as employees_router
from perf_portal.api.evaluations import router as evaluations_router
from perf_portal.api.health import router as health_router
from perf_portal.api.me import router as me_router
from perf_portal.api.root import router as root_router
from perf_portal.core.config import settings
from perf_portal.core.exceptions import AppException, PolicyConfigurationError
from perf_portal.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Performance Evaluation Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if isinstance(exc, PolicyConfigurationError):
        logger.error(
            "Request rejected: policy misconfiguration",
            extra={"path": request.url.path, "details": exc.details},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error_code": exc.error_code, "message": exc.message},
    )


app.include_router(root_router)
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(me_router)
app.include_router(admin_router)
app.include_router(employees_router)
app.include_router(evaluations_router)
app.include_router(audit_router)
