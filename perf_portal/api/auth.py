from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from perf_portal.core.access import get_employee_for_user
from perf_portal.core.audit import log_event
from perf_portal.core.security import (
    authenticate_user,
    end_session,
    get_current_identity,
    get_session_token,
    start_session,
)
from perf_portal.db.session import get_db
from perf_portal.schemas.auth import LoginOut, LoginPayload

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(payload: LoginPayload, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    session = start_session(db, user)
    employee = get_employee_for_user(db, user.id)

    log_event(
        db=db,
        actor=None,
        action="LOGIN_SUCCESS",
        entity_type="user",
        entity_id=user.id,
    )

    return LoginOut(
        token=session.token,
        user_id=str(user.id),
        role=user.role,
        employee_id=str(employee.id) if employee else None,
    )


@router.post("/logout", status_code=204)
def logout(
    token: str = Depends(get_session_token),
    _=Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    end_session(db, token)
