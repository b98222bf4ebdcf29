from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from perf_portal.core.access import scope_evaluations_query
from perf_portal.core.identity import IdentityContext
from perf_portal.core.navigation import menu_for
from perf_portal.core.roles import role_display_name
from perf_portal.core.security import get_current_identity
from perf_portal.core.workflow import EvaluationStatus
from perf_portal.db.session import get_db
from perf_portal.models.evaluation import Evaluation
from perf_portal.models.user import User
from perf_portal.schemas.auth import MeOut
from perf_portal.schemas.evaluation import EvaluationOut
from perf_portal.schemas.navigation import NavigationOut
from perf_portal.api.evaluations import eval_to_out

router = APIRouter(tags=["me"])


@router.get("/me", response_model=MeOut)
def me(
    ctx: IdentityContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Current user, role and linked employee record"""
    user = db.get(User, ctx.user_id)
    return MeOut(
        user_id=str(ctx.user_id),
        email=user.email,
        full_name=user.full_name,
        role=ctx.role.value,
        role_display_name=role_display_name(ctx.role),
        employee_id=str(ctx.employee_id) if ctx.employee_id else None,
        direct_report_ids=sorted(str(i) for i in ctx.direct_report_ids),
    )


@router.get("/me/navigation", response_model=NavigationOut)
def my_navigation(ctx: IdentityContext = Depends(get_current_identity)):
    return NavigationOut(
        role=ctx.role.value,
        items=[item.to_dict() for item in menu_for(ctx.role)],
    )


@router.get("/me/evaluations", response_model=list[EvaluationOut])
def my_evaluations(
    role: Literal["subject", "evaluator"] | None = Query(
        default=None, description="Filter by involvement: subject or evaluator"
    ),
    status: EvaluationStatus | None = Query(default=None, description="Filter by status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    """
    Evaluations the caller is personally involved in, either as the
    evaluated employee or as the evaluator. Never wider than what
    can_access_evaluation() grants.
    """
    query = scope_evaluations_query(db.query(Evaluation), ctx)

    if role == "evaluator":
        query = query.filter(Evaluation.evaluator_id == ctx.user_id)
    elif role == "subject":
        if ctx.employee_id is None:
            return []
        query = query.filter(Evaluation.employee_id == ctx.employee_id)
    else:
        cond = Evaluation.evaluator_id == ctx.user_id
        if ctx.employee_id is not None:
            cond = cond | (Evaluation.employee_id == ctx.employee_id)
        query = query.filter(cond)

    if status:
        query = query.filter(Evaluation.status == status.value)

    rows = query.order_by(Evaluation.created_at.desc()).offset(offset).limit(limit).all()
    return [eval_to_out(e) for e in rows]
