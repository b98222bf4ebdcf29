import logging
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from perf_portal.core.access import (
    assert_can_access_employee,
    assert_can_access_evaluation,
    assert_can_edit_evaluation,
    evaluation_snapshot,
    get_employee_or_404,
    get_evaluation_or_404,
    scope_evaluations_query,
)
from perf_portal.core.audit import log_event
from perf_portal.core.identity import IdentityContext
from perf_portal.core.policy import can_edit_evaluation, explain_evaluation_access
from perf_portal.core.rbac import require_permission
from perf_portal.core.security import get_current_identity
from perf_portal.core.workflow import (
    TERMINAL_STATUSES,
    EvaluationStatus,
    allowed_transitions,
    check_transition,
)
from perf_portal.db.session import get_db
from perf_portal.models.evaluation import Evaluation
from perf_portal.schemas.evaluation import (
    EvaluationCreate,
    EvaluationDetailOut,
    EvaluationOut,
    EvaluationUpdate,
    TransitionPayload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


def eval_to_out(e: Evaluation) -> EvaluationOut:
    return EvaluationOut(
        id=str(e.id),
        employee_id=str(e.employee_id),
        evaluator_id=str(e.evaluator_id),
        manager_id=str(e.manager_id) if e.manager_id else None,
        period_label=e.period_label,
        status=e.status,
        overall_rating=e.overall_rating,
        comments=e.comments,
        submitted_at=e.submitted_at,
        reviewed_at=e.reviewed_at,
        decided_at=e.decided_at,
        created_at=e.created_at,
        updated_at=e.updated_at,
    )


def eval_to_detail(ctx: IdentityContext, e: Evaluation) -> EvaluationDetailOut:
    snap = evaluation_snapshot(e)
    editable = can_edit_evaluation(ctx, snap)
    targets = allowed_transitions(e.status, ctx.role) if editable else frozenset()
    return EvaluationDetailOut(
        **eval_to_out(e).model_dump(),
        access_path=explain_evaluation_access(ctx, snap).value,
        can_edit=editable,
        allowed_transitions=sorted(t.value for t in targets),
    )


@router.post("", response_model=EvaluationDetailOut, status_code=201)
def create_evaluation(
    payload: EvaluationCreate,
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(require_permission("create_evaluation")),
):
    """
    Start a draft evaluation. The employee's current manager is stamped on
    the record and used for access decisions from then on.
    """
    employee = get_employee_or_404(db, payload.employee_id)
    assert_can_access_employee(ctx, employee.id)

    e = Evaluation(
        employee_id=employee.id,
        evaluator_id=ctx.user_id,
        # NULL when the employee has no manager; access then follows the live
        # reporting line, which for a top-level employee is self only
        manager_id=employee.manager_id,
        period_label=payload.period_label,
        status=EvaluationStatus.DRAFT.value,
        overall_rating=payload.overall_rating,
        comments=payload.comments,
    )
    db.add(e)
    db.flush()

    log_event(
        db=db,
        actor=ctx,
        action="EVALUATION_CREATED",
        entity_type="evaluation",
        entity_id=e.id,
        metadata={
            "employee_id": str(e.employee_id),
            "manager_id": str(e.manager_id) if e.manager_id else None,
            "status": e.status,
        },
    )
    db.refresh(e)
    return eval_to_detail(ctx, e)


@router.get("", response_model=list[EvaluationOut])
def list_evaluations(
    status: EvaluationStatus | None = Query(default=None, description="Filter by status"),
    employee_id: uuid.UUID | None = Query(default=None, description="Filter by evaluated employee"),
    limit: int = Query(default=100, ge=1, le=500, description="Maximum number of results"),
    offset: int = Query(default=0, ge=0, description="Number of results to skip"),
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    """
    Evaluations visible to the caller. HR admins see everything; everyone
    else sees what can_access_evaluation() would grant them.
    """
    query = scope_evaluations_query(db.query(Evaluation), ctx)

    if status:
        query = query.filter(Evaluation.status == status.value)
    if employee_id:
        query = query.filter(Evaluation.employee_id == employee_id)

    rows = query.order_by(Evaluation.created_at.desc()).offset(offset).limit(limit).all()
    return [eval_to_out(e) for e in rows]


@router.get("/{evaluation_id}", response_model=EvaluationDetailOut)
def get_evaluation(
    evaluation_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    e = get_evaluation_or_404(db, evaluation_id)
    assert_can_access_evaluation(ctx, e)
    return eval_to_detail(ctx, e)


@router.patch("/{evaluation_id}", response_model=EvaluationDetailOut)
def update_evaluation(
    evaluation_id: uuid.UUID,
    payload: EvaluationUpdate,
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    e = get_evaluation_or_404(db, evaluation_id)
    assert_can_edit_evaluation(ctx, e)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(e, field, value)
    db.flush()

    log_event(
        db=db,
        actor=ctx,
        action="EVALUATION_UPDATED",
        entity_type="evaluation",
        entity_id=e.id,
        metadata={"fields": sorted(changes)},
    )
    db.refresh(e)
    return eval_to_detail(ctx, e)


@router.post("/{evaluation_id}/transition", response_model=EvaluationDetailOut)
def transition_evaluation(
    evaluation_id: uuid.UUID,
    payload: TransitionPayload,
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    """
    Move an evaluation through its lifecycle. The caller must be able to
    edit the evaluation in its current state, and the move must be legal.
    """
    e = get_evaluation_or_404(db, evaluation_id)
    assert_can_edit_evaluation(ctx, e)

    previous = e.status
    target = check_transition(previous, payload.status, ctx.role)

    now = datetime.utcnow()
    if target == EvaluationStatus.SUBMITTED:
        e.submitted_at = now
    elif target == EvaluationStatus.REVIEWED:
        e.reviewed_at = now
    elif target in TERMINAL_STATUSES:
        e.decided_at = now
    elif target == EvaluationStatus.DRAFT:
        e.submitted_at = None
        e.reviewed_at = None
        e.decided_at = None
    e.status = target.value
    db.flush()

    log_event(
        db=db,
        actor=ctx,
        action="EVALUATION_STATUS_CHANGED",
        entity_type="evaluation",
        entity_id=e.id,
        metadata={"from": previous, "to": target.value},
    )
    logger.info(
        "Evaluation status changed",
        extra={"evaluation_id": str(e.id), "from": previous, "to": target.value},
    )
    db.refresh(e)
    return eval_to_detail(ctx, e)


@router.delete("/{evaluation_id}", status_code=204)
def delete_evaluation(
    evaluation_id: uuid.UUID,
    db: Session = Depends(get_db),
    ctx: IdentityContext = Depends(get_current_identity),
):
    e = get_evaluation_or_404(db, evaluation_id)
    assert_can_edit_evaluation(ctx, e)

    log_event(
        db=db,
        actor=ctx,
        action="EVALUATION_DELETED",
        entity_type="evaluation",
        entity_id=e.id,
        metadata={"status": e.status, "employee_id": str(e.employee_id)},
    )
    db.delete(e)
