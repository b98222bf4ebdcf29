import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from perf_portal.core.rbac import require_roles
from perf_portal.core.roles import Role
from perf_portal.db.session import get_db
from perf_portal.models.audit_event import AuditEvent
from perf_portal.schemas.audit import AuditEventOut

router = APIRouter(prefix="/audit", tags=["audit"])


def event_to_out(r: AuditEvent) -> AuditEventOut:
    return AuditEventOut(
        id=str(r.id),
        actor_user_id=str(r.actor_user_id) if r.actor_user_id else None,
        action=r.action,
        entity_type=r.entity_type,
        entity_id=str(r.entity_id),
        metadata=r.event_metadata,
        created_at=r.created_at,
    )


@router.get("", response_model=list[AuditEventOut])
def list_audit_events(
    entity_type: str | None = Query(default=None, description="e.g. evaluation, user"),
    entity_id: uuid.UUID | None = Query(default=None),
    action: str | None = Query(default=None, description="e.g. EVALUATION_STATUS_CHANGED"),
    actor_user_id: uuid.UUID | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_roles(Role.HR_ADMIN)),
):
    """Audit trail, newest first. HR admins only."""
    filters = []
    if entity_type:
        filters.append(AuditEvent.entity_type == entity_type)
    if entity_id:
        filters.append(AuditEvent.entity_id == entity_id)
    if action:
        filters.append(AuditEvent.action == action)
    if actor_user_id:
        filters.append(AuditEvent.actor_user_id == actor_user_id)

    rows = (
        db.query(AuditEvent)
        .filter(*filters)
        .order_by(AuditEvent.created_at.desc())
        .limit(limit)
        .all()
    )
    return [event_to_out(r) for r in rows]
