import logging
from typing import Any

from sqlalchemy.orm import Session

from perf_portal.core.identity import IdentityContext
from perf_portal.models.audit_event import AuditEvent

logger = logging.getLogger(__name__)


def log_event(
    *,
    db: Session,
    actor: IdentityContext | None,
    action: str,
    entity_type: str,
    entity_id,
    metadata: dict[str, Any] | None = None,
):
    event = AuditEvent(
        actor_user_id=actor.user_id if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        event_metadata=metadata,
    )
    db.add(event)
    logger.info(
        "Audit event recorded",
        extra={"action": action, "entity_type": entity_type, "entity_id": str(entity_id)},
    )
