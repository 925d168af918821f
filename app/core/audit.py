import logging
from typing import Any

from sqlalchemy.orm import Session

from app.models.audit_event import AuditEvent
from app.models.user import User

logger = logging.getLogger(__name__)

ACTIONS = {
    "FORM_CREATED",
    "FORM_UPDATED",
    "FORM_DELETED",
    "FIELD_CREATED",
    "FIELD_UPDATED",
    "FIELD_DELETED",
}


def log_event(
    *,
    db: Session,
    actor: User | None,
    action: str,
    entity_type: str,
    entity_id,
    metadata: dict[str, Any] | None = None,
) -> AuditEvent:
    """Stage an audit row in the caller's transaction; it lands with the write it describes."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown audit action: {action}")

    event = AuditEvent(
        actor_user_id=actor.id if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        event_metadata=metadata,
    )
    db.add(event)
    logger.debug("audit %s %s=%s actor=%s", action, entity_type, entity_id, event.actor_user_id)
    return event
