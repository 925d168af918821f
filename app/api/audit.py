from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.audit_event import AuditEvent
from app.models.user import User
from app.schemas.responses import ApiResponse
from app.services.forms import parse_id

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=ApiResponse[list[dict]])
def list_audit_events(
    entity_type: str | None = Query(default=None),
    entity_id: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # only the caller's own activity
    q = db.query(AuditEvent).filter(AuditEvent.actor_user_id == current_user.id)

    if entity_type:
        q = q.filter(AuditEvent.entity_type == entity_type)
    if entity_id:
        eid = parse_id(entity_id)
        if eid is None:
            return ApiResponse(message="Audit events retrieved successfully", data=[])
        q = q.filter(AuditEvent.entity_id == eid)

    rows = q.order_by(AuditEvent.created_at.desc()).limit(limit).all()

    return ApiResponse(
        message="Audit events retrieved successfully",
        data=[
            {
                "id": str(r.id),
                "actor_user_id": str(r.actor_user_id) if r.actor_user_id else None,
                "action": r.action,
                "entity_type": r.entity_type,
                "entity_id": str(r.entity_id),
                "metadata": r.event_metadata,
                "created_at": r.created_at,
            }
            for r in rows
        ],
    )
