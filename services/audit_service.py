"""
Audit trail for admin actions on user accounts

Membership changes and account deletions are recorded with the acting
admin, the request id and the client address. Writing the trail never
fails the request that triggered it.
"""
import logging
from typing import Any, Dict, Literal, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import AuditLog, User

logger = logging.getLogger(__name__)

MEMBERSHIP_UPDATE = "user.membership.update"
USER_DELETE = "user.delete"

AuditAction = Literal["user.membership.update", "user.delete"]
ACTIONS = frozenset({MEMBERSHIP_UPDATE, USER_DELETE})


def record_user_action(
    db: Session,
    action: AuditAction,
    target_user_id: int,
    actor: User,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> Optional[AuditLog]:
    """Store one audit entry about ``target_user_id``. Returns None when the entry could not be saved."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown audit action: {action}")

    # An admin deleting their own account leaves no actor row to reference
    actor_id = None if action == USER_DELETE and actor.id == target_user_id else actor.id

    entry = AuditLog(
        action=action,
        entity_type="user",
        entity_id=str(target_user_id),
        metadata_json=details or {},
        actor_user_id=actor_id,
        request_id=getattr(request.state, "request_id", None) if request is not None else None,
        ip=request.client.host if request is not None and request.client else None,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Audit entry {action} for user {target_user_id} not saved: {e}")
        return None
    return entry

