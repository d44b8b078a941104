"""
User administration endpoints
RBAC-protected: listing, membership changes and deletion are admin only.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from api.auth import get_current_user
from database import get_db
from models import User
from schemas import MembershipOut, MembershipUpdate, PreferencesOut, UserOut
from services.audit_service import MEMBERSHIP_UPDATE, USER_DELETE, record_user_action
from services.rbac_service import ROLE_ADMIN, ensure_self_or_admin, require_role

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/", summary="List users (admin)")
async def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_role([ROLE_ADMIN])),
):
    users = db.query(User).order_by(User.id).all()
    return {
        "success": True,
        "count": len(users),
        "data": [UserOut.model_validate(u) for u in users],
    }


@router.get("/{user_id}", summary="Get user by ID")
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _get_user_or_404(db, user_id)
    ensure_self_or_admin(current_user, user_id, "user profile")
    return {"success": True, "data": UserOut.model_validate(user)}


@router.put("/{user_id}/membership", summary="Update membership (admin)")
async def update_membership(
    user_id: int,
    update: MembershipUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_role([ROLE_ADMIN])),
):
    """
    Update a user's membership.

    Omitted fields keep their current value; ``is_active`` is only changed
    when it is present in the body.
    """
    user = _get_user_or_404(db, user_id)
    before = MembershipOut.model_validate(user.membership).model_dump(mode="json")

    user.membership_type = update.type or user.membership_type
    user.membership_start_date = update.start_date or user.membership_start_date
    user.membership_end_date = update.end_date or user.membership_end_date
    if update.is_active is not None:
        user.membership_is_active = update.is_active

    db.commit()
    db.refresh(user)

    membership = MembershipOut.model_validate(user.membership)
    record_user_action(
        db,
        MEMBERSHIP_UPDATE,
        user.id,
        admin,
        {"before": before, "after": membership.model_dump(mode="json")},
        request,
    )
    logger.info(f"Membership of user {user.id} updated by {admin.id}")

    return {
        "success": True,
        "message": "Membership updated successfully",
        "data": {
            "user": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "membership": membership,
            }
        },
    }


@router.get("/{user_id}/stats", summary="Get user statistics")
async def get_user_stats(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _get_user_or_404(db, user_id)
    ensure_self_or_admin(current_user, user_id, "user stats")

    return {
        "success": True,
        "data": {
            "profile": {
                "age": user.age,
                "gender": user.gender,
                "height": user.height,
                "weight": user.weight,
                "fitness_level": user.fitness_level,
                "goals": user.goals or [],
                "bmi": user.get_bmi(),
                "bmi_category": user.get_bmi_category(),
            },
            "membership": MembershipOut.model_validate(user.membership),
            "preferences": PreferencesOut.model_validate(user.preferences),
            "last_login": user.last_login,
            "member_since": user.created_at,
        },
    }


@router.delete("/{user_id}", summary="Delete user (admin)")
async def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_role([ROLE_ADMIN])),
):
    user = _get_user_or_404(db, user_id)
    email = user.email
    db.delete(user)
    db.commit()

    record_user_action(db, USER_DELETE, user_id, admin, {"email": email}, request)
    logger.info(f"User {user_id} deleted by {admin.id}")
    return {"success": True, "message": "User deleted successfully"}
