"""
User administration and profile updates
"""
import logging
import math
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.database import utcnow
from app.exceptions import BadRequestError, NotFoundError
from app.models import User
from app.schemas.user import AdminUserUpdate, ProfileUpdate

logger = logging.getLogger(__name__)

RECENT_REGISTRATION_DAYS = 30


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "is_active": user.is_active,
        "created_at": user.created_at,
    }


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def _apply(self, user: User, changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = {field: value for field, value in changes.items() if value is not None}
        if not changes:
            raise BadRequestError("No fields to update")

        for field, value in changes.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User updated: {user.id} ({', '.join(changes)})")
        return user_to_dict(user)

    def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None
    ) -> Dict[str, Any]:
        query = self.db.query(User)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern)
            ))

        if role:
            query = query.filter(User.role == role)

        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset(
            (page - 1) * limit
        ).limit(limit).all()

        return {
            "items": [user_to_dict(user) for user in users],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def get_user(self, user_id: int) -> Dict[str, Any]:
        return user_to_dict(self._get(user_id))

    def get_statistics(self) -> Dict[str, Any]:
        """
        Account totals for admins

        Returns:
        - All accounts and active accounts
        - Accounts per role
        - Registrations over the last 30 days
        """
        total_users = self.db.query(func.count(User.id)).scalar() or 0
        active_users = self.db.query(func.count(User.id)).filter(
            User.is_active.is_(True)
        ).scalar() or 0

        role_rows = self.db.query(
            User.role, func.count(User.id).label("count")
        ).group_by(User.role).order_by(User.role).all()

        recent_registrations = self.db.query(func.count(User.id)).filter(
            User.created_at >= utcnow() - timedelta(days=RECENT_REGISTRATION_DAYS)
        ).scalar() or 0

        return {
            "total_users": total_users,
            "active_users": active_users,
            "role_stats": [{"role": row.role, "count": row.count} for row in role_rows],
            "recent_registrations": recent_registrations,
        }

    def update_profile(self, user_id: int, data: ProfileUpdate) -> Dict[str, Any]:
        return self._apply(self._get(user_id), data.model_dump(exclude_unset=True))

    def update_user(self, admin_id: int, user_id: int, data: AdminUserUpdate) -> Dict[str, Any]:
        changes = data.model_dump(exclude_unset=True)
        if user_id == admin_id and (changes.get("is_active") is False or changes.get("role") == "user"):
            raise BadRequestError("Administrators cannot demote or deactivate themselves")
        return self._apply(self._get(user_id), changes)

    def deactivate_user(self, admin_id: int, user_id: int) -> None:
        """Accounts are deactivated rather than deleted so history survives"""
        if user_id == admin_id:
            raise BadRequestError("Cannot deactivate your own account")

        user = self._get(user_id)
        user.is_active = False
        self.db.commit()

        logger.info(f"User deactivated: {user_id}")
