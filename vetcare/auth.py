"""
Cookie-based identity resolution.

Login and registration live outside this service; after login the frontend
holds `user_id` and `user_role` cookies. The role cookie is only a hint for
the UI: authorization always uses the role stored on the user row.
"""

import logging
from typing import Optional

from fastapi import Cookie, Depends, HTTPException
from sqlalchemy.orm import Session

from .database import get_db
from .models import User, UserRole

logger = logging.getLogger(__name__)

STAFF_ROLES = (UserRole.ADMIN, UserRole.EMPLOYEE)


def get_current_user(
    user_id: Optional[str] = Cookie(default=None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the logged-in user from the user_id cookie"""
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        uid = int(user_id)
    except ValueError:
        logger.warning(f"⚠️ Malformed user_id cookie: {user_id!r}")
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = db.query(User).filter(User.id == uid).first()
    if not user:
        logger.warning(f"⚠️ user_id cookie references unknown user {uid}")
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_roles(*roles: UserRole):
    """Build a dependency that only lets the given roles through"""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                f"⚠️ User {current_user.id} ({current_user.role.value}) denied; requires {[r.value for r in roles]}"
            )
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return current_user

    return dependency


get_staff_user = require_roles(*STAFF_ROLES)
get_admin_user = require_roles(UserRole.ADMIN)
