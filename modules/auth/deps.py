"""
Auth Module - Dependencies
===========================
FastAPI dependencies that attach the verified principal to a request.
These are injected into route handlers via Depends().

The token is issued by the account service; the storefront trusts its
`sub` (user id) once the signature checks out and the user is active.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import AuthenticationError, AuthorizationError
from common.helpers import safe_int
from common.security import bearer_token, decode_token
from modules.user.models import User


def get_current_active_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Identify the current user from the Authorization header.
    Returns User object or None.
    """
    token = bearer_token(authorization)
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    user_id = safe_int(payload.get("sub"))
    if user_id is None:
        return None

    return db.query(User).filter(User.id == user_id, User.is_active == True).first()  # noqa: E712


def require_login(user=Depends(get_current_active_user)) -> User:
    """Require any authenticated active user. Raises 401 if not logged in."""
    if not user:
        raise AuthenticationError("Access token required")
    return user


def require_admin(user=Depends(require_login)) -> User:
    """Only allow admin users. Raises 403 otherwise."""
    if not user.is_admin:
        raise AuthorizationError()
    return user
