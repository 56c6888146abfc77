# storefront/api/deps.py
"""
Request-scoped dependencies: the current user from the session cookie, the
cart owner key, and the optional checkout lock.
"""
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import AuthenticationError
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import session_owner, user_owner
from storefront.services.lock_service import LockService
from storefront.utils.security import new_session_token
from storefront.utils.settings import CHECKOUT_LOCKS_ENABLED

SESSION_USER_KEY = "user_id"
SESSION_CART_KEY = "cart_token"


def get_current_user(request: Request, db: Session = Depends(get_db)) -> UserModel | None:
    """Logged-in user or None. A stale session (deleted user) counts as anonymous."""
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    return UserRepo(db).get_user(int(user_id))


def require_user(user: UserModel | None = Depends(get_current_user)) -> UserModel:
    if user is None:
        raise AuthenticationError()
    return user


def require_admin(user: UserModel = Depends(require_user)) -> UserModel:
    if not user.is_admin:
        raise PermissionError("Admin access required")
    return user


def get_owner(request: Request, user: UserModel | None = Depends(get_current_user)) -> str:
    """
    Owner key of the cart and favorites: the user when logged in, otherwise
    an anonymous token kept in the session cookie.
    """
    if user is not None:
        return user_owner(user.id)

    token = request.session.get(SESSION_CART_KEY)
    if not token:
        token = new_session_token()
        request.session[SESSION_CART_KEY] = token
    return session_owner(token)


@lru_cache
def _lock_service() -> LockService:
    return LockService()


def get_lock_service() -> LockService | None:
    return _lock_service() if CHECKOUT_LOCKS_ENABLED else None
