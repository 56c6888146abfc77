# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from storefront.api.deps import SESSION_CART_KEY, SESSION_USER_KEY, require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import LoginIn, UserCreate, UserRead
from storefront.services.cart_service import CartService, session_owner, user_owner
from storefront.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).register(payload)


@router.post("/login", response_model=UserRead)
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)):
    """
    Starts a session. An anonymous cart collected before login is handed over
    when the user's own cart is empty.
    """
    user = UserService(db).authenticate(payload.email, payload.password)

    token = request.session.pop(SESSION_CART_KEY, None)
    if token:
        CartService(db).adopt(session_owner(token), user_owner(user.id))

    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post("/logout", status_code=204)
def logout(request: Request):
    request.session.clear()


@router.get("/me", response_model=UserRead)
def me(user: UserModel = Depends(require_user)):
    return user
