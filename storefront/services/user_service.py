from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.exceptions import AuthenticationError, NotFoundError, ValidationError
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger
from storefront.utils.security import hash_password, verify_password

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: UserCreate) -> UserRead:
        email = payload.email.strip().lower()
        if self.repo.email_taken(email):
            raise ValidationError("Email is already registered", field="email")

        user = UserModel(
            email=email,
            name=payload.name.strip(),
            password_hash=hash_password(payload.password),
            role="USER",
        )
        created = self.repo.create_user(user)

        logger.info(f"Registered user {created.id}")
        return UserRead.model_validate(created)

    def authenticate(self, email: str, password: str) -> UserModel:
        user = self.repo.get_by_email(email.strip())
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid email or password")
        return user

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def ensure_admin(self, email: str, password: str, name: str = "Admin") -> UserModel:
        """Create the admin account if it does not exist yet."""
        user = self.repo.get_by_email(email)
        if user:
            return user

        admin = self.repo.create_user(
            UserModel(
                email=email.strip().lower(),
                name=name,
                password_hash=hash_password(password),
                role="ADMIN",
            )
        )
        logger.info(f"Created admin account {admin.id}")
        return admin
