from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.id == user_id, UserModel.not_deleted())
        ).scalar_one_or_none()

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email.lower(), UserModel.not_deleted())
        ).scalar_one_or_none()

    def email_taken(self, email: str) -> bool:
        #deleted accounts keep their address reserved
        return self.db.execute(
            select(UserModel.id).where(UserModel.email == email.lower())
        ).first() is not None

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
