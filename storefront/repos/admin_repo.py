# storefront/repos/admin_repo.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import DuplicateUsernameError
from storefront.models.admin import Admin


class AdminRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> Admin | None:
        return self.db.query(Admin).filter(Admin.username == username).first()

    def create(self, username: str, password_hash: str) -> Admin:
        """Создаёт администратора; уникальный индекс по username решает гонку двух регистраций."""
        if self.find_by_username(username) is not None:
            raise DuplicateUsernameError("Username already exists")
        admin = Admin(username=username, password_hash=password_hash)
        self.db.add(admin)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUsernameError("Username already exists")
        self.db.refresh(admin)
        return admin
