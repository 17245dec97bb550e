# storefront/models/admin.py
# Модель администратора: username, password_hash.
import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime

from storefront.db.base import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
