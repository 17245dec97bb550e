# storefront/models/product.py
# Модель товара каталога.
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Float, DateTime

from storefront.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    image_url = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
