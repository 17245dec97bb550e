# storefront/models/cart.py
# Модель CartItem — элементы корзины гостя (user_id генерирует клиент).
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.db.base import Base

# Верхняя граница quantity одной строки корзины
MAX_CART_QUANTITY = 10_000


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship("Product")

    # Одна строка на пару (user, product); увеличение количества см. CartRepo.add_or_increment
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint(
            f"quantity BETWEEN 1 AND {MAX_CART_QUANTITY}", name="ck_cart_quantity_range"
        ),
    )
