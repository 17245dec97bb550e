# storefront/models/__init__.py
# Импорт всех моделей, чтобы SQLAlchemy зарегистрировал их в Base.metadata.

from storefront.models.admin import Admin
from storefront.models.product import Product
from storefront.models.cart import CartItem

__all__ = ["Admin", "Product", "CartItem"]
