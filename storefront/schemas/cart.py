# storefront/schemas/cart.py
from pydantic import Field

from storefront.models.cart import MAX_CART_QUANTITY
from storefront.schemas.common import CamelModel
from storefront.schemas.product import ProductOut


class CartItemIn(CamelModel):
    user_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=MAX_CART_QUANTITY)


class CartItemOut(CamelModel):
    """Элемент корзины вместе с данными товара."""

    id: str
    user_id: str
    product_id: str
    quantity: int
    product: ProductOut
