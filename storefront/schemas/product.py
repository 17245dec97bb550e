# storefront/schemas/product.py
from pydantic import Field

from storefront.schemas.common import CamelModel


class ProductIn(CamelModel):
    """Создание товара. price принимает число или числовую строку ("19.99")."""

    name: str = Field(..., min_length=1)
    price: float = Field(..., allow_inf_nan=False)
    image_url: str = Field(..., min_length=1)


class ProductOut(CamelModel):
    id: str
    name: str
    price: float = Field(..., allow_inf_nan=False)
    image_url: str
