# storefront/api/products.py
# Каталог товаров: список открыт всем, создание и удаление только для администратора.
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.security import TokenClaims, get_current_admin
from storefront.db.session import get_db
from storefront.repos.product_repo import ProductRepo
from storefront.schemas.common import MessageOut
from storefront.schemas.product import ProductIn, ProductOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return ProductRepo(db).list_products()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProductOut)
def create_product(
    payload: ProductIn,
    db: Session = Depends(get_db),
    admin: TokenClaims = Depends(get_current_admin),
):
    product = ProductRepo(db).create_product(
        name=payload.name,
        price=payload.price,
        image_url=payload.image_url,
    )
    logger.info(f"Product {product.id} '{product.name}' created by {admin.username}")
    return product


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    admin: TokenClaims = Depends(get_current_admin),
):
    """Удаляет товар вместе с элементами корзин; отсутствующий товар — не ошибка."""
    deleted, removed_items = ProductRepo(db).delete_with_cart_items(product_id)
    if deleted:
        logger.info(
            f"Product {product_id} deleted by {admin.username}, "
            f"removed {removed_items} cart item(s)"
        )
    return {"message": "Product deleted"}
