# storefront/api/cart.py
# Корзина гостя. userId приходит от клиента и сервером не выдаётся.
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.errors import (
    CartQuantityLimitError,
    CartUpdateConflictError,
    ProductNotFoundError,
)
from storefront.db.session import get_db
from storefront.repos.cart_repo import CartRepo
from storefront.schemas.cart import CartItemIn, CartItemOut
from storefront.schemas.common import MessageOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=list[CartItemOut])
def get_cart(user_id: str, db: Session = Depends(get_db)):
    return CartRepo(db).find_cart_with_product(user_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CartItemOut)
def add_to_cart(payload: CartItemIn, db: Session = Depends(get_db)):
    try:
        item = CartRepo(db).add_or_increment(payload.user_id, payload.product_id, payload.quantity)
    except (ProductNotFoundError, CartQuantityLimitError, CartUpdateConflictError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    if item is None:
        # товар удалили сразу после вставки, каскад уже убрал строку
        raise HTTPException(status_code=400, detail="Product not found")
    logger.info(
        f"Cart {payload.user_id}: product {payload.product_id} +{payload.quantity} "
        f"(now {item.quantity})"
    )
    return item


@router.delete("/{user_id}/{item_id}", response_model=MessageOut)
def remove_cart_item(user_id: str, item_id: str, db: Session = Depends(get_db)):
    """Удаляет элемент корзины, только если он принадлежит user_id."""
    if CartRepo(db).delete_item(user_id, item_id):
        logger.info(f"Cart {user_id}: item {item_id} removed")
    return {"message": "Cart item removed"}
