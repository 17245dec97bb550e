# storefront/repos/cart_repo.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from storefront.core.errors import (
    CartQuantityLimitError,
    CartUpdateConflictError,
    ProductNotFoundError,
)
from storefront.models.cart import CartItem, MAX_CART_QUANTITY
from storefront.repos.product_repo import ProductRepo

logger = logging.getLogger(__name__)


class CartRepo:
    # Сколько раз повторяем UPDATE после проигранной гонки на INSERT
    UPSERT_ATTEMPTS = 3

    def __init__(self, db: Session):
        self.db = db

    def find_cart_with_product(self, user_id: str) -> list[CartItem]:
        """
        Элементы корзины пользователя вместе с товаром (один JOIN).
        Элементы, чей товар уже удалён, отбрасываются внутренним соединением.
        """
        return (
            self.db.query(CartItem)
            .join(CartItem.product)
            .options(contains_eager(CartItem.product))
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.created_at, CartItem.id)
            .all()
        )

    def get_item_with_product(self, user_id: str, product_id: str) -> CartItem | None:
        return (
            self.db.query(CartItem)
            .join(CartItem.product)
            .options(contains_eager(CartItem.product))
            .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .first()
        )

    def add_or_increment(self, user_id: str, product_id: str, quantity: int) -> CartItem:
        """
        Атомарный upsert: увеличивает quantity существующей строки (user, product)
        одним UPDATE, иначе вставляет новую. Если параллельный запрос успел
        вставить строку первым, уникальное ограничение даёт IntegrityError —
        откатываемся и повторяем UPDATE.

        UPDATE срабатывает только пока итог не превышает MAX_CART_QUANTITY;
        строка, которую нельзя увеличить, даёт CartQuantityLimitError.
        """
        if quantity > MAX_CART_QUANTITY:
            raise CartQuantityLimitError(f"Cart quantity cannot exceed {MAX_CART_QUANTITY}")
        products = ProductRepo(self.db)
        if products.get_product(product_id) is None:
            raise ProductNotFoundError("Product not found")
        # Запись начинается в новой транзакции, без удерживаемого чтения
        self.db.rollback()

        for _ in range(self.UPSERT_ATTEMPTS):
            updated = (
                self.db.query(CartItem)
                .filter(
                    CartItem.user_id == user_id,
                    CartItem.product_id == product_id,
                    CartItem.quantity <= MAX_CART_QUANTITY - quantity,
                )
                .update(
                    {CartItem.quantity: CartItem.quantity + quantity},
                    synchronize_session=False,
                )
            )
            if updated == 0:
                if self._has_item(user_id, product_id):
                    self.db.rollback()
                    logger.info(
                        f"Cart {user_id}: product {product_id} +{quantity} rejected, "
                        f"limit {MAX_CART_QUANTITY}"
                    )
                    raise CartQuantityLimitError(
                        f"Cart quantity cannot exceed {MAX_CART_QUANTITY}"
                    )
                self.db.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                # Товар мог быть удалён между проверкой и вставкой
                if products.get_product(product_id) is None:
                    raise ProductNotFoundError("Product not found")
                self.db.rollback()
                logger.info(f"Cart upsert race for user {user_id}, product {product_id}; retrying")
                continue
            break
        else:
            logger.warning(
                f"Cart upsert for user {user_id}, product {product_id} "
                f"gave up after {self.UPSERT_ATTEMPTS} attempts"
            )
            raise CartUpdateConflictError("Could not add item to cart, please retry")

        self.db.expire_all()
        return self.get_item_with_product(user_id, product_id)

    def _has_item(self, user_id: str, product_id: str) -> bool:
        return (
            self.db.query(CartItem.id)
            .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .first()
            is not None
        )

    def delete_item(self, user_id: str, item_id: str) -> bool:
        """Удаляет элемент, только если он принадлежит user_id."""
        deleted = (
            self.db.query(CartItem)
            .filter(CartItem.id == item_id, CartItem.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0
