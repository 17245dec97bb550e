# storefront/repos/product_repo.py
from sqlalchemy.orm import Session

from storefront.models.cart import CartItem
from storefront.models.product import Product


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> list[Product]:
        return self.db.query(Product).order_by(Product.created_at, Product.id).all()

    def get_product(self, product_id: str) -> Product | None:
        return self.db.get(Product, product_id)

    def create_product(self, name: str, price: float, image_url: str) -> Product:
        product = Product(name=name, price=float(price), image_url=image_url)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_with_cart_items(self, product_id: str) -> tuple[bool, int]:
        """
        Удаляет товар и все ссылающиеся на него элементы корзин одной транзакцией.
        Отсутствующий товар — не ошибка.

        Returns:
            (был ли удалён товар, сколько элементов корзин удалено)
        """
        try:
            removed_items = (
                self.db.query(CartItem)
                .filter(CartItem.product_id == product_id)
                .delete(synchronize_session=False)
            )
            removed_products = (
                self.db.query(Product)
                .filter(Product.id == product_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return removed_products > 0, removed_items
