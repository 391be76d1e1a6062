# marketplace/data/unit_of_work.py
from sqlalchemy.orm import Session

from marketplace.repos.cart_repo import CartRepo
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.product_repo import ProductRepo


class UnitOfWork:
    """
    One transaction spanning the product, cart and order repositories.

    Leaving the block normally commits; leaving it with an exception rolls
    everything back, so checkout either fully happens or not at all.
    """

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepo(db)
        self.carts = CartRepo(db)
        self.orders = OrderRepo(db)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            try:
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        else:
            self.db.rollback()
        return False
