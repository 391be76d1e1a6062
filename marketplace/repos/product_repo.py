# marketplace/repos/product_repo.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import select, func, update, or_
from sqlalchemy.orm import Session, selectinload

from marketplace.data.models.product import ProductModel
from marketplace.domain.enums import ProductStatus
from marketplace.domain.totals import PriceLookup


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: UUID, expand: bool = False) -> ProductModel | None:
        if not expand:
            return self.db.get(ProductModel, product_id)
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .options(selectinload(ProductModel.seller), selectinload(ProductModel.buyer))
        ).scalar_one_or_none()

    def get_many(self, product_ids: Iterable[UUID]) -> dict[UUID, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def price_lookup(self, product_ids: Iterable[UUID]) -> PriceLookup:
        """One query for all prices; the returned callable answers from that snapshot."""
        prices: dict[UUID, Decimal] = {
            pid: Decimal(p.price) for pid, p in self.get_many(product_ids).items()
        }
        return prices.get

    def search(
        self,
        category: str | None,
        text: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[ProductModel], int]:
        conditions = [ProductModel.status == ProductStatus.AVAILABLE.value]
        if category:
            conditions.append(ProductModel.category == category)
        if text:
            pattern = _like_pattern(text)
            conditions.append(
                or_(
                    ProductModel.title.ilike(pattern, escape="\\"),
                    ProductModel.description.ilike(pattern, escape="\\"),
                )
            )

        total = self.db.execute(
            select(func.count()).select_from(ProductModel).where(*conditions)
        ).scalar_one()
        rows = self.db.execute(
            select(ProductModel)
            .where(*conditions)
            .options(selectinload(ProductModel.seller))
            .order_by(ProductModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        return list(rows), total

    def list_by_seller(self, seller_id: UUID) -> list[ProductModel]:
        return list(self.db.execute(
            select(ProductModel)
            .where(ProductModel.seller_id == seller_id)
            .options(selectinload(ProductModel.seller))
            .order_by(ProductModel.created_at.desc())
        ).scalars().all())

    def list_by_buyer(self, buyer_id: UUID) -> list[ProductModel]:
        return list(self.db.execute(
            select(ProductModel)
            .where(ProductModel.buyer_id == buyer_id)
            .options(selectinload(ProductModel.seller))
            .order_by(ProductModel.created_at.desc())
        ).scalars().all())

    def add(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.flush()

    def mark_sold_if_available(self, product_id: UUID, buyer_id: UUID) -> bool:
        """
        Conditional write: UPDATE ... SET status='sold' WHERE id=? AND status='available'.
        False means someone else got there first (or the listing is gone).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.status == ProductStatus.AVAILABLE.value,
            )
            .values(
                status=ProductStatus.SOLD.value,
                buyer_id=buyer_id,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
