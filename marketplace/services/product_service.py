# marketplace/services/product_service.py
from math import ceil
from uuid import UUID

import pydantic
from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.domain.enums import ProductStatus
from marketplace.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from marketplace.domain.schemas import ProductIn, ProductOut, ProductPage, ProductUpdateIn
from marketplace.domain.ids import parse_product_id
from marketplace.repos.product_repo import ProductRepo
from marketplace.services.image_client import ImageClient, ImageUpload
from marketplace.utils.logging import get_logger
from marketplace.utils.settings import DEFAULT_PRODUCT_IMAGE

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def _validated(model, data: dict):
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "body"
        raise ValidationError(f"{field}: {first['msg']}") from e


def _strip(data: dict) -> dict:
    return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


class ProductService:
    """Catalog: public browsing, seller listings, direct purchase."""

    def __init__(self, db: Session, images: ImageClient | None = None):
        self.repo = ProductRepo(db)
        self.images = images or ImageClient()

    # =====================================================
    # QUERY
    # =====================================================
    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> ProductPage:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be at least 1")
        limit = min(limit, MAX_PAGE_SIZE)

        if category == "all":
            category = None
        search = (search or "").strip() or None

        products, total = self.repo.search(category, search, (page - 1) * limit, limit)
        return ProductPage(
            products=[ProductOut.model_validate(p) for p in products],
            total_pages=ceil(total / limit),
            current_page=page,
            total=total,
        )

    def get_product(self, product_id) -> ProductOut:
        product = self.repo.get(parse_product_id(product_id), expand=True)
        if not product:
            raise NotFoundError("Product not found")
        return ProductOut.model_validate(product)

    def list_seller_products(self, seller_id: UUID) -> list[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.list_by_seller(seller_id)]

    def list_purchases(self, buyer_id: UUID) -> list[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.list_by_buyer(buyer_id)]

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_product(self, seller_id: UUID, fields: dict, uploads: list[ImageUpload] | None = None) -> ProductOut:
        data = _validated(ProductIn, _strip(fields))

        # upload only once the fields are known to be good
        images = self.images.upload_many(uploads or [])

        product = self.repo.add(
            ProductModel(
                title=data.title,
                description=data.description,
                category=data.category.value,
                price=data.price,
                condition=data.condition.value,
                location=data.location,
                image=images[0]["url"] if images else DEFAULT_PRODUCT_IMAGE,
                images=images,
                seller_id=seller_id,
                status=ProductStatus.AVAILABLE.value,
            )
        )
        self.repo.commit()
        logger.info(f"Seller {seller_id} listed product {product.id} with {len(images)} image(s)")

        return ProductOut.model_validate(product)

    def update_product(
        self,
        user_id: UUID,
        product_id,
        fields: dict,
        uploads: list[ImageUpload] | None = None,
    ) -> ProductOut:
        product = self._owned(user_id, product_id, action="update")
        if product.status == ProductStatus.SOLD.value:
            raise ConflictError("Sold products cannot be edited")

        changes = _validated(ProductUpdateIn, _strip(fields))

        new_images = self.images.upload_many(uploads) if uploads else None

        # falsy values keep what is stored
        product.title = changes.title or product.title
        product.description = changes.description or product.description
        product.category = changes.category.value if changes.category else product.category
        product.price = changes.price or product.price
        product.condition = changes.condition.value if changes.condition else product.condition
        product.location = changes.location or product.location

        if new_images is not None:
            old_ids = [img["public_id"] for img in product.images or []]
            product.images = new_images
            product.image = new_images[0]["url"] if new_images else product.image
            self.images.delete_many(old_ids)

        self.repo.commit()
        logger.info(f"Product {product.id} updated by {user_id}")

        return ProductOut.model_validate(product)

    def delete_product(self, user_id: UUID, product_id) -> None:
        product = self._owned(user_id, product_id, action="delete")

        self.images.delete_many([img["public_id"] for img in product.images or []])

        self.repo.delete(product)
        self.repo.commit()
        logger.info(f"Product {product.id} deleted by {user_id}")

    def purchase_product(self, buyer_id: UUID, product_id) -> ProductOut:
        """Direct single-item purchase, bypassing the cart."""
        pid = parse_product_id(product_id)
        product = self.repo.get(pid)
        if not product:
            raise NotFoundError("Product not found")

        if product.status != ProductStatus.AVAILABLE.value:
            raise ConflictError("Product is not available")

        if product.seller_id == buyer_id:
            raise ConflictError("Cannot purchase your own product")

        if not self.repo.mark_sold_if_available(pid, buyer_id):
            self.repo.rollback()
            raise ConflictError("Product is not available")

        self.repo.commit()
        logger.info(f"Product {pid} purchased directly by {buyer_id}")

        return ProductOut.model_validate(self.repo.get(pid, expand=True))

    def _owned(self, user_id: UUID, product_id, action: str) -> ProductModel:
        product = self.repo.get(parse_product_id(product_id))
        if not product:
            raise NotFoundError("Product not found")
        if product.seller_id != user_id:
            raise ForbiddenError(f"Not authorized to {action} this product")
        return product
