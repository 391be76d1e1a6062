# marketplace/domain/ids.py
from uuid import UUID

from marketplace.domain.errors import ValidationError


def parse_product_id(value) -> UUID:
    if isinstance(value, UUID):
        return value
    if not value:
        raise ValidationError("Product ID is required")
    try:
        return UUID(str(value).strip())
    except ValueError:
        raise ValidationError("Invalid product ID format")
