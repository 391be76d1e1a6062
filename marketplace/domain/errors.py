# marketplace/domain/errors.py


class MarketplaceError(Exception):
    """Base for errors a request can be answered with."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError, ValueError):
    status_code = 400
    code = "validation_error"


class NotFoundError(MarketplaceError):
    status_code = 404
    code = "not_found"


class ConflictError(MarketplaceError):
    status_code = 400
    code = "conflict"


class UnavailableProductError(ConflictError):
    code = "product_unavailable"

    def __init__(self, product_id, title: str | None = None):
        label = f'"{title}"' if title else str(product_id)
        super().__init__(f"Product {label} is no longer available")
        self.product_id = product_id


class ForbiddenError(MarketplaceError, PermissionError):
    status_code = 403
    code = "forbidden"


class EmptyCartError(MarketplaceError):
    status_code = 400
    code = "empty_cart"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class UpstreamError(MarketplaceError):
    status_code = 400
    code = "upstream_error"


class DuplicateOrderNumberError(ConflictError):
    code = "duplicate_order_number"

    def __init__(self, order_number: str):
        super().__init__(f"Order number {order_number} already exists")
        self.order_number = order_number
