# marketplace/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from marketplace.domain.enums import Category, Condition

# money stays Decimal internally and goes out as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; reads ORM objects directly."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageOut(CamelModel):
    message: str


# ---------- users ----------
class UserCreate(CamelModel):
    id: Optional[UUID] = None
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)


class UserRead(CamelModel):
    id: UUID
    name: str
    email: str


# ---------- products ----------
class ImageOut(CamelModel):
    url: str
    public_id: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None


class ProductIn(CamelModel):
    """Fields a seller submits when listing an item."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: Category
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    condition: Condition
    location: str = Field(..., min_length=1, max_length=200)


class ProductUpdateIn(CamelModel):
    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[Category] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    condition: Optional[Condition] = None
    location: Optional[str] = Field(None, max_length=200)


class ProductSummary(CamelModel):
    """Live product data joined onto cart and order lines."""

    id: UUID
    title: str
    price: Money
    image: str
    category: str
    condition: str
    location: str
    seller_id: UUID
    status: str


class ProductOut(CamelModel):
    id: UUID
    title: str
    description: str
    category: str
    price: Money
    image: str
    images: List[ImageOut] = Field(default_factory=list)
    seller_id: UUID
    seller: Optional[UserRead] = None
    buyer_id: Optional[UUID] = None
    status: str
    condition: str
    location: str
    created_at: datetime
    updated_at: datetime


class ProductPage(CamelModel):
    products: List[ProductOut]
    total_pages: int
    current_page: int
    total: int


class PurchaseIn(CamelModel):
    product_id: str


class PurchaseOut(CamelModel):
    message: str
    product: ProductOut


# ---------- cart ----------
class AddItemIn(CamelModel):
    product_id: str
    quantity: int = 1


class UpdateItemIn(CamelModel):
    quantity: int


class CartItemOut(CamelModel):
    id: UUID
    product_id: UUID
    quantity: int
    added_at: datetime
    product: Optional[ProductSummary] = None


class CartOut(CamelModel):
    id: UUID
    user_id: UUID
    items: List[CartItemOut]
    total_amount: Money
    item_count: int
    created_at: datetime
    updated_at: datetime


# ---------- orders ----------
class ShippingAddress(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class CheckoutIn(CamelModel):
    shipping_address: Optional[ShippingAddress] = None


class OrderLineOut(CamelModel):
    id: UUID
    product_id: UUID
    quantity: int
    price: Money
    title: str
    image: str
    product: Optional[ProductSummary] = None


class OrderOut(CamelModel):
    id: UUID
    order_number: str
    user_id: UUID
    items: List[OrderLineOut]
    total_amount: Money
    status: str
    shipping_address: ShippingAddress
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CheckoutOut(CamelModel):
    message: str
    order: OrderOut
    order_number: str
    tracking_number: str
    estimated_delivery: datetime


class OrderUpdateIn(CamelModel):
    status: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    notes: Optional[str] = None
