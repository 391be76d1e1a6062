# marketplace/api/routers/products.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from marketplace.api.auth import get_current_user_id
from marketplace.data.database import get_db
from marketplace.domain.schemas import MessageOut, ProductOut, ProductPage, PurchaseIn, PurchaseOut
from marketplace.services.image_client import ImageClient, ImageUpload
from marketplace.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_image_client() -> ImageClient:
    return ImageClient()


def get_service(
    db: Session = Depends(get_db),
    images: ImageClient = Depends(get_image_client),
) -> ProductService:
    return ProductService(db, images)


def _uploads(image: Optional[UploadFile], images: Optional[List[UploadFile]]) -> list[ImageUpload]:
    # several `images` win over a single `image`
    files = [f for f in (images or []) if f.filename] or ([image] if image and image.filename else [])
    return [
        ImageUpload(
            filename=f.filename,
            content=f.file.read(),
            content_type=f.content_type or "application/octet-stream",
        )
        for f in files
    ]


def _fields(**fields) -> dict:
    return {k: v for k, v in fields.items() if v is not None}


@router.get("", response_model=ProductPage)
def list_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(10),
    svc: ProductService = Depends(get_service),
):
    return svc.list_products(category=category, search=search, page=page, limit=limit)


@router.get("/user/my-products", response_model=List[ProductOut])
def my_products(
    user_id: UUID = Depends(get_current_user_id),
    svc: ProductService = Depends(get_service),
):
    return svc.list_seller_products(user_id)


@router.get("/user/purchases", response_model=List[ProductOut])
def my_purchases(
    user_id: UUID = Depends(get_current_user_id),
    svc: ProductService = Depends(get_service),
):
    return svc.list_purchases(user_id)


@router.post("/purchase", response_model=PurchaseOut)
def purchase_product(
    payload: PurchaseIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: ProductService = Depends(get_service),
):
    product = svc.purchase_product(user_id, payload.product_id)
    return PurchaseOut(message="Product purchased successfully", product=product)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, svc: ProductService = Depends(get_service)):
    return svc.get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    condition: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    images: Optional[List[UploadFile]] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    svc: ProductService = Depends(get_service),
):
    fields = _fields(
        title=title,
        description=description,
        category=category,
        price=price,
        condition=condition,
        location=location,
    )
    return svc.create_product(user_id, fields, _uploads(image, images))


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    condition: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    images: Optional[List[UploadFile]] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    svc: ProductService = Depends(get_service),
):
    # empty strings mean "leave unchanged"
    fields = _fields(
        title=title or None,
        description=description or None,
        category=category or None,
        price=price or None,
        condition=condition or None,
        location=location or None,
    )
    return svc.update_product(user_id, product_id, fields, _uploads(image, images))


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: ProductService = Depends(get_service),
):
    svc.delete_product(user_id, product_id)
    return MessageOut(message="Product deleted successfully")
