"""Admin routes for catalog and order management."""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional
from data.database.connection import get_db
from data.database.order_schema import OrderListResponse, OrderResponse, StatusUpdate
from data.database.product_schema import (
    CategoryCreate, CategoryResponse, ImageUploadResponse, ProductCreate, ProductResponse,
    ProductUpdate, VariantImagesUpdate
)
from src.routes.dependencies import get_image_store, get_notifier, require_admin
from src.services import catalog, order_status, orders
from src.services.notifications import NotificationTrigger
from src.services.users import UserRecord

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ---------- Categories ----------

@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    description="Create a product category with optional initial subcategories"
)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    return catalog.create_category(db, data)


@router.get(
    "/categories",
    response_model=List[CategoryResponse],
    summary="Get all categories"
)
def get_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)


# ---------- Products ----------

@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product with its color variants; clothing categories need sizes per color"
)
def create_product(product: ProductCreate, db: Session = Depends(get_db)):
    """Create a new product."""
    return catalog.create_product(db, product)


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Partially update a product; only provided fields change"
)
def update_product(product_id: int, product_update: ProductUpdate, db: Session = Depends(get_db)):
    return catalog.update_product(db, product_id, product_update)


@router.put(
    "/products/{product_id}/images",
    response_model=ProductResponse,
    summary="Update variant images",
    description="Merge per-color images and sizes by colorId and recompute stock"
)
def update_variant_images(
    product_id: int,
    update: VariantImagesUpdate,
    db: Session = Depends(get_db),
    image_store=Depends(get_image_store)
):
    return catalog.set_variant_images(db, product_id, update, image_store=image_store)


@router.delete(
    "/products/{product_id}",
    summary="Delete a product",
    description="Delete a product and release its stored images"
)
def delete_product(product_id: int, db: Session = Depends(get_db), image_store=Depends(get_image_store)):
    catalog.delete_product(db, product_id, image_store=image_store)
    return {"success": True, "message": "Product Deleted Successfully"}


@router.post(
    "/products/images/upload",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a product image"
)
def upload_image(
    file: UploadFile = File(...),
    folder: str = Form("products"),
    image_store=Depends(get_image_store)
):
    return image_store.upload(file.file, folder, file.filename)


@router.delete(
    "/products/{product_id}/images",
    response_model=ProductResponse,
    summary="Delete one product image",
    description="Delete a general image, or a color image when color is given"
)
def delete_product_image(
    product_id: int,
    image_url: str,
    color: Optional[str] = None,
    public_id: Optional[str] = None,
    db: Session = Depends(get_db),
    image_store=Depends(get_image_store)
):
    return catalog.delete_product_image(
        db, product_id, image_url, color=color, public_id=public_id, image_store=image_store
    )


@router.delete(
    "/products/{product_id}/images/all",
    response_model=ProductResponse,
    summary="Delete all general images of a product"
)
def delete_all_product_images(
    product_id: int,
    db: Session = Depends(get_db),
    image_store=Depends(get_image_store)
):
    return catalog.delete_all_product_images(db, product_id, image_store=image_store)


# ---------- Orders ----------

@router.get(
    "/orders",
    response_model=OrderListResponse,
    summary="Get all orders"
)
def get_all_orders(db: Session = Depends(get_db)):
    all_orders = orders.list_all_orders(db)
    return OrderListResponse(
        total_orders=len(all_orders),
        orders=[orders.order_to_response(order) for order in all_orders]
    )


@router.put(
    "/orders/{order_id}/advance",
    response_model=OrderResponse,
    summary="Advance order status",
    description="Move an order to its next status: processing, shipped, delivered"
)
def advance_order(
    order_id: int,
    db: Session = Depends(get_db),
    notifier: NotificationTrigger = Depends(get_notifier)
):
    order = order_status.advance(db, order_id, notifier=notifier)
    return orders.order_to_response(order)


@router.put(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    summary="Set order status",
    description="Set any order status directly (admin override, no transition checks)"
)
def set_order_status(
    order_id: int,
    update: StatusUpdate,
    db: Session = Depends(get_db),
    notifier: NotificationTrigger = Depends(get_notifier),
    admin: UserRecord = Depends(require_admin)
):
    order = order_status.set_status(
        db, order_id, update.order_status, notifier=notifier, processed_by=admin.id
    )
    return orders.order_to_response(order)


@router.delete(
    "/orders/{order_id}",
    summary="Delete an order"
)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    orders.delete_order(db, order_id)
    return {"success": True, "message": "Order Deleted Successfully"}
