"""Variant catalog: products, their color/size variants, images and reviews."""
import copy
from typing import Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from data.database.connection import commit_or_rollback
from data.database.product_model import Category, Product, ProductColor, ProductSize, ProductReview
from data.database.product_schema import (
    CategoryCreate, ColorSpec, ProductCreate, ProductUpdate, SizeSpec, VariantImagesUpdate
)
from src.services.images import release_images
from src.utils.errors import (
    AlreadyReviewedError, ConflictError, DuplicateColorError, NotFoundError, ValidationError
)
from src.utils.pricing import discounted_price, is_clothing_category, total_size_stock


# ---------- Categories ----------

def create_category(db: Session, data: CategoryCreate) -> Category:
    name = data.category.strip()
    existing = db.query(Category).filter(Category.category == name).first()
    if existing:
        raise ConflictError(f"Category '{name}' already exists")

    category = Category(
        category=name,
        subcategories=[{"name": sub, "subSubCategories": []} for sub in data.subcategories if sub.strip()]
    )
    db.add(category)
    commit_or_rollback(db, "create category")
    db.refresh(category)
    return category


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.category).all()


def get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _register_subcategory(category: Category, subcategory: Optional[str], sub_subcategory: Optional[str]):
    """Add subcategory labels the category does not know yet."""
    if not subcategory:
        return
    subcategories = copy.deepcopy(category.subcategories or [])
    entry = next((s for s in subcategories if s.get("name") == subcategory), None)
    if entry is None:
        entry = {"name": subcategory, "subSubCategories": []}
        subcategories.append(entry)
    if sub_subcategory:
        known = [s if isinstance(s, str) else s.get("name") for s in entry["subSubCategories"]]
        if sub_subcategory not in known:
            entry["subSubCategories"].append({"name": sub_subcategory})
    # Reassign so the JSON column is marked dirty
    category.subcategories = subcategories


# ---------- Variant building ----------

def _build_sizes(specs: List[SizeSpec]) -> List[ProductSize]:
    return [
        ProductSize(
            size=spec.size,
            price=spec.price,
            stock=spec.stock,
            discount_per=spec.discount_per,
            discount_price=discounted_price(spec.price, spec.discount_per)
        )
        for spec in specs
    ]


def _check_unique_colors(colors: List[ColorSpec]):
    seen = set()
    for color in colors:
        if color.color_id in seen:
            raise DuplicateColorError()
        seen.add(color.color_id)


def _check_color(label: str, images: List[str], sizes_count: int, clothing: bool):
    if len(images) < 1:
        raise ValidationError(f"Color {label} must have at least 1 image")
    if clothing and sizes_count < 1:
        raise ValidationError(
            f"For clothing, color {label} must have at least one size with price and stock"
        )


# ---------- Products ----------

def create_product(db: Session, data: ProductCreate) -> Product:
    """
    Create a product with its color variants.

    Every color needs at least one image; colors of clothing-like categories
    also need at least one size, and the product stock is then the sum of
    the size stock.
    """
    category = get_category(db, data.category_id)
    clothing = is_clothing_category(category.category)

    if not data.colors:
        raise ValidationError("A product must have at least one color option.")
    _check_unique_colors(data.colors)
    for color in data.colors:
        if not color.color_name:
            raise ValidationError(f"Color {color.color_id} must have a name")
        _check_color(color.color_name, color.images, len(color.sizes), clothing)

    colors = [
        ProductColor(
            color_id=color.color_id,
            color_name=color.color_name,
            color_code=color.color_code or "#000000",
            images=list(color.images),
            sizes=_build_sizes(color.sizes) if clothing else []
        )
        for color in data.colors
    ]

    fields = data.model_dump(exclude={"colors", "images", "category_id"})
    product = Product(
        **fields,
        category_id=category.id,
        category_name=category.category,
        images=[image.model_dump(by_alias=True) for image in data.images],
        colors=colors
    )
    if clothing:
        product.stock = total_size_stock(product.colors)
    _register_subcategory(category, data.subcategory, data.sub_subcategory)

    db.add(product)
    commit_or_rollback(db, "create product")
    db.refresh(product)
    print(f"[CATALOG] Created product {product.id} '{product.name}' with {len(colors)} colors, stock={product.stock}")
    return product


def get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product Not Found")
    return product


def list_products(
    db: Session,
    keyword: Optional[str] = None,
    category_id: Optional[int] = None,
    page: int = 1,
    page_size: int = 20
) -> Tuple[List[Product], int]:
    """
    Search products by name, newest first.

    Returns:
        The requested page of products and the total match count
    """
    query = db.query(Product)
    if keyword:
        query = query.filter(Product.name.ilike(f"%{keyword}%"))
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)

    total = query.count()
    products = (
        query.order_by(Product.created_at.desc(), Product.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return products, total


def top_products(db: Session, limit: int = 3) -> List[Product]:
    return db.query(Product).order_by(Product.rating.desc(), Product.id).limit(limit).all()


def update_product(db: Session, product_id: int, patch: ProductUpdate) -> Product:
    """
    Partially update a product.

    Moving into a clothing-like category requires every color to already
    have sizes (set them first with ``set_variant_images``). Moving out of
    one drops all sizes; that data is not kept.
    """
    product = get_product(db, product_id)
    update_data = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}

    category = None
    category_id = update_data.pop("category_id", None)
    if category_id is not None:
        category = get_category(db, category_id)
    elif product.category_id is not None:
        category = db.query(Category).filter(Category.id == product.category_id).first()

    category_name = category.category if category else product.category_name
    clothing = is_clothing_category(category_name)

    if clothing:
        for color in product.colors:
            if not color.sizes:
                raise ValidationError(
                    f"For clothing, color {color.color_name} must have at least one size with price and stock"
                )

    for field, value in update_data.items():
        setattr(product, field, value)

    if category is not None:
        product.category_id = category.id
        product.category_name = category.category
        _register_subcategory(category, update_data.get("subcategory"), update_data.get("sub_subcategory"))

    if clothing:
        product.stock = total_size_stock(product.colors)
    elif category_id is not None:
        for color in product.colors:
            color.sizes = []

    commit_or_rollback(db, "update product")
    db.refresh(product)
    return product


def set_variant_images(db: Session, product_id: int, update: VariantImagesUpdate, image_store=None) -> Product:
    """
    Merge per-color images and sizes by colorId.

    Colors not listed in the update are dropped. New images are appended to a
    color's existing set unless ``replace_images`` is set. Sizes are replaced
    when given and kept otherwise. Clothing stock is recomputed afterwards.
    Other categories keep the sizes they are given without using them, so a
    product can be sized before it moves into a clothing-like category.
    """
    product = get_product(db, product_id)
    if not update.colors:
        raise ValidationError("A product must have at least one color option.")
    _check_unique_colors(update.colors)
    clothing = is_clothing_category(product.category_name)
    existing_by_id: Dict[str, ProductColor] = {c.color_id: c for c in product.colors}

    # Plan everything first so validation fails before any mutation
    plans: List[Tuple[Optional[ProductColor], ColorSpec, List[str], Optional[List[ProductSize]]]] = []
    released: List[str] = []
    for spec in update.colors:
        existing = existing_by_id.get(spec.color_id)
        if update.replace_images and spec.images:
            images = list(spec.images)
            if existing:
                released.extend(url for url in existing.images if url not in images)
        else:
            images = list(existing.images) if existing else []
            images.extend(url for url in spec.images if url not in images)

        new_sizes = _build_sizes(spec.sizes) if spec.sizes else None
        if new_sizes is not None:
            sizes_count = len(new_sizes)
        else:
            sizes_count = len(existing.sizes) if existing else 0

        label = spec.color_name or (existing.color_name if existing else spec.color_id)
        _check_color(label, images, sizes_count, clothing)
        plans.append((existing, spec, images, new_sizes))

    kept_ids = {spec.color_id for spec in update.colors}
    for color in product.colors:
        if color.color_id not in kept_ids:
            released.extend(color.images)

    new_colors = []
    for existing, spec, images, new_sizes in plans:
        color = existing or ProductColor(color_id=spec.color_id)
        color.color_name = spec.color_name or (existing.color_name if existing else "")
        color.color_code = spec.color_code or (existing.color_code if existing else "#000000")
        color.images = images
        if new_sizes is not None:
            color.sizes = new_sizes
        new_colors.append(color)
    product.colors = new_colors

    released_ids = []
    if image_store is not None:
        released_ids = [image_store.public_id_for(url) for url in released]

    if update.general_images is not None:
        new_general = [image.model_dump(by_alias=True) for image in update.general_images]
        new_urls = {image["url"] for image in new_general}
        released_ids.extend(
            image.get("public_id") for image in (product.images or []) if image.get("url") not in new_urls
        )
        product.images = new_general

    if update.subcategory is not None:
        product.subcategory = update.subcategory

    if clothing:
        product.stock = total_size_stock(product.colors)

    commit_or_rollback(db, "update product images")
    db.refresh(product)
    release_images(image_store, released_ids)
    print(f"[CATALOG] Updated variants of product {product.id}: {len(new_colors)} colors, stock={product.stock}")
    return product


def _product_image_ids(product: Product, image_store) -> List[Optional[str]]:
    ids = [image.get("public_id") for image in (product.images or [])]
    if image_store is not None:
        for color in product.colors:
            ids.extend(image_store.public_id_for(url) for url in color.images)
    return ids


def delete_product(db: Session, product_id: int, image_store=None):
    """
    Delete a product, then release its stored images.

    Orders keep their own snapshot of the product, so they are not touched.
    """
    product = get_product(db, product_id)
    image_ids = _product_image_ids(product, image_store)

    db.delete(product)
    commit_or_rollback(db, "delete product")
    deleted = release_images(image_store, image_ids)
    print(f"[CATALOG] Deleted product {product_id}, released {deleted} images")


def delete_product_image(
    db: Session,
    product_id: int,
    image_url: str,
    color: Optional[str] = None,
    public_id: Optional[str] = None,
    image_store=None
) -> Product:
    """Remove one general or color image from a product."""
    product = get_product(db, product_id)

    if color:
        target = next((c for c in product.colors if color in (c.color_name, c.color_id)), None)
        if target is None:
            raise NotFoundError("Color not found")
        if image_url not in target.images:
            raise NotFoundError("Color image not found")
        if len(target.images) <= 1:
            raise ValidationError(f"Color {target.color_name} must keep at least 1 image")
        target.images = [url for url in target.images if url != image_url]
        if not public_id and image_store is not None:
            public_id = image_store.public_id_for(image_url)
    else:
        image = next((img for img in (product.images or []) if img.get("url") == image_url), None)
        if image is None:
            raise NotFoundError("Product image not found")
        product.images = [img for img in product.images if img.get("url") != image_url]
        public_id = public_id or image.get("public_id")

    commit_or_rollback(db, "delete product image")
    db.refresh(product)
    release_images(image_store, [public_id])
    return product


def delete_all_product_images(db: Session, product_id: int, image_store=None) -> Product:
    """
    Remove every general image of a product.

    Color images stay: each color must keep at least one.
    """
    product = get_product(db, product_id)
    image_ids = [image.get("public_id") for image in (product.images or [])]
    product.images = []

    commit_or_rollback(db, "delete product images")
    db.refresh(product)
    deleted = release_images(image_store, image_ids)
    print(f"[CATALOG] Cleared general images of product {product_id}, released {deleted}")
    return product


# ---------- Reviews ----------

def submit_review(db: Session, product_id: int, user, rating: int, comment: str = "") -> Product:
    """
    Append a review and recompute the product's rating summary.

    Raises:
        AlreadyReviewedError: If the user already reviewed this product
    """
    if not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")

    product = get_product(db, product_id)
    if any(review.user_id == user.id for review in product.reviews):
        raise AlreadyReviewedError()

    product.reviews.append(ProductReview(
        user_id=user.id,
        name=user.name,
        rating=rating,
        comment=comment or ""
    ))
    product.num_reviews = len(product.reviews)
    product.rating = sum(review.rating for review in product.reviews) / len(product.reviews)

    try:
        db.commit()
    except IntegrityError as e:
        # Concurrent review by the same user hit the unique constraint
        db.rollback()
        raise AlreadyReviewedError() from e
    db.refresh(product)
    return product
