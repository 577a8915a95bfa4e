"""Catalog models: categories, products and their color/size variants."""
from sqlalchemy import (
    Column, Integer, String, Float, Text, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from data.database.connection import Base


class Category(Base):
    """Product category; its name decides whether products carry sizes."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(100), unique=True, nullable=False, index=True)
    subcategories = Column(JSON, nullable=False, default=list)  # [{"name": ..., "subSubCategories": [...]}]
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, category='{self.category}')>"


class Product(Base):
    """Product with per-color image sets and per-size price/stock/discount."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)

    # Inventory: for clothing-like categories this mirrors the sum of size stock
    stock = Column(Integer, default=0, nullable=False)

    # Category
    category_id = Column("category", Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    category_name = Column("categoryName", String(100), nullable=False, default="")
    subcategory = Column(String(100), nullable=False, default="")
    sub_subcategory = Column("subSubcategory", String(100), nullable=False, default="")

    # Media: [{"public_id": ..., "url": ...}]
    images = Column(JSON, nullable=False, default=list)

    # Reviews summary
    rating = Column(Float, nullable=False, default=0)
    num_reviews = Column("numReviews", Integer, nullable=False, default=0)

    # Merchandising
    tags = Column(JSON, nullable=False, default=list)
    brand = Column(String(100), nullable=True)
    sku = Column(String(100), nullable=True, index=True)
    is_featured = Column("isFeatured", Boolean, default=False, nullable=False)
    is_trending = Column("isTrending", Boolean, default=False, nullable=False)
    is_popular = Column("isPopular", Boolean, default=False, nullable=False)
    availability_status = Column("availabilityStatus", String(50), nullable=True)
    minimum_order_quantity = Column("minimumOrderQuantity", Integer, nullable=True)
    shipping_information = Column("shippingInformation", Text, nullable=True)
    return_policy = Column("returnPolicy", Text, nullable=True)
    warranty_information = Column("warrantyInformation", Text, nullable=True)

    # Timestamps
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column("updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    colors = relationship(
        "ProductColor",
        back_populates="product",
        order_by="ProductColor.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan"
    )
    reviews = relationship(
        "ProductReview",
        back_populates="product",
        order_by="ProductReview.id",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"


class ProductColor(Base):
    """A color option owned by one product."""

    __tablename__ = "product_colors"
    __table_args__ = (UniqueConstraint("product_id", "colorId", name="uq_product_color"),)

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    color_id = Column("colorId", String(100), nullable=False)  # e.g. "white", "black"
    color_name = Column("colorName", String(100), nullable=False)
    color_code = Column("colorCode", String(20), nullable=False, default="#000000")
    images = Column(JSON, nullable=False, default=list)  # list of image URLs

    product = relationship("Product", back_populates="colors")
    sizes = relationship(
        "ProductSize",
        back_populates="color",
        order_by="ProductSize.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<ProductColor(id={self.id}, color_id='{self.color_id}', sizes={len(self.sizes)})>"


class ProductSize(Base):
    """A size entry of one color, with its own price, stock and discount."""

    __tablename__ = "product_sizes"

    id = Column(Integer, primary_key=True, index=True)
    color_pk = Column(Integer, ForeignKey("product_colors.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    size = Column(String(50), nullable=False)
    price = Column(Float, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    discount_per = Column("discountper", String(20), nullable=False, default="0")  # "10%" or "15"
    discount_price = Column("discountprice", Float, nullable=False, default=0)

    color = relationship("ProductColor", back_populates="sizes")

    def __repr__(self):
        return f"<ProductSize(id={self.id}, size='{self.size}', stock={self.stock})>"


class ProductReview(Base):
    """A single user's review; one per user per product."""

    __tablename__ = "product_reviews"
    __table_args__ = (UniqueConstraint("product_id", "user", name="uq_review_product_user"),)

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column("user", Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="reviews")

    def __repr__(self):
        return f"<ProductReview(id={self.id}, product_id={self.product_id}, user_id={self.user_id}, rating={self.rating})>"
