"""Product schemas for API validation."""
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ImageRef(CamelModel):
    """General product image as stored on the product."""
    public_id: Optional[str] = Field(None, alias="public_id", description="Image store identifier")
    url: str = Field(..., min_length=1, description="Public image URL")


class SizeSpec(CamelModel):
    """Size entry of a color: own price, stock and discount."""
    size: str = Field(..., min_length=1, max_length=50, description="Size label, e.g. M or 42")
    price: float = Field(..., ge=0, description="Price for this size")
    stock: int = Field(0, ge=0, description="Units available in this size")
    discount_per: str = Field(
        "0",
        alias="discountper",
        description="Discount as a percentage ('10%') or an absolute amount ('15')"
    )

    @field_validator("discount_per", mode="before")
    @classmethod
    def coerce_discount(cls, v):
        if v is None or v == "":
            return "0"
        return str(v).strip()


class ColorSpec(CamelModel):
    """Color option with its images and, for clothing, its sizes."""
    color_id: str = Field(..., min_length=1, max_length=100, description="Identifier unique within the product")
    color_name: Optional[str] = Field(None, max_length=100, description="Human-readable name")
    color_code: Optional[str] = Field(None, max_length=20, description="Hex code, e.g. #FFFFFF")
    images: List[str] = Field(default_factory=list, description="Image URLs for this color")
    sizes: List[SizeSpec] = Field(default_factory=list, description="Sizes (clothing categories only)")


class ProductBase(CamelModel):
    """Base product schema with common fields."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: str = Field(..., min_length=1, description="Product description")
    price: float = Field(..., gt=0, description="Base product price")
    stock: int = Field(..., ge=0, description="Available stock (derived from sizes for clothing)")
    category_id: int = Field(..., alias="category", description="Category id")
    subcategory: str = Field("", max_length=100)
    sub_subcategory: str = Field("", max_length=100)
    tags: List[str] = Field(default_factory=list, description="Product tags")
    brand: Optional[str] = Field(None, max_length=100)
    sku: Optional[str] = Field(None, max_length=100, description="Stock Keeping Unit")
    is_featured: bool = False
    is_trending: bool = False
    is_popular: bool = False
    availability_status: Optional[str] = Field(None, max_length=50)
    minimum_order_quantity: Optional[int] = Field(None, ge=1)
    shipping_information: Optional[str] = None
    return_policy: Optional[str] = None
    warranty_information: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        if isinstance(v, str):
            return [tag.strip() for tag in v.split(",") if tag.strip()]
        return v


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    images: List[ImageRef] = Field(default_factory=list, description="General product images")
    colors: List[ColorSpec] = Field(default_factory=list, description="Color variants")


class ProductUpdate(CamelModel):
    """Schema for updating a product (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, alias="category")
    subcategory: Optional[str] = Field(None, max_length=100)
    sub_subcategory: Optional[str] = Field(None, max_length=100)
    tags: Optional[List[str]] = None
    brand: Optional[str] = Field(None, max_length=100)
    sku: Optional[str] = Field(None, max_length=100)
    is_featured: Optional[bool] = None
    is_trending: Optional[bool] = None
    is_popular: Optional[bool] = None
    availability_status: Optional[str] = Field(None, max_length=50)
    minimum_order_quantity: Optional[int] = Field(None, ge=1)
    shipping_information: Optional[str] = None
    return_policy: Optional[str] = None
    warranty_information: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        if isinstance(v, str):
            return [tag.strip() for tag in v.split(",") if tag.strip()]
        return v


class VariantImagesUpdate(CamelModel):
    """Per-color image and size edits, merged by colorId."""
    colors: List[ColorSpec] = Field(..., description="Colors to keep, in display order")
    general_images: Optional[List[ImageRef]] = Field(None, description="Replaces the general images when given")
    replace_images: bool = Field(False, description="Replace each color's images instead of appending")
    subcategory: Optional[str] = Field(None, max_length=100)


class SizeResponse(CamelModel):
    size: str
    price: float
    stock: int
    discount_per: str = Field(..., alias="discountper")
    discount_price: float = Field(..., alias="discountprice")


class ColorResponse(CamelModel):
    color_id: str
    color_name: str
    color_code: str
    images: List[str]
    sizes: List[SizeResponse]


class ReviewCreate(CamelModel):
    """Schema for submitting a review."""
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str = Field("", max_length=2000)


class ReviewResponse(CamelModel):
    id: int
    user_id: int = Field(..., alias="user")
    name: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None


class ProductResponse(CamelModel):
    """Schema for product response."""
    id: int
    name: str
    description: str
    price: float
    stock: int
    category_id: Optional[int] = Field(None, alias="category")
    category_name: str
    subcategory: str
    sub_subcategory: str
    images: List[ImageRef]
    colors: List[ColorResponse]
    reviews: List[ReviewResponse]
    rating: float
    num_reviews: int
    tags: List[str]
    brand: Optional[str] = None
    sku: Optional[str] = None
    is_featured: bool
    is_trending: bool
    is_popular: bool
    availability_status: Optional[str] = None
    minimum_order_quantity: Optional[int] = None
    shipping_information: Optional[str] = None
    return_policy: Optional[str] = None
    warranty_information: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryCreate(CamelModel):
    """Schema for creating a category."""
    category: str = Field(..., min_length=1, max_length=100, description="Category name")
    subcategories: List[str] = Field(default_factory=list, description="Initial subcategory names")


class CategoryResponse(CamelModel):
    id: int
    category: str
    subcategories: List[Dict[str, Any]]


class ImageUploadResponse(CamelModel):
    url: str
    public_id: str


class ImageDeleteRequest(CamelModel):
    """Identifies one image to remove from a product."""
    image_url: str = Field(..., min_length=1)
    color: Optional[str] = Field(None, description="Color name; omit for a general image")
    public_id: Optional[str] = None
