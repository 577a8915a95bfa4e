"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

# Load .env into os.environ before Settings is instantiated.
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    project_name: str = "Storefront"
    api_version: str = "v1"
    # Payment gateway (Stripe)
    payment_api_key: str = Field(default="", alias="PAYMENT_API_KEY")
    payment_currency: str = Field(default="usd", alias="PAYMENT_CURRENCY")
    # Image storage
    media_root: str = Field(default="data/media", alias="MEDIA_ROOT")
    media_base_url: str = Field(default="/media", alias="MEDIA_BASE_URL")
    # Return / replace windows, in days after delivery
    return_window_days: int = Field(default=7, alias="RETURN_WINDOW_DAYS")
    replace_window_days: int = Field(default=15, alias="REPLACE_WINDOW_DAYS")
    # Cart
    cart_max_item_quantity: int = Field(default=10, alias="CART_MAX_ITEM_QUANTITY")

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


settings = Settings()
