"""Main FastAPI application."""
import sys
from pathlib import Path

# Add src to path if not already there
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from src.config import settings
from src.routes.admin import router as admin_router
from src.routes.user import router as user_router
from src.services.images import LocalImageStore
from src.services.notifications import DatabaseNotificationDispatcher
from src.services.payments import StripePaymentGateway
from src.services.users import DatabaseUserDirectory
from src.utils.errors import StoreError
from data.database.connection import engine, Base, SessionLocal
# Import models to ensure tables are created
from data.database import user_model, product_model, order_models  # noqa: F401

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title=settings.project_name,
    version=settings.api_version,
    description="Ecommerce platform - product variants, orders, returns and replacements"
)

# External clients, built once and shared through app state
print("Initializing service clients...")
app.state.user_directory = DatabaseUserDirectory(SessionLocal)
app.state.notification_dispatcher = DatabaseNotificationDispatcher(SessionLocal)
app.state.payment_gateway = StripePaymentGateway(api_key=settings.payment_api_key)
app.state.image_store = LocalImageStore(settings.media_root, settings.media_base_url)
print("✓ Service clients initialized")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    print(f"[DB] Unhandled database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(admin_router)
app.include_router(user_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Storefront API",
        "version": settings.api_version,
        "docs": "/docs"
    }


@app.head("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
