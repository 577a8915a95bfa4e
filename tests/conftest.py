"""Shared fixtures: a throwaway SQLite database, seeded users and fake clients."""
import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["MEDIA_ROOT"] = os.path.join(_tmp_dir, "media")

import pytest
from fastapi.testclient import TestClient
from data.database.connection import Base, SessionLocal, engine
from data.database.order_schema import OrderCreate
from data.database.product_model import Category
from data.database.product_schema import ProductCreate
from data.database.user_model import User
from src.services import catalog, orders
from src.services.notifications import NotificationTrigger
from src.services.users import UserRecord
from src.utils.cart import cart_manager
from tests.helpers import FakeDispatcher, FakeGateway, FakeImageStore, T0, order_payload, product_payload


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    cart_manager._carts.clear()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _add_user(db, name, email, role="user") -> UserRecord:
    user = User(name=name, email=email, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return UserRecord(id=user.id, name=user.name, email=user.email, role=user.role)


@pytest.fixture
def admin(db):
    return _add_user(db, "Ada Admin", "admin@example.com", role="admin")


@pytest.fixture
def customer(db):
    return _add_user(db, "Casey Customer", "casey@example.com")


@pytest.fixture
def other_customer(db):
    return _add_user(db, "Robin Other", "robin@example.com")


def _add_category(db, name) -> Category:
    category = Category(category=name, subcategories=[])
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def clothing(db):
    return _add_category(db, "Clothing")


@pytest.fixture
def electronics(db):
    return _add_category(db, "Electronics")


@pytest.fixture
def shirt(db, clothing):
    """Clothing product: one white color, size M, stock 10, 10% off."""
    return catalog.create_product(db, ProductCreate.model_validate(product_payload(clothing.id)))


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def notifier(dispatcher):
    return NotificationTrigger(dispatcher)


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def placed_order(db, customer, shirt):
    """Order by ``customer`` for 2 + 3 shirts, created at T0."""
    return orders.create_order(db, customer.id, OrderCreate.model_validate(order_payload(shirt.id)), now=T0)


@pytest.fixture
def client(dispatcher, gateway, image_store):
    from src.main import app

    saved = {
        "notification_dispatcher": app.state.notification_dispatcher,
        "payment_gateway": app.state.payment_gateway,
        "image_store": app.state.image_store,
    }
    app.state.notification_dispatcher = dispatcher
    app.state.payment_gateway = gateway
    app.state.image_store = image_store
    with TestClient(app) as test_client:
        yield test_client
    for name, value in saved.items():
        setattr(app.state, name, value)
