"""Shared pytest fixtures for storefront tests."""

import os

#settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_ALWAYS_EAGER"] = "true"
os.environ["CHECKOUT_LOCKS_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"

import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel, ShippingMethodModel, UserModel
from storefront.domain.schemas import UserCreate
from storefront.main import app
from storefront.services.user_service import UserService

USER_EMAIL = "buyer@example.com"
USER_PASSWORD = "buyer-pass-123"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass-123"

_slugs = itertools.count(1)


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    """Session on the shared in-memory database."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_product(db):
    """Factory for catalog products."""

    def _make(
        name="Linen Shirt",
        base_price="1000.00",
        discount_percent=None,
        available_quantity=10,
        track_quantity=True,
        sizes=("S", "M", "L"),
        colors=("red", "blue"),
        active=True,
    ) -> ProductModel:
        product = ProductModel(
            name=name,
            slug=f"product-{next(_slugs)}",
            base_price=Decimal(base_price),
            discount_percent=Decimal(discount_percent) if discount_percent is not None else None,
            available_quantity=available_quantity,
            track_quantity=track_quantity,
            sizes=list(sizes),
            colors=list(colors),
            active=active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_shipping(db):
    """Factory for shipping methods."""

    def _make(name="Courier", cost="300.00", active=True) -> ShippingMethodModel:
        method = ShippingMethodModel(name=name, cost=Decimal(cost), estimated_days=2, active=active)
        db.add(method)
        db.commit()
        db.refresh(method)
        return method

    return _make


@pytest.fixture
def user(db) -> UserModel:
    """Create a regular customer."""
    created = UserService(db).register(
        UserCreate(email=USER_EMAIL, name="Buyer", password=USER_PASSWORD)
    )
    return UserService(db).get_user(created.id)


@pytest.fixture
def admin(db) -> UserModel:
    """Create an admin account."""
    return UserService(db).ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def client(tables):
    """Anonymous API client."""
    return TestClient(app)


def _login(email: str, password: str) -> TestClient:
    client = TestClient(app)
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def user_client(user):
    """API client with a logged-in customer session."""
    return _login(USER_EMAIL, USER_PASSWORD)


@pytest.fixture
def admin_client(admin):
    """API client with a logged-in admin session."""
    return _login(ADMIN_EMAIL, ADMIN_PASSWORD)
