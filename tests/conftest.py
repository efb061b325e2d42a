"""Pytest fixtures for storefront tests."""

import os

# Settings are read at import time; give them something to read
os.environ.setdefault("DATABASE_URL", "sqlite:///./storefront-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from config.database import Base, create_db_engine, get_db
from common.security import create_user_token
from main import app
from modules.user.models import User, UserRole
from modules.catalog.models import Category, Product
from modules.cart.models import CartLine


@pytest.fixture
def engine(tmp_path):
    """A fresh SQLite database file per test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    """API client whose requests all share the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ==========================================
# Factories
# ==========================================

@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role=UserRole.CUSTOMER, is_active=True, email=None):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            first_name="Test",
            last_name=f"User{counter['n']}",
            role=role.value,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def category(db):
    cat = Category(name="General")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def make_product(db, category):
    def _make_product(name="Widget", price="10.00", stock=10, is_active=True):
        product = Product(
            name=name,
            unit_price=Decimal(price),
            stock_quantity=stock,
            is_active=is_active,
            category_id=category.id,
        )
        db.add(product)
        db.commit()
        return product

    return _make_product


@pytest.fixture
def add_to_cart(db):
    def _add_to_cart(user, product, quantity):
        line = CartLine(user_id=user.id, product_id=product.id, quantity=quantity)
        db.add(line)
        db.commit()
        return line

    return _add_to_cart


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN)


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_user_token(user.id, user.role)}"}

    return _auth_headers
