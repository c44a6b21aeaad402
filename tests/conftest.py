import os
from decimal import Decimal
from functools import lru_cache

# point the import-time engine at a throwaway database before the apps load
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from auth_service.app.main import app as auth_app
from marketplace_service.app.main import app as marketplace_app
from marketplace_service.app.enum.product_enum import ProductCategory, ProductUnit
from marketplace_service.app.models.products import Product
from shared.core.auth import create_user_token
from shared.core.database import Base, build_engine, get_db
from shared.models.users import Users, bcrypt_context
from shared.utils.enums import UserRole

DEFAULT_PASSWORD = "secret123"


@lru_cache(maxsize=None)
def _password_hash(password: str) -> str:
    return bcrypt_context.hash(password)


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'marketplace.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def override_db(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    for app in (auth_app, marketplace_app):
        app.dependency_overrides[get_db] = _get_db
    yield
    for app in (auth_app, marketplace_app):
        app.dependency_overrides.clear()


@pytest.fixture
def client(override_db):
    return TestClient(marketplace_app)


@pytest.fixture
def auth_client(override_db):
    return TestClient(auth_app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.VENDOR, name=None, email=None, password=DEFAULT_PASSWORD, is_active=True):
        counter["n"] += 1
        user = Users(
            name=name or f"{role.value.capitalize()} {counter['n']}",
            email=email or f"{role.value}{counter['n']}@example.com",
            password=_password_hash(password),
            role=role,
            phone="9876543210",
            address="12 Market Road, Pune",
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def vendor(make_user):
    return make_user(UserRole.VENDOR, name="Ravi Chaatwala")


@pytest.fixture
def other_vendor(make_user):
    return make_user(UserRole.VENDOR, name="Meena Dosa Corner")


@pytest.fixture
def supplier(make_user):
    return make_user(UserRole.SUPPLIER, name="Fresh Farms")


@pytest.fixture
def other_supplier(make_user):
    return make_user(UserRole.SUPPLIER, name="Spice Route Traders")


@pytest.fixture
def make_product(db):
    def _make(supplier, **overrides):
        values = {
            "name": "Onions",
            "description": "Red onions, farm fresh",
            "price": Decimal("10.00"),
            "unit": ProductUnit.KG,
            "stock": 100,
            "category": ProductCategory.VEGETABLES,
            "min_order_quantity": 1,
        }
        values.update(overrides)
        product = Product(supplier_id=supplier.id,
                          supplier_name=supplier.name, **values)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def headers():
    return auth_headers
