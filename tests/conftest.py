from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import Base, get_db, make_engine
from main import app
from models import Customer, Product, User


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _make_user(db, name: str, email: str) -> User:
    user = User(name=name, email=email)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db) -> User:
    return _make_user(db, "Owner", "owner@example.com")


@pytest.fixture
def other_user(db) -> User:
    return _make_user(db, "Someone Else", "other@example.com")


@pytest.fixture
def customer(db, owner) -> Customer:
    customer = Customer(user_id=owner.id, name="Acme Trading", phone="+249100000000")
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


@pytest.fixture
def make_product(db, owner):
    def _make(
        name: str = "Widget",
        quantity: int = 5,
        remaining=None,
        price_usd: str = "10.00",
        price_sdg: str = "5500.00",
        exchange_rate: str = "550.00",
        user: User = None,
    ) -> Product:
        product = Product(
            user_id=(user or owner).id,
            name=name,
            quantity=quantity,
            remaining=quantity if remaining is None else remaining,
            price_usd=Decimal(price_usd),
            price_sdg=Decimal(price_sdg),
            exchange_rate=Decimal(exchange_rate),
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def remaining_of(session_factory):
    """Read a product's remaining stock through a fresh session."""
    def _read(product_id) -> int:
        session = session_factory()
        try:
            return session.get(Product, product_id).remaining
        finally:
            session.close()

    return _read


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(owner):
    return {"X-User-Id": str(owner.id)}
