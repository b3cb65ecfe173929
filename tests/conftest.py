"""Shared pytest fixtures for the sales API tests."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config.database import Base, build_engine, get_db
from app.main import create_app
from app.shared.database.models import Product, Sale, SaleItem, Stock, User


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """File-backed SQLite database so concurrent sessions really contend."""

    engine = build_engine(f"sqlite:///{tmp_path / 'pos.db'}")
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory: sessionmaker) -> Iterator[Session]:
    """A request-style session; close it before other sessions write."""

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    app = create_app()

    def _get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_factory(session_factory: sessionmaker) -> Callable[..., str]:
    def _create(
        user_id: str = "U1",
        username: str = "cashier",
        full_name: Optional[str] = "Ada Cashier",
    ) -> str:
        with session_factory() as session:
            session.add(User(id=user_id, username=username, full_name=full_name))
            session.commit()
        return user_id

    return _create


@pytest.fixture
def product_factory(session_factory: sessionmaker) -> Callable[..., str]:
    """Create a product with a stock row (``quantity=None`` skips the stock row)."""

    def _create(
        product_id: str = "P1",
        name: str = "Coffee Beans",
        price: str = "9.99",
        quantity: Optional[str] = "5",
        sku: Optional[str] = None,
        cost: str = "4.00",
    ) -> str:
        with session_factory() as session:
            session.add(Product(
                id=product_id,
                name=name,
                sku=sku if sku is not None else f"SKU-{product_id}",
                price=Decimal(price),
                cost=Decimal(cost),
            ))
            if quantity is not None:
                session.add(Stock(product_id=product_id, quantity=Decimal(quantity)))
            session.commit()
        return product_id

    return _create


@pytest.fixture
def stock_of(session_factory: sessionmaker) -> Callable[[str], Optional[Decimal]]:
    def _read(product_id: str) -> Optional[Decimal]:
        with session_factory() as session:
            return session.query(Stock.quantity).filter(Stock.product_id == product_id).scalar()

    return _read


@pytest.fixture
def sale_count(session_factory: sessionmaker) -> Callable[[], int]:
    def _count() -> int:
        with session_factory() as session:
            return session.query(Sale).count()

    return _count


@pytest.fixture
def item_count(session_factory: sessionmaker) -> Callable[[], int]:
    def _count() -> int:
        with session_factory() as session:
            return session.query(SaleItem).count()

    return _count


@pytest.fixture
def seeded(user_factory, product_factory) -> dict:
    """One attendant and one product (9.99, 5 units on hand)."""

    return {"user_id": user_factory(), "product_id": product_factory()}
