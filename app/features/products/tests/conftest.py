"""Test fixtures for products module."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.features.products.models import Product
from app.main import app


@pytest.fixture
def sample_products() -> list[Product]:
    """Product rows as loaded from the upstream dataset."""
    return [
        Product(
            id=1,
            title="Fjallraven Backpack",
            description="Your perfect pack for everyday use",
            price=Decimal("109.95"),
            category="men's clothing",
            sold=False,
            date_of_sale="2021-11-27T20:29:54+05:30",
            image="https://example.com/1.jpg",
        ),
        Product(
            id=2,
            title="Mens Casual Premium Slim Fit T-Shirts",
            description="Slim-fitting style",
            price=Decimal("22.30"),
            category="men's clothing",
            sold=True,
            date_of_sale="2021-03-27T20:29:54+05:30",
            image=None,
        ),
    ]


@pytest.fixture
def mock_db() -> AsyncMock:
    """Mock AsyncSession whose execute() returns a configurable result."""
    session = AsyncMock()
    session.execute.return_value = MagicMock()
    return session


@pytest.fixture
def client(mock_db: AsyncMock) -> TestClient:
    """Test client with the database dependency replaced by ``mock_db``."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
