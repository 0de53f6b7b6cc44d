"""Fixtures for API tests against a real app on a temporary database."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from stockroom.api.main import create_app
from stockroom.config.settings import Settings


@pytest.fixture
def llm():
    """No completion provider by default; override per module."""
    return None


@pytest.fixture
async def app(test_settings: Settings, llm) -> AsyncGenerator[FastAPI, None]:
    application = create_app(test_settings, llm=llm)
    # ASGITransport does not send lifespan events
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def invoice_payload() -> dict:
    return {
        "invoice_number": "FV/2024/01/15",
        "date": "2024-01-15",
        "vendor": "Hurtownia Budowlana ABC",
        "filename": "fv.txt",
        "items": [
            {"name": "Cement", "quantity": 10, "unit": "kg", "percentage": 23,
             "net_price": 25.5, "gross_price": 31.37},
            {"name": "Piasek", "quantity": 4, "unit": "kg", "percentage": 8,
             "net_price": 4.0, "gross_price": 4.32},
        ],
    }


async def create_product(client: AsyncClient, name: str, stock: float = 0, **fields) -> dict:
    response = await client.post("/api/products", json={"name": name, **fields})
    assert response.status_code == 201, response.text
    product = response.json()
    if stock:
        response = await client.post(
            f"/api/products/{product['id']}/adjustments", json={"quantity": stock}
        )
        assert response.status_code == 201, response.text
    return product


@pytest.fixture
def product_factory(client):
    async def factory(name: str, stock: float = 0, **fields) -> dict:
        return await create_product(client, name, stock, **fields)

    return factory
