"""Pytest configuration and fixtures for the cheque approval service."""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.models.cheque import Cheque, ChequeStatus


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_cheque():
    """Factory for cheques with sensible defaults; override any field by keyword."""

    counter = {"n": 0}

    def _make(amount="100.00", **overrides) -> Cheque:
        counter["n"] += 1
        fields = {
            "cheque_id": counter["n"],
            "cheque_number": f"CHQ{counter['n']:04d}",
            "amount": Decimal(str(amount)),
            "client_name": "Bob",
            "document_id": 1,
            "status": ChequeStatus.PENDING,
        }
        fields.update(overrides)
        return Cheque(**fields)

    return _make


def cheque_payload(**overrides) -> dict:
    """JSON body for one cheque in API requests."""
    payload = {
        "cheque_id": 1,
        "cheque_number": "CHQ0001",
        "amount": "100.00",
        "client_name": "Bob",
        "document_id": 1,
        "status": "Pending",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return cheque_payload
