"""App-level behavior: health check, request IDs, error envelope."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_pings_database(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    resp = await client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert resp.headers["X-Request-ID"] == "trace-123"


@pytest.mark.asyncio
async def test_request_id_is_generated(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_domain_errors_use_error_envelope(client: AsyncClient) -> None:
    resp = await client.get(
        "/compare/resorts", params={"check_in": "2025-03-15", "check_out": "2025-03-01"}
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "error": {"code": "invalid_parameter", "message": "check_out must be after check_in"}
    }
