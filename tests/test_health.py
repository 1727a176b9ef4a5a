# tests/test_health.py
import pytest
from httpx import AsyncClient

from notekeeper.core.settings import settings


@pytest.mark.asyncio
async def test_health_reports_ok(client: AsyncClient) -> None:
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_root_describes_service(client: AsyncClient) -> None:
    r = await client.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == settings.app_name
    assert body["version"] == settings.app_version
