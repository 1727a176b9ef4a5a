"""Tests for note endpoints."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from fastapi import status
from httpx import AsyncClient

from notekeeper.core.security import create_access_token
from notekeeper.models import User


async def _create(
    client: AsyncClient,
    headers: dict[str, str],
    label: str,
    content: str | None = None,
) -> dict[str, Any]:
    response = await client.post(
        "/api/v1/notes",
        json={"label": label, "content": content},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def _other_headers(make_user: Callable[..., Awaitable[User]]) -> dict[str, str]:
    other = await make_user(username="oscar")
    return {"Authorization": f"Bearer {create_access_token(other.id)}"}


@pytest.mark.asyncio
async def test_create_and_get_note(
    client: AsyncClient,
    test_user: User,
    auth_headers: dict[str, str],
) -> None:
    created = await _create(client, auth_headers, "Groceries", "milk, eggs")

    assert created["label"] == "Groceries"
    assert created["owner"] == {"id": test_user.id, "username": "alice"}

    response = await client.get(f"/api/v1/notes/{created['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["content"] == "milk, eggs"


@pytest.mark.asyncio
async def test_create_requires_label(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post("/api/v1/notes", json={"label": ""}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_paginates_and_searches(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    for index in range(5):
        await _create(client, auth_headers, f"Note {index}", "plain text")
    await _create(client, auth_headers, "Shopping", "Buy APPLES")

    response = await client.get("/api/v1/notes?page=2&limit=4", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    page = response.json()
    assert page["total"] == 6
    assert page["page"] == 2 and page["limit"] == 4
    assert len(page["data"]) == 2

    response = await client.get("/api/v1/notes?query=apples", headers=auth_headers)
    page = response.json()
    assert page["total"] == 1
    assert page["data"][0]["label"] == "Shopping"

    response = await client.get("/api/v1/notes?query=NOTE", headers=auth_headers)
    assert response.json()["total"] == 5


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("query", "label"),
    [("100%25", "100% done"), ("a_b", "a_b"), ("c%5Cd", "c\\d")],
)
async def test_search_matches_wildcards_literally(
    client: AsyncClient,
    auth_headers: dict[str, str],
    query: str,
    label: str,
) -> None:
    for text in ("100% done", "1000 done", "a_b", "axb", "c\\d", "cxd"):
        await _create(client, auth_headers, text)

    response = await client.get(f"/api/v1/notes?query={query}", headers=auth_headers)

    assert [note["label"] for note in response.json()["data"]] == [label]


@pytest.mark.asyncio
async def test_list_only_shows_own_notes(
    client: AsyncClient,
    make_user: Callable[..., Awaitable[User]],
    auth_headers: dict[str, str],
) -> None:
    await _create(client, auth_headers, "Mine")
    other_headers = await _other_headers(make_user)
    await _create(client, other_headers, "Theirs")

    response = await client.get("/api/v1/notes", headers=auth_headers)

    assert [note["label"] for note in response.json()["data"]] == ["Mine"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", ["page=0", "limit=0", "limit=101"])
async def test_list_rejects_bad_paging(
    client: AsyncClient,
    auth_headers: dict[str, str],
    params: str,
) -> None:
    response = await client.get(f"/api/v1/notes?{params}", headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_keeps_omitted_fields(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    created = await _create(client, auth_headers, "Draft", "first version")

    response = await client.patch(
        f"/api/v1/notes/{created['id']}",
        json={"content": "second version"},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["label"] == "Draft"
    assert body["content"] == "second version"


@pytest.mark.asyncio
async def test_other_users_note_is_forbidden(
    client: AsyncClient,
    make_user: Callable[..., Awaitable[User]],
    auth_headers: dict[str, str],
) -> None:
    created = await _create(client, auth_headers, "Private")
    other_headers = await _other_headers(make_user)
    url = f"/api/v1/notes/{created['id']}"

    assert (await client.get(url, headers=other_headers)).status_code == status.HTTP_403_FORBIDDEN
    response = await client.patch(url, json={"label": "Hacked"}, headers=other_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert (await client.delete(url, headers=other_headers)).status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_delete_is_soft_and_hides_note(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    created = await _create(client, auth_headers, "Temporary")
    url = f"/api/v1/notes/{created['id']}"

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK

    assert (await client.get(url, headers=auth_headers)).status_code == status.HTTP_404_NOT_FOUND
    assert (await client.delete(url, headers=auth_headers)).status_code == status.HTTP_404_NOT_FOUND
    listing = await client.get("/api/v1/notes", headers=auth_headers)
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_missing_note_is_not_found(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.get("/api/v1/notes/does-not-exist", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Note not found"


@pytest.mark.asyncio
async def test_notes_require_authentication(client: AsyncClient) -> None:
    response = await client.get("/api/v1/notes", headers={"Authorization": "Bearer invalid"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
