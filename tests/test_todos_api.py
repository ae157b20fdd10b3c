"""
Todo API tests - owner-scoped CRUD, filtering, sorting and pagination (TDD).
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from todo_api.core.dependencies import get_todo_service
from todo_api.main import app


async def _create(client: AsyncClient, headers: dict, description: str, completed: bool = False) -> dict:
    response = await client.post(
        "/todos", headers=headers, json={"description": description, "completed": completed}
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seeded(client: AsyncClient, auth_headers: dict):
    async def _seed():
        for description, completed in [("banana", True), ("apple", False), ("cherry", True), ("date", False)]:
            await _create(client, auth_headers, description, completed)

    return _seed


@pytest.mark.asyncio
async def test_list_todos_requires_auth(client: AsyncClient):
    assert (await client.get("/todos")).status_code == 401


@pytest.mark.asyncio
async def test_list_todos_empty(client: AsyncClient, auth_headers: dict):
    response = await client.get("/todos", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_create_todo_sets_owner_from_token(client: AsyncClient, auth_headers: dict, test_user):
    response = await client.post(
        "/todos", headers=auth_headers, json={"description": "buy milk", "owner_id": 999}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["description"] == "buy milk"
    assert body["completed"] is False
    assert body["owner_id"] == test_user.id


@pytest.mark.asyncio
async def test_create_todo_requires_description(client: AsyncClient, auth_headers: dict):
    response = await client.post("/todos", headers=auth_headers, json={"completed": True})
    assert response.status_code == 400
    response = await client.post("/todos", headers=auth_headers, json={"description": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_completed_true_filter(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"completed": "true"})
    assert response.status_code == 200
    todos = response.json()
    assert {t["description"] for t in todos} == {"banana", "cherry"}
    assert all(t["completed"] is True for t in todos)


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["false", "1", "garbage"])
async def test_any_other_completed_value_means_false(client: AsyncClient, auth_headers: dict, seeded, raw):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"completed": raw})
    assert {t["description"] for t in response.json()} == {"apple", "date"}


@pytest.mark.asyncio
async def test_sort_descending(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"sortBy": "description:desc"})
    descriptions = [t["description"] for t in response.json()]
    assert descriptions == ["date", "cherry", "banana", "apple"]


@pytest.mark.asyncio
@pytest.mark.parametrize("sort_by", ["description", "description:asc", "description:whatever"])
async def test_sort_ascending_by_default(client: AsyncClient, auth_headers: dict, seeded, sort_by):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"sortBy": sort_by})
    descriptions = [t["description"] for t in response.json()]
    assert descriptions == ["apple", "banana", "cherry", "date"]


@pytest.mark.asyncio
async def test_sort_by_unknown_field_is_ignored(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"sortBy": "nonsense:desc"})
    assert response.status_code == 200
    assert len(response.json()) == 4


@pytest.mark.asyncio
async def test_pagination(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    params = {"sortBy": "description", "limit": "2", "skip": "1"}
    response = await client.get("/todos", headers=auth_headers, params=params)
    assert [t["description"] for t in response.json()] == ["banana", "cherry"]


@pytest.mark.asyncio
async def test_non_numeric_pagination_means_unbounded(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"limit": "lots", "skip": "none"})
    assert len(response.json()) == 4


@pytest.mark.asyncio
async def test_zero_limit_returns_nothing(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"limit": "0"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_get_update_delete_own_todo(client: AsyncClient, auth_headers: dict):
    todo = await _create(client, auth_headers, "buy milk")

    response = await client.get(f"/todos/{todo['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["description"] == "buy milk"

    response = await client.patch(
        f"/todos/{todo['id']}", headers=auth_headers, json={"completed": True, "description": "buy oat milk"}
    )
    assert response.status_code == 200
    assert response.json()["completed"] is True
    assert response.json()["description"] == "buy oat milk"

    response = await client.delete(f"/todos/{todo['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["id"] == todo["id"]

    assert (await client.get(f"/todos/{todo['id']}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_update_rejects_other_keys(client: AsyncClient, auth_headers: dict):
    todo = await _create(client, auth_headers, "buy milk")
    response = await client.patch(f"/todos/{todo['id']}", headers=auth_headers, json={"owner_id": 5})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid Update!"}


@pytest.mark.asyncio
async def test_other_owners_todo_is_not_found(client: AsyncClient, register):
    _, alice = await register("Alice", "alice@x.com")
    _, bob = await register("Bob", "bob@x.com")
    todo = await _create(client, bob, "bob's secret")

    assert (await client.get(f"/todos/{todo['id']}", headers=alice)).status_code == 404
    patch = await client.patch(f"/todos/{todo['id']}", headers=alice, json={"completed": True})
    assert patch.status_code == 404
    assert (await client.delete(f"/todos/{todo['id']}", headers=alice)).status_code == 404

    # Same answer as for an id that does not exist at all
    missing = await client.get("/todos/99999", headers=alice)
    assert missing.status_code == 404
    assert missing.json() == (await client.get(f"/todos/{todo['id']}", headers=alice)).json()

    # Bob's todo is untouched
    still_there = await client.get(f"/todos/{todo['id']}", headers=bob)
    assert still_there.json()["completed"] is False
    assert (await client.get("/todos", headers=alice)).json() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"limit": "99999999999999999999"}, {"skip": "-99999999999999999999"}])
async def test_oversized_pagination_returns_everything(client: AsyncClient, auth_headers: dict, seeded, params):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params=params)
    assert response.status_code == 200
    assert len(response.json()) == 4


@pytest.mark.asyncio
async def test_oversized_skip_returns_nothing(client: AsyncClient, auth_headers: dict, seeded):
    await seeded()
    response = await client.get("/todos", headers=auth_headers, params={"skip": "99999999999999999999"})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_out_of_range_todo_id_is_404(client: AsyncClient, auth_headers: dict):
    path = "/todos/99999999999999999999"
    assert (await client.get(path, headers=auth_headers)).status_code == 404
    assert (await client.patch(path, headers=auth_headers, json={"completed": True})).status_code == 404
    assert (await client.delete(path, headers=auth_headers)).status_code == 404


class _BrokenTodoService:
    async def list_todos(self, owner_id, params):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_store_failure_is_generic_500(client: AsyncClient, auth_headers: dict):
    app.dependency_overrides[get_todo_service] = lambda: _BrokenTodoService()
    response = await client.get("/todos", headers=auth_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}
    assert "locked" not in response.text
