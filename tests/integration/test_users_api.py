"""用户管理 API 集成测试：用户列表与角色变更。"""

import pytest

from portfolio.db.models import UserRole


@pytest.mark.asyncio
async def test_admin_lists_users(client, make_user):
    await make_user(email="someone@example.com")
    _, admin = await make_user(UserRole.ADMIN)
    r = await client.get("/api/admin/users", headers=admin)
    assert r.status_code == 200
    emails = {u["email"] for u in r.json()["data"]}
    assert "someone@example.com" in emails


@pytest.mark.asyncio
@pytest.mark.parametrize("headers, status", [(None, 401), ("user", 403)])
async def test_list_users_rejects_non_admin(client, make_user, headers, status):
    if headers == "user":
        _, headers = await make_user()
    r = await client.get("/api/admin/users", headers=headers)
    assert r.status_code == status


@pytest.mark.asyncio
async def test_superuser_changes_role(client, make_user):
    target, _ = await make_user()
    _, superuser = await make_user(UserRole.SUPERUSER)
    r = await client.patch("/api/users/role", json={"userId": target.id, "newRole": "ADMIN"}, headers=superuser)
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "ADMIN"


@pytest.mark.asyncio
async def test_admin_cannot_change_role(client, make_user):
    target, _ = await make_user()
    _, admin = await make_user(UserRole.ADMIN)
    r = await client.patch("/api/users/role", json={"userId": target.id, "newRole": "ADMIN"}, headers=admin)
    assert r.status_code == 403
    assert r.json()["message"] == "Forbidden: Superuser access required"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, status",
    [
        ({"newRole": "ADMIN"}, 400),
        ({"userId": "x", "newRole": "OWNER"}, 400),
        ({"userId": "missing", "newRole": "ADMIN"}, 404),
    ],
)
async def test_role_update_validation(client, make_user, body, status):
    _, superuser = await make_user(UserRole.SUPERUSER)
    r = await client.patch("/api/users/role", json=body, headers=superuser)
    assert r.status_code == status
