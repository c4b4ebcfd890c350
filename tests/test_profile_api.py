from sqlalchemy import func
from sqlalchemy.future import select

from task_tracker.models.tasks import Task
from task_tracker.models.user import User


async def test_get_profile(client, alice):
    response = await client.get("/api/user/profile", headers=alice["headers"])
    assert response.status_code == 200
    user = response.json()["data"]
    assert user["id"] == alice["id"]
    assert user["name"] == "Alice"
    assert user["email"] == "alice@example.com"
    assert set(user) == {"id", "name", "email", "createdAt", "updatedAt"}


async def test_update_profile_name(client, alice):
    response = await client.put("/api/user/profile", json={"name": "Alice L."}, headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Alice L."
    assert response.json()["data"]["email"] == "alice@example.com"


async def test_update_profile_rejects_taken_email(client, alice, bob):
    response = await client.put(
        "/api/user/profile", json={"email": "bob@example.com"}, headers=alice["headers"]
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Email is already in use"


async def test_update_profile_rejects_blank_name(client, alice):
    response = await client.put("/api/user/profile", json={"name": ""}, headers=alice["headers"])
    assert response.status_code == 400


async def test_update_profile_rejects_overlong_name(client, alice):
    response = await client.put("/api/user/profile", json={"name": "A" * 101}, headers=alice["headers"])
    assert response.status_code == 400

    profile = await client.get("/api/user/profile", headers=alice["headers"])
    assert profile.json()["data"]["name"] == "Alice"


async def test_password_change_requires_new_password_and_revokes_refresh(client, alice):
    response = await client.put(
        "/api/user/profile", json={"password": "brand-new-password"}, headers=alice["headers"]
    )
    assert response.status_code == 200

    old_login = await client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "alice-password"}
    )
    assert old_login.status_code == 401

    refresh = await client.post("/api/auth/refresh", json={"refreshToken": alice["refresh_token"]})
    assert refresh.status_code == 403

    new_login = await client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "brand-new-password"}
    )
    assert new_login.status_code == 200


async def test_delete_profile_removes_user_and_tasks(client, alice, bob, session_factory):
    await client.post("/api/tasks", json={"title": "alice 1"}, headers=alice["headers"])
    await client.post("/api/tasks", json={"title": "alice 2"}, headers=alice["headers"])
    await client.post("/api/tasks", json={"title": "bob 1"}, headers=bob["headers"])

    response = await client.delete("/api/user/profile", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Profile deleted successfully"}

    async with session_factory() as session:
        users = (await session.execute(select(User.email))).scalars().all()
        task_count = (await session.execute(select(func.count(Task.id)))).scalar_one()
    assert users == ["bob@example.com"]
    assert task_count == 1
