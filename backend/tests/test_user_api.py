"""
Jotter Backend — Users and Login API Tests
===========================================

What:  End-to-end tests for /api/users and /api/login, starting from a
       database that holds the single user `root`.

What we test:
    ✅ Registration succeeds and never returns a password hash
    ✅ Duplicate usernames are 400 "unique" and leave the user count unchanged
    ✅ Short usernames/passwords are rejected
    ✅ Login issues a token that POST /api/notes accepts
    ✅ Unknown user and wrong password are both a single 401
"""

import jwt
import pytest


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_creation_of_a_fresh_user(self, test_client, root_user, users_in_db):
        users_at_start = await users_in_db()

        response = await test_client.post(
            "/api/users",
            json={"username": "jdoe", "name": "John Doe", "password": "password"},
        )

        assert response.status_code == 201
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["username"] == "jdoe"
        assert body["name"] == "John Doe"
        assert body["notes"] == []
        assert set(body) == {"id", "username", "name", "notes"}

        users_at_end = await users_in_db()
        assert len(users_at_end) == len(users_at_start) + 1
        usernames = [user.username for user in users_at_end]
        assert "root" in usernames
        assert "jdoe" in usernames

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, test_client, users_in_db):
        await test_client.post("/api/users", json={"username": "jdoe", "password": "password"})

        stored = next(user for user in await users_in_db() if user.username == "jdoe")
        assert stored.password_hash != "password"
        assert stored.password_hash.startswith("$2")

    @pytest.mark.asyncio
    async def test_duplicate_username_fails_with_unique_message(self, test_client, root_user, users_in_db):
        users_at_start = await users_in_db()

        response = await test_client.post(
            "/api/users",
            json={"username": "root", "name": "Superuser", "password": "salainen"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/json")
        assert "expected `username` to be unique" in response.json()["message"]
        assert len(await users_in_db()) == len(users_at_start)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"username": "ab", "password": "password"},
            {"username": "jdoe", "password": "pw"},
            {"username": "jdoe"},
            {"password": "password"},
            {"username": "jdoe", "password": "x" * 73},
        ],
    )
    async def test_invalid_registration_is_400(self, test_client, root_user, users_in_db, body):
        response = await test_client.post("/api/users", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert len(await users_in_db()) == 1


class TestListUsers:

    @pytest.mark.asyncio
    async def test_users_list_embeds_notes(self, test_client, initial_notes):
        response = await test_client.get("/api/users")

        assert response.status_code == 200
        users = response.json()
        assert len(users) == 1
        root = users[0]
        assert root["username"] == "root"
        assert [note["content"] for note in root["notes"]] == [n["content"] for n in initial_notes]
        assert "password_hash" not in root

    @pytest.mark.asyncio
    async def test_users_are_listed_in_registration_order(self, test_client, root_user):
        for username in ("zed", "abe"):
            created = await test_client.post("/api/users", json={"username": username, "password": "password"})
            assert created.status_code == 201

        response = await test_client.get("/api/users")

        assert [user["username"] for user in response.json()] == ["root", "zed", "abe"]

    @pytest.mark.asyncio
    async def test_deleted_notes_are_skipped(self, test_client, initial_notes):
        first_id = (await test_client.get("/api/users")).json()[0]["notes"][0]["id"]

        await test_client.delete(f"/api/notes/{first_id}")

        notes = (await test_client.get("/api/users")).json()[0]["notes"]
        assert len(notes) == len(initial_notes) - 1
        assert first_id not in [note["id"] for note in notes]


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token_and_profile(self, test_client, root_user, test_settings):
        response = await test_client.post("/api/login", json={"username": "root", "password": "sekret"})

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "root"
        assert body["name"] == "Superuser"

        claims = jwt.decode(body["token"], test_settings.secret, algorithms=["HS256"])
        assert claims == {"username": "root", "id": str(root_user.id)}

    @pytest.mark.asyncio
    async def test_issued_token_can_create_notes(self, test_client, root_user):
        login = await test_client.post("/api/login", json={"username": "root", "password": "sekret"})
        token = login.json()["token"]

        response = await test_client.post(
            "/api/notes",
            json={"content": "written after login"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 201
        assert response.json()["owner"] == str(root_user.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "credentials",
        [
            {"username": "root", "password": "wrong"},
            {"username": "nobody", "password": "sekret"},
            {"username": "root", "password": "a" * 73},
        ],
    )
    async def test_invalid_credentials_are_401(self, test_client, root_user, credentials):
        response = await test_client.post("/api/login", json=credentials)

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "unauthorized"
        assert body["message"] == "invalid username or password"
        assert "token" not in body
