"""
Jotter Backend — Auth Service Unit Tests
=========================================

What:  Tests for AuthService with UserStore replaced by an AsyncMock.

What we test:
    ✅ Bearer header parsing (missing, wrong scheme, empty token)
    ✅ Token issue/verify and rejection of foreign signatures
    ✅ Login: password is never checked for an unknown username
    ✅ authenticate(): every bad claim is a 401, no lookup after a failure
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import jwt
import pytest

from jotter.exceptions import InvalidIdentifierError, UnauthorizedError
from jotter.services.auth_service import AuthService


def make_user(username="root", name="Superuser", password_hash="$2b$04$hash"):
    user = MagicMock()
    user.id = uuid.uuid4()
    user.username = username
    user.name = name
    user.password_hash = password_hash
    return user


class TestExtractBearerToken:

    def test_valid_header(self):
        assert AuthService.extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert AuthService.extract_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer    ", "Basic abc", "Token abc"])
    def test_rejected_headers(self, header):
        with pytest.raises(UnauthorizedError):
            AuthService.extract_bearer_token(header)


class TestTokens:

    def test_issued_token_carries_username_and_id(self, auth_service, test_settings):
        user = make_user()

        token = auth_service.issue_token(user)

        claims = jwt.decode(token, test_settings.secret, algorithms=["HS256"])
        assert claims == {"username": "root", "id": str(user.id)}

    def test_decode_round_trip(self, auth_service):
        user = make_user()
        assert auth_service.decode_token(auth_service.issue_token(user))["id"] == str(user.id)

    def test_foreign_signature_is_rejected(self, auth_service):
        forged = jwt.encode({"id": str(uuid.uuid4())}, "another-secret-that-is-32-bytes-long!", algorithm="HS256")

        with pytest.raises(UnauthorizedError) as exc_info:
            auth_service.decode_token(forged)

        assert exc_info.value.message == "token invalid"

    def test_garbage_is_rejected(self, auth_service):
        with pytest.raises(UnauthorizedError):
            auth_service.decode_token("not-a-token")


class TestPasswords:

    @pytest.mark.asyncio
    async def test_hash_then_verify(self, auth_service):
        password_hash = await auth_service.hash_password("sekret")

        assert password_hash != "sekret"
        assert await auth_service.verify_password("sekret", password_hash) is True
        assert await auth_service.verify_password("wrong", password_hash) is False

    @pytest.mark.asyncio
    async def test_password_over_72_bytes_never_matches(self, auth_service):
        password_hash = await auth_service.hash_password("sekret")

        assert await auth_service.verify_password("a" * 73, password_hash) is False
        assert await auth_service.verify_password("é" * 37, password_hash) is False

    @pytest.mark.asyncio
    async def test_same_password_hashes_differently(self, auth_service):
        first = await auth_service.hash_password("sekret")
        second = await auth_service.hash_password("sekret")

        assert first != second


class TestLogin:

    @pytest.mark.asyncio
    async def test_successful_login(self, auth_service):
        user = make_user()
        users = MagicMock()
        users.find_by_username = AsyncMock(return_value=user)

        with patch.object(auth_service, "verify_password", AsyncMock(return_value=True)):
            result = await auth_service.login(users, "root", "sekret")

        assert result.username == "root"
        assert result.name == "Superuser"
        assert auth_service.decode_token(result.token)["id"] == str(user.id)

    @pytest.mark.asyncio
    async def test_unknown_user_never_checks_password(self, auth_service):
        users = MagicMock()
        users.find_by_username = AsyncMock(return_value=None)

        with patch.object(auth_service, "verify_password", AsyncMock()) as verify:
            with pytest.raises(UnauthorizedError) as exc_info:
                await auth_service.login(users, "nobody", "sekret")

            verify.assert_not_awaited()

        assert exc_info.value.message == "invalid username or password"

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service):
        users = MagicMock()
        users.find_by_username = AsyncMock(return_value=make_user())

        with patch.object(auth_service, "verify_password", AsyncMock(return_value=False)):
            with pytest.raises(UnauthorizedError) as exc_info:
                await auth_service.login(users, "root", "wrong")

        assert exc_info.value.message == "invalid username or password"


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_resolves_the_token_owner(self, auth_service):
        user = make_user()
        users = MagicMock()
        users.find_by_id = AsyncMock(return_value=user)

        result = await auth_service.authenticate(users, f"Bearer {auth_service.issue_token(user)}")

        assert result is user
        users.find_by_id.assert_awaited_once_with(str(user.id))

    @pytest.mark.asyncio
    async def test_missing_header_stops_before_lookup(self, auth_service):
        users = MagicMock()
        users.find_by_id = AsyncMock()

        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate(users, None)

        users.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_without_id_stops_before_lookup(self, auth_service, test_settings):
        token = jwt.encode({"username": "root"}, test_settings.secret, algorithm="HS256")
        users = MagicMock()
        users.find_by_id = AsyncMock()

        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate(users, f"Bearer {token}")

        users.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_id_claim_is_unauthorized(self, auth_service, test_settings):
        token = jwt.encode({"username": "root", "id": "xyz"}, test_settings.secret, algorithm="HS256")
        users = MagicMock()
        users.find_by_id = AsyncMock(side_effect=InvalidIdentifierError("xyz", resource="user"))

        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate(users, f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_deleted_user_is_unauthorized(self, auth_service):
        users = MagicMock()
        users.find_by_id = AsyncMock(return_value=None)

        with pytest.raises(UnauthorizedError):
            await auth_service.authenticate(users, f"Bearer {auth_service.issue_token(make_user())}")
