"""Test authentication utilities."""

from types import SimpleNamespace

import pytest
from cortex.auth import verify_token
from cortex.errors import StoreTimeout, Unauthorized

from conftest import TEST_USER_ID, VALID_TOKEN, FakeSupabase


class TestVerifyToken:
    @pytest.mark.asyncio
    async def test_valid_token(self):
        ctx = await verify_token(FakeSupabase(), VALID_TOKEN)
        assert ctx.user_id == TEST_USER_ID
        assert ctx.email == "me@example.com"

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        with pytest.raises(Unauthorized) as exc_info:
            await verify_token(FakeSupabase(), "expired")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_response_without_user(self):
        db = FakeSupabase()
        db.auth = SimpleNamespace(get_user=lambda jwt: SimpleNamespace(user=None))

        with pytest.raises(Unauthorized):
            await verify_token(db, VALID_TOKEN)

    @pytest.mark.asyncio
    async def test_timeout_is_unauthorized(self, monkeypatch):
        async def _timeout(fn, timeout=None):
            raise StoreTimeout("Store call timed out after 10.0s")

        monkeypatch.setattr("cortex.auth.run_store_call", _timeout)

        with pytest.raises(Unauthorized, match="timed out"):
            await verify_token(FakeSupabase(), VALID_TOKEN)
