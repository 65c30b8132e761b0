import pytest
from datetime import timedelta
from unittest.mock import patch
from fastapi import HTTPException

from src.core.security import (
    create_access_token,
    get_current_token_payload,
    get_current_user_email,
    get_current_user_id,
)

# Mock settings
@pytest.fixture
def mock_settings():
    with patch("src.core.security.settings") as mock:
        mock.security.secret_key = "test_secret"
        mock.security.algorithm = "HS256"
        mock.security.access_token_expire_minutes = 15
        yield mock

class TestSecurity:

    def test_create_access_token(self, mock_settings):
        token = create_access_token({"sub": "test_user", "email": "user@example.com"})

        assert isinstance(token, str)
        assert len(token) > 0

    @pytest.mark.asyncio
    async def test_get_current_token_payload_valid(self, mock_settings):
        token = create_access_token({"sub": "test_user", "email": "user@example.com"})

        payload = await get_current_token_payload(token)
        assert payload["sub"] == "test_user"
        assert payload["email"] == "user@example.com"

    @pytest.mark.asyncio
    async def test_get_current_token_payload_expired(self, mock_settings):
        token = create_access_token({"sub": "test_user"}, expires_delta=timedelta(minutes=-1))

        with pytest.raises(HTTPException) as exc:
            await get_current_token_payload(token)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Token has expired"

    @pytest.mark.asyncio
    async def test_get_current_token_payload_invalid(self, mock_settings):
        with pytest.raises(HTTPException) as exc:
            await get_current_token_payload("invalid.token.structure")
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_get_current_user_id(self):
        assert await get_current_user_id({"sub": "user_123"}) == "user_123"

        with pytest.raises(HTTPException) as exc:
            await get_current_user_id({})
        assert exc.value.status_code == 403

    @pytest.mark.asyncio
    async def test_get_current_user_email(self):
        assert await get_current_user_email({"email": "user@example.com"}) == "user@example.com"

        with pytest.raises(HTTPException) as exc:
            await get_current_user_email({"sub": "user_123"})
        assert exc.value.status_code == 403
