"""Unit tests for access token verification."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from athos.shared.config import Settings
from athos.shared.exceptions import AuthenticationError
from athos.shared.tokens import create_access_token, decode_access_token


class TestAccessTokens:
    """Tests for create_access_token and decode_access_token."""

    @pytest.fixture
    def token_settings(self):
        return Settings(jwt_secret_key="test-secret", jwt_expiration_hours=1)

    def _encode(self, payload, settings):
        return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    def test_round_trip(self, token_settings, user_id):
        """Test that a created token decodes to the same learner."""
        token = create_access_token(user_id, token_settings)
        assert decode_access_token(token, token_settings) == user_id

    def test_expired_token(self, token_settings):
        """Test that expired tokens are rejected with a specific message."""
        token = self._encode({
            "sub": str(uuid4()),
            "type": "access",
            "exp": datetime.now(timezone.utc) - timedelta(minutes=5),
        }, token_settings)

        with pytest.raises(AuthenticationError, match="Token has expired"):
            decode_access_token(token, token_settings)

    def test_wrong_secret(self, token_settings, user_id):
        """Test that tokens signed with another key are rejected."""
        token = create_access_token(user_id, Settings(jwt_secret_key="other-secret"))
        with pytest.raises(AuthenticationError):
            decode_access_token(token, token_settings)

    def test_wrong_type(self, token_settings):
        """Test that non-access tokens are rejected."""
        token = self._encode({
            "sub": str(uuid4()),
            "type": "refresh",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        }, token_settings)
        with pytest.raises(AuthenticationError):
            decode_access_token(token, token_settings)

    def test_malformed_subject(self, token_settings):
        """Test that a subject that is not a UUID is rejected."""
        token = self._encode({
            "sub": "not-a-uuid",
            "type": "access",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        }, token_settings)
        with pytest.raises(AuthenticationError):
            decode_access_token(token, token_settings)

    def test_garbage(self, token_settings):
        """Test that a non-JWT string is rejected."""
        with pytest.raises(AuthenticationError):
            decode_access_token("not.a.token", token_settings)
