"""Unit tests for launch token issuing and verification."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from app.config import settings
from app.core.auth.backend import create_launch_token, verify_launch_token
from app.core.auth.exceptions import InvalidLaunchTokenError
from app.core.constants import LAUNCH_TOKEN_ISSUER


pytestmark = pytest.mark.unit

SECRET = settings.launch_token_secret


class TestCreateLaunchToken:
    """Tests for create_launch_token."""

    def test_returns_jwt_string(self):
        token = create_launch_token("LOC1", "U1")

        assert isinstance(token, str)
        # JWT has three parts separated by dots
        assert token.count(".") == 2

    def test_carries_launch_claims(self):
        token = create_launch_token("LOC1", "U1")

        payload = jwt.decode(token, SECRET, algorithms=[settings.jwt_algorithm])

        assert payload["location_id"] == "LOC1"
        assert payload["user_id"] == "U1"
        assert payload["iss"] == LAUNCH_TOKEN_ISSUER
        assert payload["exp"] > payload["iat"]


class TestVerifyLaunchToken:
    """Tests for verify_launch_token."""

    def test_valid_token_verifies(self):
        token = create_launch_token("LOC1", "U1")

        claims = verify_launch_token(token, SECRET, location_id="LOC1", user_id="U1")

        assert claims.location_id == "LOC1"
        assert claims.user_id == "U1"
        assert claims.issuer == LAUNCH_TOKEN_ISSUER

    def test_wrong_secret_is_rejected(self):
        token = create_launch_token("LOC1", "U1", secret="x" * 40)

        with pytest.raises(InvalidLaunchTokenError) as exc_info:
            verify_launch_token(token, SECRET)

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid verification token"

    def test_expired_token_is_rejected(self):
        token = create_launch_token("LOC1", "U1", expires_delta=timedelta(seconds=-5))

        with pytest.raises(InvalidLaunchTokenError):
            verify_launch_token(token, SECRET)

    def test_malformed_token_is_rejected(self):
        with pytest.raises(InvalidLaunchTokenError):
            verify_launch_token("not-a-jwt", SECRET)

    def test_token_for_another_location_is_rejected(self):
        token = create_launch_token("LOC1", "U1")

        with pytest.raises(InvalidLaunchTokenError) as exc_info:
            verify_launch_token(token, SECRET, location_id="LOC2", user_id="U1")

        assert exc_info.value.details["reason"] == "location_mismatch"

    def test_token_for_another_user_is_rejected(self):
        token = create_launch_token("LOC1", "U1")

        with pytest.raises(InvalidLaunchTokenError) as exc_info:
            verify_launch_token(token, SECRET, location_id="LOC1", user_id="U2")

        assert exc_info.value.details["reason"] == "user_mismatch"

    def test_unbound_token_verifies_for_any_launch(self):
        """A token without launch claims only proves it was signed."""
        expires = datetime.now(UTC) + timedelta(minutes=5)
        token = jwt.encode(
            {"iss": LAUNCH_TOKEN_ISSUER, "exp": expires},
            SECRET,
            algorithm=settings.jwt_algorithm,
        )

        claims = verify_launch_token(token, SECRET, location_id="LOC9", user_id="U9")

        assert claims.location_id is None

    def test_token_without_expiry_is_rejected(self):
        token = jwt.encode(
            {"location_id": "LOC1", "user_id": "U1", "iss": LAUNCH_TOKEN_ISSUER},
            SECRET,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidLaunchTokenError):
            verify_launch_token(token, SECRET, location_id="LOC1", user_id="U1")
