"""Unit tests for IdentityService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from rolo.adapter.identity import JWTIdentityVerifier, MockIdentityVerifier
from rolo.config import AuthSettings
from rolo.domain.error import UnauthenticatedError
from rolo.domain.service import IdentityService
from rolo.util.jwt import create_token
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestExtractBearer:
    """Tests for extract_bearer."""

    def test_extracts_token(self):
        assert IdentityService.extract_bearer("Bearer abc.def") == "abc.def"

    def test_scheme_is_case_insensitive(self):
        assert IdentityService.extract_bearer("bearer abc") == "abc"

    @pytest.mark.parametrize(
        "header", [None, "", "Basic abc", "Bearer", "Bearer ", "Bearer a b"]
    )
    def test_malformed_headers_rejected(self, header):
        with pytest.raises(UnauthenticatedError):
            IdentityService.extract_bearer(header)


class TestAuthenticate:
    """Tests for authenticate with the mock verifier."""

    @pytest.mark.asyncio
    async def test_mock_token_resolves_user(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        user_id = uuid4()

        identity = await identity_service.authenticate(
            f"Bearer {MockIdentityVerifier.token_for(user_id, 'a@example.com')}"
        )

        assert identity.user_id == user_id
        assert identity.email == "a@example.com"

    @pytest.mark.asyncio
    async def test_missing_header_unauthenticated(self, unit_env):
        identity_service = await unit_env.get(IdentityService)

        with pytest.raises(UnauthenticatedError) as exc_info:
            await identity_service.authenticate(None)
        assert exc_info.value.reason == "Access token required"

    @pytest.mark.asyncio
    async def test_garbage_token_unauthenticated(self, unit_env):
        identity_service = await unit_env.get(IdentityService)

        with pytest.raises(UnauthenticatedError):
            await identity_service.authenticate("Bearer mock:not-a-uuid")


class TestJWTVerification:
    """Tests for authenticate with locally verified JWTs."""

    @pytest.fixture
    def settings(self):
        return AuthSettings(jwt_secret="test-secret")

    @pytest.mark.asyncio
    async def test_valid_token(self, settings):
        service = IdentityService(JWTIdentityVerifier(settings))
        user_id = uuid4()
        token = create_token(str(user_id), settings, email="jwt@example.com")

        identity = await service.authenticate(f"Bearer {token}")

        assert identity.user_id == user_id
        assert identity.email == "jwt@example.com"
        assert identity.claims["role"] == "authenticated"

    @pytest.mark.asyncio
    async def test_expired_token_flagged(self, settings):
        service = IdentityService(JWTIdentityVerifier(settings))
        token = create_token(str(uuid4()), settings, expires_in=timedelta(minutes=-5))

        with pytest.raises(UnauthenticatedError) as exc_info:
            await service.authenticate(f"Bearer {token}")
        assert exc_info.value.expired is True

    @pytest.mark.asyncio
    async def test_non_uuid_subject_rejected(self, settings):
        service = IdentityService(JWTIdentityVerifier(settings))
        token = create_token("service-account", settings)

        with pytest.raises(UnauthenticatedError, match="subject"):
            await service.authenticate(f"Bearer {token}")
