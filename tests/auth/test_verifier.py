"""Tests for the credential pre-flight checks."""

from unittest.mock import AsyncMock, patch

import pytest

from tfc_publisher.core.config import Settings
from tfc_publisher.core.errors import (
    NETWORK_ERROR,
    AuthenticationError,
    MissingCommitShaError,
    MissingCredentialError,
    RegistryError,
)
from tfc_publisher.auth.verifier import verify_auth, verify_environment

PROBE = "tfc_publisher.registry.client.list_organizations"


class TestVerifyEnvironment:
    def test_complete_environment(self, settings):
        assert verify_environment(settings) == []

    def test_reports_each_missing_variable(self):
        errors = verify_environment(Settings(_env_file=None, tfc_token="", github_sha=""))
        assert [type(e) for e in errors] == [MissingCredentialError, MissingCommitShaError]


class TestVerifyAuth:
    @pytest.mark.asyncio
    async def test_missing_token_makes_no_request(self):
        probe = AsyncMock()
        with patch(PROBE, probe):
            with pytest.raises(MissingCredentialError):
                await verify_auth(Settings(_env_file=None, tfc_token=""))
        probe.assert_not_called()

    @pytest.mark.asyncio
    async def test_accepted_token(self, settings, host_logger):
        probe = AsyncMock(return_value={"data": []})
        with patch(PROBE, probe):
            await verify_auth(settings, host_logger)

        probe.assert_awaited_once_with(
            settings.tfc_token,
            registry_url="https://tfc.example.com",
            timeout=5,
        )
        assert host_logger.messages == [
            "Verify authentication for https://tfc.example.com",
            "Registry token verified",
        ]

    @pytest.mark.asyncio
    async def test_rejected_token_becomes_authentication_error(self, settings):
        rejection = RegistryError.from_status(401, "Unauthorized", '{"errors":["unauthorized"]}')
        with patch(PROBE, AsyncMock(side_effect=rejection)):
            with pytest.raises(AuthenticationError) as exc_info:
                await verify_auth(settings)

        err = exc_info.value
        assert err.code == "EINVALIDTFCTOKEN"
        assert err.status == 401
        assert "unauthorized" in err.body
        assert err.__cause__ is rejection

    @pytest.mark.asyncio
    async def test_network_failure_propagates(self, settings):
        failure = RegistryError("Network error", NETWORK_ERROR, "timed out")
        with patch(PROBE, AsyncMock(side_effect=failure)):
            with pytest.raises(RegistryError) as exc_info:
                await verify_auth(settings)

        assert exc_info.value is failure
