"""Tests for Secret Manager placeholder resolution."""

import os
from unittest.mock import MagicMock, patch

from google.api_core.exceptions import NotFound, PermissionDenied

from src.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


def _client_returning(value: bytes) -> SecretManagerClient:
    client = SecretManagerClient(SecretManagerConfig(project_id="proj"))
    client._client = MagicMock()
    client._client.access_secret_version.return_value.payload.data = value
    return client


class TestGetSecret:
    """Tests for SecretManagerClient.get_secret()."""

    def test_reads_latest_version(self):
        client = _client_returning(b"token\n")

        assert client.get_secret("pushover-token") == "token"
        client._client.access_secret_version.assert_called_once_with(
            request={"name": "projects/proj/secrets/pushover-token/versions/latest"}
        )

    def test_no_project_returns_none(self):
        assert SecretManagerClient().get_secret("x") is None

    def test_failure_returns_none(self):
        client = _client_returning(b"")
        client._client.access_secret_version.side_effect = PermissionDenied("denied")

        assert client.get_secret("x") is None


class TestResolve:
    """Tests for SecretManagerClient.resolve()."""

    def test_plain_value_unchanged(self):
        assert SecretManagerClient().resolve("plain") == "plain"

    def test_secret_placeholder(self):
        assert _client_returning(b"s3cret").resolve("${secret:pushover-user}") == "s3cret"

    def test_env_placeholder(self):
        with patch.dict(os.environ, {"PUSHOVER_USER": "env-user"}):
            assert SecretManagerClient().resolve("${PUSHOVER_USER}") == "env-user"

    def test_unresolved_placeholder_returned(self):
        client = _client_returning(b"")
        client._client.access_secret_version.side_effect = NotFound("missing")

        assert client.resolve("${secret:nope}") == "${secret:nope}"
