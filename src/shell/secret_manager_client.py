"""Secret Manager Client - Imperative Shell.

This module handles reading secrets from Google Cloud Secret Manager.
All I/O is contained here; configuration logic is in the core module.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.auth.exceptions import GoogleAuthError
from google.cloud import secretmanager


logger = logging.getLogger(__name__)


# Matches a whole-value placeholder: ${secret:name} or ${ENV_VAR}
PLACEHOLDER_PATTERN = re.compile(r"^\$\{(?:(secret):)?([^}]+)\}$")


@dataclass
class SecretManagerConfig:
    """Configuration for Secret Manager client.

    Attributes:
        project_id: GCP project ID (None for default)
    """
    project_id: Optional[str] = None


class SecretManagerClient:
    """Client for reading secrets from Google Cloud Secret Manager.

    This is part of the imperative shell - it handles secret I/O.
    """

    def __init__(self, config: Optional[SecretManagerConfig] = None) -> None:
        """Initialize Secret Manager client.

        Args:
            config: Secret Manager configuration
        """
        self.config = config or SecretManagerConfig()
        self._client: Optional[secretmanager.SecretManagerServiceClient] = None

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy initialization of Secret Manager client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def get_secret(
        self,
        secret_name: str,
        version: str = "latest",
        project_id: Optional[str] = None,
    ) -> Optional[str]:
        """Read one secret version as text.

        This method performs I/O. Missing or unreadable secrets are logged
        and reported as None so callers can fall back to other sources.
        """
        project = project_id or self.config.project_id
        if not project:
            logger.error("No project ID configured for Secret Manager")
            return None

        name = f"projects/{project}/secrets/{secret_name}/versions/{version}"

        try:
            response = self.client.access_secret_version(request={"name": name})
        except NotFound:
            logger.warning("Secret %s (version %s) not found in %s", secret_name, version, project)
            return None
        except (GoogleAPICallError, GoogleAuthError) as e:
            logger.error("Failed to fetch secret %s: %s", secret_name, e)
            return None

        logger.info("Fetched secret: %s", secret_name)
        return response.payload.data.decode("UTF-8").strip()

    def resolve(self, value: str) -> str:
        """Resolve a ${secret:name} or ${ENV_VAR} placeholder.

        Values that are not placeholders, and placeholders that cannot be
        resolved, are returned unchanged.

        Args:
            value: Raw configuration value

        Returns:
            Resolved value
        """
        match = PLACEHOLDER_PATTERN.match(value)
        if not match:
            return value

        is_secret, name = match.groups()

        if is_secret:
            secret_value = self.get_secret(name)
            if secret_value:
                return secret_value
            logger.warning("Secret %s could not be resolved", name)
            return value

        env_value = os.environ.get(name)
        if env_value:
            return env_value

        logger.warning("Environment variable %s not set", name)
        return value
