"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, PushoverConfig, SummarizerConfig) are defined in
src/core/config.py to avoid information leakage between layers.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Optional

import yaml

from src.core.config import (
    DEFAULT_RADIUS_KM,
    DEFAULT_REFERENCE,
    Config,
    LedgerMode,
    PushoverConfig,
    SummarizerConfig,
)
from src.core.geo import ReferencePoint
from src.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


logger = logging.getLogger(__name__)


def _get_secret_manager_client() -> Optional[SecretManagerClient]:
    """Get or create a Secret Manager client.

    Returns None if GCP_PROJECT is not set (e.g., local development).
    """
    project_id = os.environ.get("GCP_PROJECT")
    if not project_id:
        # Try to get from gcloud config
        try:
            result = subprocess.run(
                ["gcloud", "config", "get-value", "project"],
                capture_output=True,
                text=True,
                timeout=2,
            )
            if result.returncode == 0 and result.stdout.strip():
                project_id = result.stdout.strip()
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("gcloud project lookup unavailable: %s", e)

    if project_id:
        return SecretManagerClient(SecretManagerConfig(project_id=project_id))
    return None


def _resolve_value(value: Any, secret_client: Optional[SecretManagerClient] = None) -> Any:
    """Resolve a value that may contain secret or env var placeholders.

    Delegates to SecretManagerClient.resolve() which handles the complexity
    of parsing placeholder syntax (pulling complexity down).

    Args:
        value: Value to resolve (may contain ${...} placeholders)
        secret_client: Client for resolving secrets

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if secret_client:
        return secret_client.resolve(value)

    # No secret client - only handle env vars
    if value.startswith("${") and value.endswith("}"):
        var_spec = value[2:-1]
        if not var_spec.startswith("secret:"):
            env_value = os.environ.get(var_spec)
            if env_value:
                return env_value
            logger.warning("Environment variable %s not set", var_spec)

    return value


def _optional_str(value: Any) -> str | None:
    """Normalize empty strings and unresolved placeholders to None."""
    if value is None:
        return None
    value = str(value)
    if not value or value.startswith("${"):
        return None
    return value


def _parse_reference(data: dict[str, Any]) -> ReferencePoint:
    """Parse the reference point from config data."""
    return ReferencePoint(
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        name=data.get("name", ""),
    )


def _parse_ledger_mode(value: Any) -> LedgerMode:
    """Parse the ledger mode, raising ValueError for unknown modes."""
    if value is None:
        return LedgerMode.COMMIT_AFTER_DISPATCH
    try:
        return LedgerMode(str(value).lower())
    except ValueError:
        valid = ", ".join(m.value for m in LedgerMode)
        raise ValueError(f"Unknown ledger_mode '{value}' (expected one of: {valid})")


def _parse_pushover(
    data: dict[str, Any],
    secret_client: Optional[SecretManagerClient] = None,
) -> PushoverConfig:
    """Parse Pushover settings from config data."""
    return PushoverConfig(
        api_token=_resolve_value(data.get("api_token", ""), secret_client),
        user_key=_resolve_value(data.get("user_key", ""), secret_client),
        device=_optional_str(_resolve_value(data.get("device"), secret_client)),
        timeout_seconds=int(data.get("timeout_seconds", 10)),
    )


def _parse_summarizer(
    data: dict[str, Any],
    secret_client: Optional[SecretManagerClient] = None,
) -> SummarizerConfig:
    """Parse summarizer settings from config data."""
    defaults = SummarizerConfig()
    model = _optional_str(_resolve_value(data.get("model"), secret_client))

    return SummarizerConfig(
        model=model or defaults.model,
        api_key=_optional_str(_resolve_value(data.get("api_key"), secret_client)),
        base_url=_optional_str(_resolve_value(data.get("base_url"), secret_client)),
        timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only secret/env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    # Get Secret Manager client for secret expansion
    secret_client = _get_secret_manager_client()

    reference = DEFAULT_REFERENCE
    if "reference" in data:
        reference = _parse_reference(data["reference"])

    lookback = data.get("lookback_hours")
    feed_limit = data.get("feed_limit")

    return Config(
        reference=reference,
        radius_km=float(data.get("radius_km", DEFAULT_RADIUS_KM)),
        lookback_hours=int(lookback) if lookback is not None else None,
        feed_limit=int(feed_limit) if feed_limit is not None else None,
        feed_timeout_seconds=int(data.get("feed_timeout_seconds", 30)),
        pushover=_parse_pushover(data.get("pushover") or {}, secret_client),
        summarizer=_parse_summarizer(data.get("summarizer") or {}, secret_client),
        firestore_database=data.get("firestore_database"),
        ledger_collection=data.get("ledger_collection", "sent_alerts"),
        alert_log_collection=data.get("alert_log_collection", "alert_log"),
        ledger_mode=_parse_ledger_mode(data.get("ledger_mode")),
        timezone=data.get("timezone", "Asia/Tokyo"),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O. Falls back to environment variables
    when the file does not exist.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        ValueError: If the file is not valid YAML, or a config value is
            missing or invalid
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        logger.warning("Config file is empty, using environment")
        return load_config_from_env()

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    try:
        config = load_config_from_dict(data)
    except KeyError as e:
        raise ValueError(f"Missing config key in {path}: {e}") from e
    except (AttributeError, TypeError) as e:
        raise ValueError(f"Malformed config value in {path}: {e}") from e

    logger.info(
        "Loaded config: reference %s (%.4f, %.4f), radius %.0f km, ledger mode %s",
        config.reference.name or "unnamed",
        config.reference.latitude,
        config.reference.longitude,
        config.radius_km,
        config.ledger_mode.value,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        PUSHOVER_TOKEN: Pushover application token
        PUSHOVER_USER: Pushover user key
        PUSHOVER_TOKEN_SECRET / PUSHOVER_USER_SECRET: Secret Manager names
            (alternatives to the plain variables)
        OPENAI_API_KEY: Summarizer API key
        OPENAI_QUICKMODEL or OPENAI_MODEL: Summarizer model
        OPENAI_BASE_URL: OpenAI-compatible endpoint
        REFERENCE_LATITUDE / REFERENCE_LONGITUDE / REFERENCE_NAME: Monitored location
        RADIUS_KM: Search radius
        LOOKBACK_HOURS: How far back to check
        FEED_LIMIT: Maximum events per fetch
        FIRESTORE_DATABASE: Firestore database name
        LEDGER_MODE: commit_after_dispatch or claim_before_dispatch
        ALERT_TIMEZONE: Timezone for the daily alert log

    Returns:
        Config object from environment
    """
    secret_client = _get_secret_manager_client()

    def _secret_or_env(secret_env: str, default_secret: str, env_name: str) -> str:
        if secret_client:
            secret_name = os.environ.get(secret_env, default_secret)
            value = secret_client.get_secret(secret_name)
            if value:
                logger.info("Using %s from Secret Manager", env_name)
                return value
        return os.environ.get(env_name, "")

    api_token = _secret_or_env("PUSHOVER_TOKEN_SECRET", "pushover-token", "PUSHOVER_TOKEN")
    user_key = _secret_or_env("PUSHOVER_USER_SECRET", "pushover-user", "PUSHOVER_USER")

    if not api_token or not user_key:
        logger.warning("PUSHOVER_TOKEN / PUSHOVER_USER not set and no secret found")

    reference = DEFAULT_REFERENCE
    if os.environ.get("REFERENCE_LATITUDE") and os.environ.get("REFERENCE_LONGITUDE"):
        reference = ReferencePoint(
            latitude=float(os.environ["REFERENCE_LATITUDE"]),
            longitude=float(os.environ["REFERENCE_LONGITUDE"]),
            name=os.environ.get("REFERENCE_NAME", ""),
        )

    lookback = os.environ.get("LOOKBACK_HOURS")
    feed_limit = os.environ.get("FEED_LIMIT")
    model = os.environ.get("OPENAI_QUICKMODEL") or os.environ.get("OPENAI_MODEL")

    return Config(
        reference=reference,
        radius_km=float(os.environ.get("RADIUS_KM", DEFAULT_RADIUS_KM)),
        lookback_hours=int(lookback) if lookback else None,
        feed_limit=int(feed_limit) if feed_limit else None,
        pushover=PushoverConfig(api_token=api_token, user_key=user_key),
        summarizer=SummarizerConfig(
            model=model or SummarizerConfig().model,
            api_key=os.environ.get("OPENAI_API_KEY") or None,
            base_url=os.environ.get("OPENAI_BASE_URL") or None,
        ),
        firestore_database=os.environ.get("FIRESTORE_DATABASE"),
        ledger_mode=_parse_ledger_mode(os.environ.get("LEDGER_MODE")),
        timezone=os.environ.get("ALERT_TIMEZONE", "Asia/Tokyo"),
    )
