"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from src.core.geo import ReferencePoint


# Kofu, Yamanashi
DEFAULT_REFERENCE = ReferencePoint(
    latitude=35.662139,
    longitude=138.568222,
    name="Kofu",
)
DEFAULT_RADIUS_KM = 100.0


class LedgerMode(str, Enum):
    """When the idempotency ledger is written relative to dispatch.

    COMMIT_AFTER_DISPATCH marks events once every tier has been handled.
    CLAIM_BEFORE_DISPATCH claims each event with a create-if-absent write
    first, so overlapping cycles cannot both alert the same event.
    """
    COMMIT_AFTER_DISPATCH = "commit_after_dispatch"
    CLAIM_BEFORE_DISPATCH = "claim_before_dispatch"


@dataclass
class PushoverConfig:
    """Pushover delivery settings.

    Attributes:
        api_token: Application token
        user_key: User or group key receiving alerts
        device: Restrict delivery to one device (None for all)
        timeout_seconds: HTTP request timeout
    """
    api_token: str = ""
    user_key: str = ""
    device: str | None = None
    timeout_seconds: int = 10


@dataclass
class SummarizerConfig:
    """Text-generation settings.

    Attributes:
        model: Chat completion model name
        api_key: API key (None to let the client read OPENAI_API_KEY)
        base_url: OpenAI-compatible endpoint (None for the default)
        timeout_seconds: Request timeout
    """
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    base_url: str | None = None
    timeout_seconds: float = 60.0


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        reference: Default monitored location
        radius_km: Default search radius around the reference point
        lookback_hours: How far back to fetch (None for the feed default)
        feed_limit: Maximum events per fetch (None for no limit)
        feed_timeout_seconds: USGS request timeout
        pushover: Notification delivery settings
        summarizer: Text-generation settings
        firestore_database: Firestore database name (None for default)
        ledger_collection: Collection holding one document per alerted event
        alert_log_collection: Collection holding dispatched batches
        ledger_mode: Ledger write policy
        timezone: IANA timezone used for "today" in the alert log
    """
    reference: ReferencePoint = field(default_factory=lambda: DEFAULT_REFERENCE)
    radius_km: float = DEFAULT_RADIUS_KM
    lookback_hours: int | None = None
    feed_limit: int | None = None
    feed_timeout_seconds: int = 30
    pushover: PushoverConfig = field(default_factory=PushoverConfig)
    summarizer: SummarizerConfig = field(default_factory=SummarizerConfig)
    firestore_database: str | None = None
    ledger_collection: str = "sent_alerts"
    alert_log_collection: str = "alert_log"
    ledger_mode: LedgerMode = LedgerMode.COMMIT_AFTER_DISPATCH
    timezone: str = "Asia/Tokyo"


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_radius(radius_km: float, field_name: str) -> list[ValidationError]:
    """Validate a search radius.

    Pure function.
    """
    if not math.isfinite(radius_km) or radius_km <= 0:
        return [ValidationError(
            field=field_name,
            message=f"Radius must be a positive number, got {radius_km}",
        )]
    return []


def _is_unresolved(value: str | None) -> bool:
    """True for empty values or leftover ${...} placeholders."""
    return not value or value.startswith("${")


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(validate_coordinates(
        config.reference.latitude,
        config.reference.longitude,
        "reference",
    ))
    errors.extend(validate_radius(config.radius_km, "radius_km"))

    if config.lookback_hours is not None and config.lookback_hours <= 0:
        errors.append(ValidationError(
            field="lookback_hours",
            message=f"Lookback must be positive, got {config.lookback_hours}",
        ))

    if config.feed_limit is not None and config.feed_limit <= 0:
        errors.append(ValidationError(
            field="feed_limit",
            message=f"Feed limit must be positive, got {config.feed_limit}",
        ))

    # Warn about missing credentials
    if _is_unresolved(config.pushover.api_token):
        errors.append(ValidationError(
            field="pushover.api_token",
            message="Pushover API token not resolved",
            severity="warning",
        ))
    if _is_unresolved(config.pushover.user_key):
        errors.append(ValidationError(
            field="pushover.user_key",
            message="Pushover user key not resolved",
            severity="warning",
        ))
    if config.summarizer.api_key is not None and _is_unresolved(config.summarizer.api_key):
        errors.append(ValidationError(
            field="summarizer.api_key",
            message="Summarizer API key not resolved (still contains placeholder)",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
