"""Notification payload construction - Pure functions.

Turns a batch summary and its tier into the parameters the push
delivery backend needs. Delivery itself lives in the shell.
"""

from dataclasses import dataclass

from src.core.priority import PriorityTier


# Emergency (CRITICAL) notifications repeat until acknowledged
CRITICAL_EXPIRE_SECONDS = 3600
CRITICAL_RETRY_SECONDS = 180


@dataclass(frozen=True)
class NotificationPayload:
    """A push notification ready for delivery.

    Attributes:
        message: Body text, may contain <b>, <i> and <u> markup
        priority: Tier of the batch
        urgent: True when the backend should keep re-alerting
        expire_after_seconds: Stop re-alerting after this long (urgent only)
        retry_interval_seconds: Seconds between re-alerts (urgent only)
        title: Optional notification title
    """
    message: str
    priority: PriorityTier
    urgent: bool = False
    expire_after_seconds: int | None = None
    retry_interval_seconds: int | None = None
    title: str | None = None


def build_notification(
    message: str,
    tier: PriorityTier,
    title: str | None = None,
) -> NotificationPayload:
    """Build the payload for one tier's batch.

    Pure function.

    Args:
        message: Summary text for the batch
        tier: Tier of the batch
        title: Optional notification title

    Returns:
        NotificationPayload, with retry parameters set for CRITICAL
    """
    if tier == PriorityTier.CRITICAL:
        return NotificationPayload(
            message=message,
            priority=tier,
            urgent=True,
            expire_after_seconds=CRITICAL_EXPIRE_SECONDS,
            retry_interval_seconds=CRITICAL_RETRY_SECONDS,
            title=title,
        )

    return NotificationPayload(message=message, priority=tier, title=title)
