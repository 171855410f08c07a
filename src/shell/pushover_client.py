"""Pushover Client - Imperative Shell.

This module delivers push notifications through the Pushover Messages API.
All I/O is contained here; payload construction is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from src.core.notification import NotificationPayload


logger = logging.getLogger(__name__)


# Pushover Messages API endpoint
PUSHOVER_API_URL = "https://api.pushover.net/1/messages.json"

# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 10


@dataclass
class PushoverCredentials:
    """Pushover credentials.

    Attributes:
        api_token: Application API token
        user_key: User or group key
    """
    api_token: str
    user_key: str


@dataclass
class PushoverResponse:
    """Response from the Pushover API.

    Attributes:
        success: Whether the notification was accepted
        status_code: HTTP status code (0 if no response)
        request_id: Pushover request ID if returned
        receipt: Receipt for emergency-priority messages
        error: Error message if failed
    """
    success: bool
    status_code: int
    request_id: str | None = None
    receipt: str | None = None
    error: str | None = None


class PushoverClient:
    """Client for sending push notifications via Pushover.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        credentials: PushoverCredentials | None = None,
        device: str | None = None,
        api_url: str = PUSHOVER_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Pushover client.

        Args:
            credentials: Token and user key (required to send)
            device: Restrict delivery to one device
            api_url: Messages API endpoint
            timeout: Request timeout in seconds
        """
        self.credentials = credentials
        self.device = device
        self.api_url = api_url
        self.timeout = timeout

    def _build_form(
        self,
        payload: NotificationPayload,
        credentials: PushoverCredentials,
    ) -> dict[str, Any]:
        """Build the form body for a message request."""
        form: dict[str, Any] = {
            "token": credentials.api_token,
            "user": credentials.user_key,
            "message": payload.message,
            "html": 1,
            "priority": int(payload.priority),
        }

        if payload.title:
            form["title"] = payload.title

        if self.device:
            form["device"] = self.device

        if payload.urgent:
            form["expire"] = payload.expire_after_seconds
            form["retry"] = payload.retry_interval_seconds

        return form

    def send(self, payload: NotificationPayload) -> PushoverResponse:
        """Send a notification.

        This method performs HTTP I/O. It never raises; failures are
        reported in the returned response.

        Args:
            payload: Notification to deliver

        Returns:
            PushoverResponse indicating success or failure
        """
        if self.credentials is None:
            logger.error("Pushover credentials not configured")
            return PushoverResponse(
                success=False,
                status_code=0,
                error="Pushover credentials not configured",
            )

        form = self._build_form(payload, self.credentials)

        logger.info(
            "Sending Pushover notification (priority %d, urgent=%s)",
            form["priority"],
            payload.urgent,
        )

        try:
            response = requests.post(
                self.api_url,
                data=form,
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error("Pushover request timed out")
            return PushoverResponse(
                success=False,
                status_code=0,
                error="Request timed out",
            )
        except requests.RequestException as e:
            logger.error("Pushover request failed: %s", str(e))
            return PushoverResponse(
                success=False,
                status_code=0,
                error=str(e),
            )

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 200 and body.get("status") == 1:
            logger.info("Notification accepted by Pushover: %s", body.get("request"))
            return PushoverResponse(
                success=True,
                status_code=response.status_code,
                request_id=body.get("request"),
                receipt=body.get("receipt"),
            )

        errors = body.get("errors") or [response.text]
        error_text = "; ".join(str(e) for e in errors)
        logger.warning(
            "Pushover returned failure: %d - %s",
            response.status_code,
            error_text,
        )
        return PushoverResponse(
            success=False,
            status_code=response.status_code,
            request_id=body.get("request"),
            error=error_text,
        )
