"""Cloud Function Entry Point.

This module provides the entry points for Google Cloud Functions.
They are thin wrappers that load configuration and invoke the orchestrator.

- earthquake_check: HTTP, on-demand cycle (?lat=&lng=&radius=)
- earthquake_check_scheduled: Pub/Sub, hourly cycle from Cloud Scheduler
  ("0 */1 * * *") for the configured reference point
- alerts_today: HTTP, read-only listing of today's alert log
"""

import logging
import os
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import functions_framework
from flask import Request

from src.core.config import Config, validate_config, validate_coordinates, validate_radius
from src.core.errors import PersistenceError
from src.core.formatter import format_alert_log
from src.core.geo import ReferencePoint
from src.orchestrator import Orchestrator
from src.shell.config_loader import load_config
from src.shell.firestore_client import FirestoreAlertLog, FirestoreConfig


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


TEXT_HEADERS = {"Content-Type": "text/plain; charset=utf-8"}


def _get_config() -> Config:
    """Load configuration and log any validation problems."""
    config = load_config(os.environ.get("CONFIG_PATH"))

    validation = validate_config(config)
    for problem in validation.errors:
        log = logger.error if problem.severity == "error" else logger.warning
        log("Config %s: %s", problem.field, problem.message)

    return config


def _parse_location(
    args: Any,
    config: Config,
) -> tuple[ReferencePoint, float]:
    """Read lat/lng/radius query parameters, falling back to config.

    Raises:
        ValueError: If a parameter is not a number or is out of range
    """
    reference = config.reference
    latitude = float(args.get("lat", reference.latitude))
    longitude = float(args.get("lng", reference.longitude))
    radius_km = float(args.get("radius", config.radius_km))

    problems = validate_coordinates(latitude, longitude, "location")
    problems.extend(validate_radius(radius_km, "radius"))
    if problems:
        raise ValueError("; ".join(p.message for p in problems))

    if (latitude, longitude) != (reference.latitude, reference.longitude):
        reference = ReferencePoint(latitude=latitude, longitude=longitude)

    return reference, radius_km


@functions_framework.http
def earthquake_check(request: Request) -> tuple[str, int, dict[str, str]]:
    """HTTP Cloud Function entry point.

    Runs one alert cycle around the requested location.

    Args:
        request: Flask request with optional lat, lng, radius query params

    Returns:
        Tuple of (plain result string, HTTP status code, headers)
    """
    logger.info("Starting earthquake check (HTTP trigger)")

    try:
        config = _get_config()
    except (OSError, ValueError) as e:
        logger.exception("Failed to load configuration")
        return f"Configuration error: {e}", 500, TEXT_HEADERS

    try:
        reference, radius_km = _parse_location(request.args, config)
    except ValueError as e:
        return f"Invalid parameters: {e}", 400, TEXT_HEADERS

    orchestrator = Orchestrator(config)
    result = orchestrator.run(reference, radius_km)

    return result, 200, TEXT_HEADERS


@functions_framework.cloud_event
def earthquake_check_scheduled(cloud_event: Any) -> None:
    """Pub/Sub Cloud Function entry point.

    Triggered hourly by Cloud Scheduler for the configured reference point.

    Args:
        cloud_event: CloudEvent from Pub/Sub
    """
    logger.info("Starting earthquake check (Pub/Sub trigger)")

    try:
        config = _get_config()
    except (OSError, ValueError):
        logger.exception("Failed to load configuration")
        return

    orchestrator = Orchestrator(config)
    result = orchestrator.run()

    logger.info("Result: %s", result)


@functions_framework.http
def alerts_today(request: Request) -> tuple[str, int, dict[str, str]]:
    """HTTP Cloud Function entry point for today's alert log.

    Args:
        request: Flask request (not used, but required by framework)

    Returns:
        Tuple of (formatted text, HTTP status code, headers)
    """
    try:
        config = _get_config()
        tz = ZoneInfo(config.timezone)
    except (OSError, ValueError, KeyError) as e:
        logger.exception("Failed to load configuration")
        return f"Configuration error: {e}", 500, TEXT_HEADERS

    alert_log = FirestoreAlertLog(
        FirestoreConfig(
            database=config.firestore_database,
            collection=config.alert_log_collection,
        )
    )
    today = datetime.now(tz).date()

    try:
        records = alert_log.query_by_day(today, tz)
    except PersistenceError:
        logger.exception("Failed to read alert log")
        return "Error occurred while reading the alert log.", 500, TEXT_HEADERS

    return format_alert_log(records, today, tz), 200, TEXT_HEADERS


# For local testing
if __name__ == "__main__":
    print("Running earthquake check locally...")
    print(Orchestrator(_get_config()).run())
