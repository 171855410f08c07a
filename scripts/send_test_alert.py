#!/usr/bin/env python3
"""Send a test push notification through the configured Pushover account.

⚠️  WARNING: This script sends a REAL notification to the operator's devices!
    CRITICAL test alerts keep re-alerting until acknowledged in Pushover.

This script builds a synthetic earthquake near the configured reference
point, enriches and classifies it with the production core, and sends a
notification using the same payload rules as the alert cycle. A [TEST]
marker is added. Nothing is written to the ledger or the alert log.

Usage:
    # Dry run (preview only, no send)
    python scripts/send_test_alert.py --dry-run

    # Send a WARNING-tier test (M6.2 by default)
    python scripts/send_test_alert.py

    # Send a specific magnitude/depth
    python scripts/send_test_alert.py --magnitude 8.1 --depth 20

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
    GCP_PROJECT: GCP project ID for Secret Manager access
"""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.earthquake import Earthquake
from src.core.enrichment import EnrichedEvent, enrich_earthquake
from src.core.formatter import format_notification_title, get_tier_label
from src.core.geo import ReferencePoint
from src.core.notification import build_notification
from src.shell.config_loader import load_config
from src.shell.pushover_client import PushoverClient, PushoverCredentials

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def create_test_earthquake(
    reference: ReferencePoint,
    magnitude: float = 6.2,
    depth_km: float = 10.0,
) -> Earthquake:
    """Create a synthetic earthquake about 20 km north of the reference point.

    Args:
        reference: Monitored location
        magnitude: Earthquake magnitude
        depth_km: Depth in kilometers

    Returns:
        Synthetic Earthquake object
    """
    now = datetime.now(timezone.utc)
    return Earthquake(
        id="test-earthquake-" + now.strftime("%Y%m%d%H%M%S"),
        magnitude=magnitude,
        depth_km=depth_km,
        latitude=reference.latitude + 0.18,
        longitude=reference.longitude,
        time=now,
        title=f"M {magnitude:.1f} - TEST EVENT near {reference.name or 'reference point'}",
        place=f"near {reference.name or 'reference point'}",
    )


def build_test_message(event: EnrichedEvent) -> str:
    """Build the test notification body."""
    eq = event.earthquake
    return (
        "<b>[TEST]</b> This is a test alert, no earthquake occurred.\n"
        f"<b>{eq.title}</b>\n"
        f"<i>{event.distance_km:.1f} km away, depth {eq.depth_km:.0f} km, "
        f"est. PGA {event.estimated_pga:.3f} g</i>"
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send a test Pushover alert",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview the notification without sending",
    )
    parser.add_argument(
        "--magnitude",
        type=float,
        default=6.2,
        help="Magnitude of the test earthquake (default: 6.2)",
    )
    parser.add_argument(
        "--depth",
        type=float,
        default=10.0,
        help="Depth of the test earthquake in km (default: 10)",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get("CONFIG_PATH", "config/config.yaml"),
        help="Path to config file",
    )

    args = parser.parse_args()

    logger.info("Loading config from: %s", args.config)
    config = load_config(args.config)

    earthquake = create_test_earthquake(config.reference, args.magnitude, args.depth)
    event = enrich_earthquake(earthquake, config.reference)

    logger.info("Test earthquake: %s", earthquake.title)
    logger.info("  Tier: %s", get_tier_label(event.priority))

    if not event.priority.should_alert:
        logger.error("M%.1f at %.0f km depth does not reach any alert tier", args.magnitude, args.depth)
        return 1

    payload = build_notification(
        build_test_message(event),
        event.priority,
        title="[TEST] " + format_notification_title(event.priority, 1),
    )

    if args.dry_run:
        logger.info("DRY RUN - Would send:")
        logger.info("  Title: %s", payload.title)
        logger.info("  Priority: %d (urgent=%s)", int(payload.priority), payload.urgent)
        logger.info("  Message: %s", payload.message)
        return 0

    client = PushoverClient(
        PushoverCredentials(
            api_token=config.pushover.api_token,
            user_key=config.pushover.user_key,
        ),
        device=config.pushover.device,
    )
    response = client.send(payload)

    if response.success:
        logger.info("  ✓ Test alert sent (request %s)", response.request_id)
        return 0

    logger.error("  ✗ Failed to send test alert: %s", response.error)
    return 1


if __name__ == "__main__":
    sys.exit(main())
