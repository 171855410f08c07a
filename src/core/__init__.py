"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake data parsing
- Distance and ground-motion estimation
- Priority classification
- Batching and deduplication logic
- Notification payloads and message formatting

All functions here are deterministic and have no I/O.
"""

from src.core.earthquake import Earthquake, parse_earthquakes
from src.core.geo import ReferencePoint, calculate_distance, estimate_pga
from src.core.priority import PriorityTier, classify
from src.core.enrichment import EnrichedEvent, enrich_earthquake
from src.core.dedup import TierBatch, group_by_tier, compute_events_to_commit
from src.core.notification import NotificationPayload, build_notification
from src.core.records import AlertRecord, ledger_record

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    # Geo
    "ReferencePoint",
    "calculate_distance",
    "estimate_pga",
    # Priority
    "PriorityTier",
    "classify",
    # Enrichment
    "EnrichedEvent",
    "enrich_earthquake",
    # Dedup
    "TierBatch",
    "group_by_tier",
    "compute_events_to_commit",
    # Notification
    "NotificationPayload",
    "build_notification",
    # Records
    "AlertRecord",
    "ledger_record",
]
