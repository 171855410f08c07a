"""Persisted record shapes - Pure functions.

Builds the documents written to the idempotency ledger and the alert log,
and parses alert log documents read back from the store. The store itself
is handled by the imperative shell (Firestore client).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.core.enrichment import EnrichedEvent, event_to_dict
from src.core.priority import PriorityTier


def ledger_record(event: EnrichedEvent, recorded_at: datetime) -> dict[str, Any]:
    """Build the ledger document marking an event as alerted.

    Pure function.

    Args:
        event: The enriched event being marked
        recorded_at: When the mark is written

    Returns:
        Ledger document body
    """
    eq = event.earthquake
    return {
        "id": eq.id,
        "sent": True,
        "title": eq.title,
        "magnitude": eq.magnitude,
        "depth_km": eq.depth_km,
        "latitude": eq.latitude,
        "longitude": eq.longitude,
        "distance_km": event.distance_km,
        "estimated_pga": event.estimated_pga,
        "priority": int(event.priority),
        "occurred_at": eq.time,
        "recorded_at": recorded_at,
    }


@dataclass(frozen=True)
class AlertRecord:
    """One dispatched batch, as stored in the alert log.

    Attributes:
        timestamp: When the batch was dispatched (UTC)
        message: Summary text that was sent
        priority: Tier of the batch
        earthquakes: Serialized enriched events in the batch, in order
        delivered: Whether the notification service accepted the message
    """
    timestamp: datetime
    message: str
    priority: PriorityTier
    earthquakes: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    delivered: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to a store document."""
        return {
            "timestamp": self.timestamp,
            "message": self.message,
            "priority": int(self.priority),
            "earthquakes": list(self.earthquakes),
            "delivered": self.delivered,
        }


def make_alert_record(
    timestamp: datetime,
    message: str,
    priority: PriorityTier,
    events: list[EnrichedEvent],
    delivered: bool = True,
) -> AlertRecord:
    """Build an AlertRecord for a dispatched batch.

    Pure function.
    """
    return AlertRecord(
        timestamp=timestamp,
        message=message,
        priority=priority,
        earthquakes=tuple(event_to_dict(e) for e in events),
        delivered=delivered,
    )


def alert_record_from_dict(data: dict[str, Any]) -> AlertRecord:
    """Parse a store document into an AlertRecord.

    Pure function. Unknown priorities are read as NONE; documents without
    a delivery flag predate it and were only written on delivery.
    """
    try:
        priority = PriorityTier(int(data.get("priority", -1)))
    except (TypeError, ValueError):
        priority = PriorityTier.NONE

    return AlertRecord(
        timestamp=data["timestamp"],
        message=data.get("message", ""),
        priority=priority,
        earthquakes=tuple(data.get("earthquakes") or ()),
        delivered=bool(data.get("delivered", True)),
    )
