"""Earthquake enrichment - Pure functions.

Combines a parsed Earthquake with the values derived from the reference
point: distance, estimated ground motion and alert tier.
"""

from dataclasses import dataclass
from typing import Any

from src.core.earthquake import Earthquake
from src.core.geo import ReferencePoint, distance_to_reference, estimate_pga
from src.core.priority import PriorityTier, classify


@dataclass(frozen=True)
class EnrichedEvent:
    """An earthquake plus the values derived for one cycle.

    Attributes:
        earthquake: The parsed earthquake
        distance_km: Epicentral distance to the reference point
        estimated_pga: Estimated peak ground acceleration (g)
        priority: Alert tier
    """
    earthquake: Earthquake
    distance_km: float
    estimated_pga: float
    priority: PriorityTier

    @property
    def id(self) -> str:
        """The underlying USGS event ID."""
        return self.earthquake.id


def enrich_earthquake(
    earthquake: Earthquake,
    reference: ReferencePoint,
) -> EnrichedEvent:
    """Compute distance, PGA and tier for an earthquake.

    Pure function.

    Args:
        earthquake: Parsed earthquake
        reference: Monitored location

    Returns:
        EnrichedEvent for this cycle
    """
    distance = distance_to_reference(
        reference,
        earthquake.latitude,
        earthquake.longitude,
    )

    return EnrichedEvent(
        earthquake=earthquake,
        distance_km=distance,
        estimated_pga=estimate_pga(earthquake.magnitude, earthquake.depth_km, distance),
        priority=classify(earthquake.magnitude, earthquake.depth_km),
    )


def event_to_dict(event: EnrichedEvent) -> dict[str, Any]:
    """Convert an EnrichedEvent to a JSON-serializable dict.

    This is the shape stored in alert log entries and sent to the
    summarizer.
    """
    eq = event.earthquake
    return {
        "id": eq.id,
        "title": eq.title,
        "place": eq.place,
        "magnitude": eq.magnitude,
        "depth_km": eq.depth_km,
        "latitude": eq.latitude,
        "longitude": eq.longitude,
        "occurred_at": eq.time.isoformat() if eq.time else None,
        "url": eq.url,
        "distance_km": event.distance_km,
        "estimated_pga": round(event.estimated_pga, 5),
        "priority": int(event.priority),
    }
