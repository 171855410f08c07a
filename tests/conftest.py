"""Shared fixtures: earthquake factories and in-memory store fakes."""

from datetime import datetime, timezone
from typing import Any

import pytest

from src.core.earthquake import Earthquake
from src.core.enrichment import EnrichedEvent
from src.core.geo import ReferencePoint
from src.core.priority import PriorityTier, classify
from src.core.records import AlertRecord


KOFU = ReferencePoint(latitude=35.662139, longitude=138.568222, name="Kofu")


class InMemoryLedger:
    """Dict-backed stand-in for FirestoreLedger."""

    def __init__(self, existing: dict[str, dict[str, Any]] | None = None) -> None:
        self.docs: dict[str, dict[str, Any]] = dict(existing or {})
        self.reads: list[str] = []
        self.writes: list[str] = []
        self.released: list[str] = []

    def has_alerted(self, event_id: str) -> bool:
        self.reads.append(event_id)
        return event_id in self.docs

    def record_alerted(self, event_id: str, record: dict[str, Any]) -> bool:
        self.writes.append(event_id)
        self.docs[event_id] = record
        return True

    def claim(self, event_id: str, record: dict[str, Any]) -> bool:
        if event_id in self.docs:
            return False
        self.writes.append(event_id)
        self.docs[event_id] = record
        return True

    def release(self, event_id: str) -> bool:
        self.released.append(event_id)
        self.docs.pop(event_id, None)
        return True


class InMemoryAlertLog:
    """List-backed stand-in for FirestoreAlertLog."""

    def __init__(self) -> None:
        self.records: list[AlertRecord] = []

    def append(self, record: AlertRecord) -> str | None:
        self.records.append(record)
        return f"log{len(self.records)}"


@pytest.fixture
def kofu():
    """The default reference point."""
    return KOFU


@pytest.fixture
def ledger():
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def alert_log():
    """Empty in-memory alert log."""
    return InMemoryAlertLog()


@pytest.fixture
def make_earthquake():
    """Factory for Earthquake objects."""
    def _make(
        event_id: str = "us1",
        magnitude: float = 6.5,
        depth_km: float = 10.0,
        latitude: float = 36.1,
        longitude: float = 138.9,
    ) -> Earthquake:
        return Earthquake(
            id=event_id,
            magnitude=magnitude,
            depth_km=depth_km,
            latitude=latitude,
            longitude=longitude,
            time=datetime(2024, 1, 1, 7, 10, 0, tzinfo=timezone.utc),
            title=f"M {magnitude:.1f} - test event {event_id}",
            place="test place",
        )
    return _make


@pytest.fixture
def make_event(make_earthquake):
    """Factory for EnrichedEvent objects with explicit derived values."""
    def _make(
        event_id: str = "us1",
        magnitude: float = 6.5,
        depth_km: float = 10.0,
        distance_km: float = 50.0,
        estimated_pga: float = 0.1,
        priority: PriorityTier | None = None,
    ) -> EnrichedEvent:
        return EnrichedEvent(
            earthquake=make_earthquake(event_id, magnitude, depth_km),
            distance_km=distance_km,
            estimated_pga=estimated_pga,
            priority=priority if priority is not None else classify(magnitude, depth_km),
        )
    return _make


@pytest.fixture
def make_feature():
    """Factory for USGS GeoJSON features."""
    def _make(
        event_id: str = "e1",
        magnitude: float = 6.5,
        depth_km: float = 10.0,
        latitude: float = 36.1,
        longitude: float = 138.9,
    ) -> dict[str, Any]:
        return {
            "type": "Feature",
            "id": event_id,
            "properties": {
                "mag": magnitude,
                "place": f"near {event_id}",
                "title": f"M {magnitude:.1f} - near {event_id}",
                "time": 1704093000000,
                "url": f"https://earthquake.usgs.gov/earthquakes/eventpage/{event_id}",
            },
            "geometry": {
                "type": "Point",
                "coordinates": [longitude, latitude, depth_km],
            },
        }
    return _make
