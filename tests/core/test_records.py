"""Unit tests for persisted record shapes."""

from datetime import datetime, timezone

from src.core.priority import PriorityTier
from src.core.records import (
    AlertRecord,
    alert_record_from_dict,
    ledger_record,
    make_alert_record,
)


NOW = datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc)


class TestLedgerRecord:
    """Tests for ledger_record()."""

    def test_contains_required_fields(self, make_event):
        """Ledger documents carry the event snapshot and sent=True."""
        event = make_event("e1", magnitude=6.5, depth_km=10.0, distance_km=50.0, estimated_pga=0.12)

        record = ledger_record(event, NOW)

        assert record["id"] == "e1"
        assert record["sent"] is True
        assert record["magnitude"] == 6.5
        assert record["depth_km"] == 10.0
        assert record["distance_km"] == 50.0
        assert record["estimated_pga"] == 0.12
        assert record["priority"] == 1
        assert record["occurred_at"] == event.earthquake.time
        assert record["latitude"] == event.earthquake.latitude
        assert record["longitude"] == event.earthquake.longitude
        assert record["recorded_at"] == NOW


class TestAlertRecord:
    """Tests for AlertRecord and its helpers."""

    def test_make_alert_record_serializes_events(self, make_event):
        """Events are stored as dicts in batch order."""
        events = [make_event("a"), make_event("b")]

        record = make_alert_record(NOW, "summary", PriorityTier.WARNING, events)

        assert record.priority == PriorityTier.WARNING
        assert [e["id"] for e in record.earthquakes] == ["a", "b"]

    def test_to_dict(self, make_event):
        """Store document uses plain types."""
        record = make_alert_record(NOW, "summary", PriorityTier.CRITICAL, [make_event("a")])

        data = record.to_dict()

        assert data["timestamp"] == NOW
        assert data["message"] == "summary"
        assert data["priority"] == 2
        assert isinstance(data["earthquakes"], list)

    def test_from_dict_round_trip(self, make_event):
        """A stored document reads back as the same record."""
        record = make_alert_record(NOW, "summary", PriorityTier.ADVISORY, [make_event("a")])

        assert alert_record_from_dict(record.to_dict()) == record

    def test_from_dict_unknown_priority(self):
        """Unknown priorities read as NONE."""
        record = alert_record_from_dict({"timestamp": NOW, "message": "x", "priority": 9})

        assert record.priority == PriorityTier.NONE
        assert record.earthquakes == ()
        assert record.delivered is True

    def test_undelivered_flag_stored(self, make_event):
        """Failed deliveries are logged with delivered=False."""
        record = make_alert_record(
            NOW, "summary", PriorityTier.WARNING, [make_event("a")], delivered=False,
        )

        assert record.to_dict()["delivered"] is False
        assert alert_record_from_dict(record.to_dict()).delivered is False

    def test_defaults(self):
        """Earthquakes default to empty."""
        assert AlertRecord(timestamp=NOW, message="m", priority=PriorityTier.WARNING).earthquakes == ()
