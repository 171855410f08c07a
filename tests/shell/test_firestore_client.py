"""Tests for the Firestore ledger and alert log.

A MagicMock stands in for the Firestore client.
"""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock, Mock

import pytest
from google.api_core.exceptions import AlreadyExists

from src.core.errors import PersistenceError
from src.core.priority import PriorityTier
from src.core.records import AlertRecord
from src.shell.firestore_client import (
    FirestoreAlertLog,
    FirestoreConfig,
    FirestoreLedger,
)


def _document(client: MagicMock) -> MagicMock:
    return client.collection.return_value.document.return_value


class TestFirestoreLedger:
    """Tests for FirestoreLedger."""

    def test_has_alerted_true_when_document_exists(self):
        client = MagicMock()
        _document(client).get.return_value = Mock(exists=True)

        ledger = FirestoreLedger(FirestoreConfig(collection="sent_alerts"), client=client)

        assert ledger.has_alerted("us1") is True
        client.collection.assert_called_with("sent_alerts")
        client.collection.return_value.document.assert_called_with("us1")

    def test_has_alerted_false_when_missing(self):
        client = MagicMock()
        _document(client).get.return_value = Mock(exists=False)

        assert FirestoreLedger(client=client).has_alerted("us1") is False

    def test_has_alerted_read_failure_raises(self):
        client = MagicMock()
        _document(client).get.side_effect = RuntimeError("unavailable")

        with pytest.raises(PersistenceError):
            FirestoreLedger(client=client).has_alerted("us1")

    def test_record_alerted_sets_document(self):
        client = MagicMock()

        assert FirestoreLedger(client=client).record_alerted("us1", {"sent": True}) is True
        _document(client).set.assert_called_once_with({"sent": True})

    def test_record_alerted_failure_returns_false(self):
        client = MagicMock()
        _document(client).set.side_effect = RuntimeError("boom")

        assert FirestoreLedger(client=client).record_alerted("us1", {}) is False

    def test_claim_uses_create(self):
        client = MagicMock()

        assert FirestoreLedger(client=client).claim("us1", {"sent": True}) is True
        _document(client).create.assert_called_once_with({"sent": True})

    def test_claim_lost_when_document_exists(self):
        client = MagicMock()
        _document(client).create.side_effect = AlreadyExists("exists")

        assert FirestoreLedger(client=client).claim("us1", {}) is False

    def test_claim_write_failure_raises(self):
        """Only an existing document counts as a lost claim."""
        client = MagicMock()
        _document(client).create.side_effect = RuntimeError("firestore unavailable")

        with pytest.raises(PersistenceError):
            FirestoreLedger(client=client).claim("us1", {})

    def test_release_deletes_document(self):
        client = MagicMock()

        assert FirestoreLedger(client=client).release("us1") is True
        _document(client).delete.assert_called_once()


class TestFirestoreAlertLog:
    """Tests for FirestoreAlertLog."""

    def test_default_collection(self):
        assert FirestoreAlertLog(client=MagicMock()).config.collection == "alert_log"

    def test_append_returns_document_id(self):
        client = MagicMock()
        client.collection.return_value.add.return_value = (None, Mock(id="doc1"))
        record = AlertRecord(
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
            message="m",
            priority=PriorityTier.WARNING,
        )

        result = FirestoreAlertLog(client=client).append(record)

        assert result == "doc1"
        client.collection.return_value.add.assert_called_once_with(record.to_dict())

    def test_append_failure_returns_none(self):
        client = MagicMock()
        client.collection.return_value.add.side_effect = RuntimeError("boom")
        record = AlertRecord(
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
            message="m",
            priority=PriorityTier.WARNING,
        )

        assert FirestoreAlertLog(client=client).append(record) is None

    def test_query_by_day_parses_documents(self):
        client = MagicMock()
        query = client.collection.return_value.where.return_value.where.return_value
        ts = datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)
        query.order_by.return_value.stream.return_value = [
            Mock(to_dict=Mock(return_value={"timestamp": ts, "message": "m", "priority": 2})),
        ]

        records = FirestoreAlertLog(client=client).query_by_day(date(2024, 1, 1), timezone.utc)

        assert len(records) == 1
        assert records[0].priority == PriorityTier.CRITICAL
        assert records[0].timestamp == ts

    def test_query_failure_raises(self):
        client = MagicMock()
        client.collection.return_value.where.side_effect = RuntimeError("index missing")

        with pytest.raises(PersistenceError):
            FirestoreAlertLog(client=client).query_by_day(date(2024, 1, 1), timezone.utc)
