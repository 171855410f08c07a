"""Firestore Clients - Imperative Shell.

This module persists the idempotency ledger (one document per alerted
earthquake) and the alert log (one document per dispatched batch) in
Google Cloud Firestore.

All I/O is contained here; record shapes and deduplication logic are in
the core module. Nothing is cached: every read goes to Firestore so that
a cycle always sees the latest committed state.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from src.core.errors import PersistenceError
from src.core.records import AlertRecord, alert_record_from_dict


logger = logging.getLogger(__name__)


# Default collection names
DEFAULT_LEDGER_COLLECTION = "sent_alerts"
DEFAULT_ALERT_LOG_COLLECTION = "alert_log"


@dataclass
class FirestoreConfig:
    """Configuration for Firestore clients.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        collection: Firestore collection name
    """
    project_id: str | None = None
    database: str | None = None
    collection: str = DEFAULT_LEDGER_COLLECTION


class _FirestoreCollection:
    """Lazily connected handle on one Firestore collection."""

    def __init__(
        self,
        config: FirestoreConfig,
        client: firestore.Client | None = None,
    ) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _collection(self) -> Any:
        return self.client.collection(self.config.collection)


class FirestoreLedger(_FirestoreCollection):
    """Idempotency ledger: which earthquakes have already been alerted.

    Document structure (ID = USGS event ID):
    {
        "id": "us7000abcd",
        "sent": true,
        "magnitude": 6.5,
        ...
    }
    """

    def __init__(
        self,
        config: FirestoreConfig | None = None,
        client: firestore.Client | None = None,
    ) -> None:
        """Initialize ledger client.

        Args:
            config: Firestore configuration
            client: Existing Firestore client to share (created lazily if None)
        """
        super().__init__(config or FirestoreConfig(), client)

    def has_alerted(self, event_id: str) -> bool:
        """Check whether an alert was already sent for an event.

        This method performs database I/O.

        Args:
            event_id: USGS event ID

        Returns:
            True if a ledger document exists

        Raises:
            PersistenceError: If the read fails
        """
        try:
            doc = self._collection().document(event_id).get()
        except Exception as e:
            logger.error("Failed to check alert status for %s: %s", event_id, str(e))
            raise PersistenceError(f"Ledger read failed for {event_id}: {e}") from e

        return doc.exists

    def record_alerted(self, event_id: str, record: dict[str, Any]) -> bool:
        """Mark an event as alerted (upsert).

        This method performs database I/O.

        Args:
            event_id: USGS event ID
            record: Ledger document body

        Returns:
            True if the write was successful
        """
        try:
            self._collection().document(event_id).set(record)
            logger.info("Alert marked as sent for earthquake ID: %s", event_id)
            return True

        except Exception as e:
            logger.error("Failed to mark alert as sent for %s: %s", event_id, str(e))
            return False

    def claim(self, event_id: str, record: dict[str, Any]) -> bool:
        """Claim the right to alert an event with a create-if-absent write.

        This method performs database I/O.

        Args:
            event_id: USGS event ID
            record: Ledger document body

        Returns:
            True if this caller created the document, False if it already
            existed

        Raises:
            PersistenceError: If the write fails for any other reason
        """
        try:
            self._collection().document(event_id).create(record)
        except AlreadyExists:
            logger.info("Earthquake ID %s already claimed by another cycle", event_id)
            return False
        except Exception as e:
            logger.error("Failed to claim %s: %s", event_id, str(e))
            raise PersistenceError(f"Ledger claim failed for {event_id}: {e}") from e

        logger.info("Claimed earthquake ID: %s", event_id)
        return True

    def release(self, event_id: str) -> bool:
        """Delete a claim for an event that was never dispatched.

        This method performs database I/O.

        Args:
            event_id: USGS event ID

        Returns:
            True if the delete was successful
        """
        try:
            self._collection().document(event_id).delete()
            logger.info("Released claim on earthquake ID: %s", event_id)
            return True

        except Exception as e:
            logger.error("Failed to release claim on %s: %s", event_id, str(e))
            return False


class FirestoreAlertLog(_FirestoreCollection):
    """Append-only log of dispatched alert batches.

    Document structure (auto ID):
    {
        "timestamp": <timestamp>,
        "message": "<b>M6.5</b> ...",
        "priority": 1,
        "earthquakes": [{...}, ...],
        "delivered": true
    }
    """

    def __init__(
        self,
        config: FirestoreConfig | None = None,
        client: firestore.Client | None = None,
    ) -> None:
        """Initialize alert log client.

        Args:
            config: Firestore configuration
            client: Existing Firestore client to share (created lazily if None)
        """
        super().__init__(
            config or FirestoreConfig(collection=DEFAULT_ALERT_LOG_COLLECTION),
            client,
        )

    def append(self, record: AlertRecord) -> str | None:
        """Persist one dispatched batch.

        This method performs database I/O.

        Args:
            record: The batch to store

        Returns:
            New document ID, or None if the write failed
        """
        try:
            _, doc_ref = self._collection().add(record.to_dict())
            logger.info("Logged alert %s (priority %d)", doc_ref.id, int(record.priority))
            return doc_ref.id

        except Exception as e:
            logger.error("Failed to log alert: %s", str(e))
            return None

    def query_by_day(self, day: date, tz: tzinfo) -> list[AlertRecord]:
        """Fetch the alerts dispatched on a calendar day.

        This method performs database I/O.

        Args:
            day: Calendar day in the given timezone
            tz: Timezone defining the day's boundaries

        Returns:
            Alert records, newest first

        Raises:
            PersistenceError: If the query fails
        """
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)

        logger.info("Fetching alert log for %s", day.isoformat())

        try:
            docs = (
                self._collection()
                .where(filter=FieldFilter("timestamp", ">=", start))
                .where(filter=FieldFilter("timestamp", "<", end))
                .order_by("timestamp", direction=firestore.Query.DESCENDING)
                .stream()
            )
            records = [alert_record_from_dict(doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error("Failed to query alert log: %s", str(e))
            raise PersistenceError(f"Alert log query failed: {e}") from e

        logger.info("Fetched %d alert log entries", len(records))
        return records
