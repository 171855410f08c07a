"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. It's the "glue" that
makes the application work.

One cycle: fetch -> enrich/classify -> ledger filter -> batch by tier ->
summarize -> notify -> alert log -> ledger commit.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.core.config import Config, LedgerMode
from src.core.dedup import (
    TierBatch,
    compute_events_to_commit,
    group_by_tier,
    without_ids,
)
from src.core.earthquake import Earthquake, parse_earthquakes
from src.core.enrichment import EnrichedEvent, enrich_earthquake
from src.core.errors import FetchError, PersistenceError, SummarizationError
from src.core.formatter import ERROR_MESSAGE, NO_NEW_MESSAGE, format_notification_title
from src.core.geo import ReferencePoint
from src.core.notification import build_notification
from src.core.priority import PriorityTier
from src.core.records import ledger_record, make_alert_record
from src.shell.firestore_client import FirestoreAlertLog, FirestoreConfig, FirestoreLedger
from src.shell.pushover_client import PushoverClient, PushoverCredentials, PushoverResponse
from src.shell.summarizer_client import SummarizerClient
from src.shell.usgs_client import USGSClient


logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Result of notifying one tier's batch.

    Attributes:
        tier: Tier of the batch
        event_ids: IDs of the earthquakes in the batch
        response: Delivery outcome
        log_id: Alert log document ID (None if not logged)
    """
    tier: PriorityTier
    event_ids: list[str]
    response: PushoverResponse
    log_id: str | None = None

    @property
    def success(self) -> bool:
        """Returns True if the notification was delivered."""
        return self.response.success


@dataclass
class CycleResult:
    """Result of a complete alert cycle.

    Attributes:
        message: Plain result string for the trigger
        events_fetched: Earthquakes parsed from the feed
        events_new: Earthquakes retained for alerting
        dispatches: One entry per tier that reached dispatch
        ledger_commits: Ledger documents written this cycle
        errors: Any errors that occurred
    """
    message: str
    events_fetched: int = 0
    events_new: int = 0
    dispatches: list[DispatchResult] = field(default_factory=list)
    ledger_commits: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Returns True if no errors occurred."""
        return len(self.errors) == 0

    @property
    def dispatch_failures(self) -> list[DispatchResult]:
        """Dispatches whose delivery failed."""
        return [d for d in self.dispatches if not d.success]

    @property
    def summary(self) -> str:
        """Human-readable summary of the cycle."""
        return (
            f"Fetched {self.events_fetched} earthquakes, "
            f"{self.events_new} new, "
            f"{len(self.dispatches)} tiers dispatched, "
            f"{len(self.dispatch_failures)} failed, "
            f"{self.ledger_commits} marked as sent"
        )


class Orchestrator:
    """Coordinates earthquake monitoring and alerting.

    This class wires together:
    - USGS client (fetches earthquake data)
    - Core functions (enrichment, classification, batching)
    - Firestore ledger (deduplication state) and alert log
    - Summarizer client (alert text)
    - Pushover client (push notifications)
    """

    def __init__(
        self,
        config: Config,
        usgs_client: USGSClient | None = None,
        summarizer_client: SummarizerClient | None = None,
        pushover_client: PushoverClient | None = None,
        ledger: FirestoreLedger | None = None,
        alert_log: FirestoreAlertLog | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            usgs_client: USGS client (created if not provided)
            summarizer_client: Summarizer client (created if not provided)
            pushover_client: Pushover client (created if not provided)
            ledger: Idempotency ledger (created if not provided)
            alert_log: Alert log (created if not provided)
        """
        self.config = config
        self.usgs_client = usgs_client or USGSClient(timeout=config.feed_timeout_seconds)
        self.summarizer_client = summarizer_client or SummarizerClient(config.summarizer)
        self.pushover_client = pushover_client or PushoverClient(
            PushoverCredentials(
                api_token=config.pushover.api_token,
                user_key=config.pushover.user_key,
            ),
            device=config.pushover.device,
            timeout=config.pushover.timeout_seconds,
        )
        self.ledger = ledger or FirestoreLedger(
            FirestoreConfig(
                database=config.firestore_database,
                collection=config.ledger_collection,
            )
        )
        self.alert_log = alert_log or FirestoreAlertLog(
            FirestoreConfig(
                database=config.firestore_database,
                collection=config.alert_log_collection,
            )
        )

    def _fetch_earthquakes(
        self,
        reference: ReferencePoint,
        radius_km: float,
    ) -> list[Earthquake]:
        """Fetch earthquakes around the reference point.

        Returns:
            List of parsed earthquakes, in feed order

        Raises:
            FetchError: If the feed is unreachable or malformed
        """
        geojson = self.usgs_client.fetch_nearby(
            reference,
            radius_km,
            hours=self.config.lookback_hours,
            limit=self.config.feed_limit,
        )

        # Pure core function
        earthquakes = parse_earthquakes(geojson)

        skipped = len(geojson["features"]) - len(earthquakes)
        if skipped:
            logger.warning("Skipped %d malformed features", skipped)

        return earthquakes

    def _select_new_events(
        self,
        earthquakes: list[Earthquake],
        reference: ReferencePoint,
    ) -> list[EnrichedEvent]:
        """Enrich earthquakes and keep those that are new and significant.

        Raises:
            PersistenceError: If a ledger read fails
        """
        retained = []
        seen: set[str] = set()

        for earthquake in earthquakes:
            if earthquake.id in seen:
                logger.debug("Skipping %s: repeated in feed", earthquake.id)
                continue
            seen.add(earthquake.id)

            event = enrich_earthquake(earthquake, reference)

            if self.ledger.has_alerted(event.id):
                logger.debug("Skipping %s: already alerted", event.id)
                continue

            if not event.priority.should_alert:
                logger.debug(
                    "Skipping %s: M%.1f at %.1f km depth is below alert threshold",
                    event.id,
                    earthquake.magnitude,
                    earthquake.depth_km,
                )
                continue

            logger.info(
                "New %s earthquake %s: M%.1f, %.1f km away, est. PGA %.4f g",
                event.priority.name,
                event.id,
                earthquake.magnitude,
                event.distance_km,
                event.estimated_pga,
            )
            retained.append(event)

        return retained

    def _claim_batches(
        self,
        batches: list[TierBatch],
    ) -> tuple[list[TierBatch], int, list[str]]:
        """Claim every event before dispatch.

        Events claimed elsewhere are dropped. Events whose claim could not
        be written are dropped too and reported, so the next cycle retries
        them.

        Returns:
            Tuple of (batches with only won claims, number of claims won,
            error messages)
        """
        claimed_at = datetime.now(timezone.utc)
        result = []
        won = 0
        errors = []

        for batch in batches:
            dropped: set[str] = set()
            for event in batch.events:
                try:
                    claimed = self.ledger.claim(event.id, ledger_record(event, claimed_at))
                except PersistenceError as e:
                    errors.append(f"Failed to claim {event.id}: {e}")
                    dropped.add(event.id)
                    continue

                if claimed:
                    won += 1
                else:
                    dropped.add(event.id)

            remaining = without_ids(batch, dropped)
            if remaining.events:
                result.append(remaining)

        return result, won, errors

    def _release_batches(self, batches: list[TierBatch]) -> list[str]:
        """Release claims for batches that were never dispatched.

        Returns:
            Error messages for releases that failed
        """
        errors = []
        for batch in batches:
            for event_id in batch.ids:
                if not self.ledger.release(event_id):
                    errors.append(f"Failed to release claim on {event_id}")
        return errors

    def _dispatch_batch(self, batch: TierBatch, summary: str) -> DispatchResult:
        """Send one tier's notification and log it.

        Delivery failures are reported in the result, never raised.
        """
        payload = build_notification(
            summary,
            batch.tier,
            title=format_notification_title(batch.tier, len(batch.events)),
        )
        response = self.pushover_client.send(payload)

        result = DispatchResult(
            tier=batch.tier,
            event_ids=batch.ids,
            response=response,
        )

        if response.success:
            logger.info("Sent %s alert for %s", batch.tier.name, ", ".join(batch.ids))
        else:
            logger.error(
                "Failed to send %s alert for %s: %s",
                batch.tier.name,
                ", ".join(batch.ids),
                response.error,
            )

        record = make_alert_record(
            datetime.now(timezone.utc),
            summary,
            batch.tier,
            list(batch.events),
            delivered=response.success,
        )
        result.log_id = self.alert_log.append(record)

        return result

    def _commit_ledger(self, events: list[EnrichedEvent]) -> tuple[int, list[str]]:
        """Mark events as alerted.

        Returns:
            Tuple of (documents written, error messages)
        """
        recorded_at = datetime.now(timezone.utc)
        written = 0
        errors = []

        for event in events:
            if self.ledger.record_alerted(event.id, ledger_record(event, recorded_at)):
                written += 1
            else:
                errors.append(f"Failed to mark {event.id} as alerted")

        return written, errors

    def process(
        self,
        reference: ReferencePoint | None = None,
        radius_km: float | None = None,
    ) -> CycleResult:
        """Run a complete alert cycle.

        This is the main entry point that:
        1. Fetches earthquakes from USGS
        2. Enriches, classifies and filters out already-alerted earthquakes
        3. Groups the rest by tier
        4. Summarizes, notifies and logs each tier, most urgent first
        5. Updates the idempotency ledger

        Args:
            reference: Monitored location (config default if None)
            radius_km: Search radius (config default if None)

        Returns:
            CycleResult with details of what happened
        """
        reference = reference or self.config.reference
        if radius_km is None:
            radius_km = self.config.radius_km

        # Step 1: Fetch earthquakes
        try:
            earthquakes = self._fetch_earthquakes(reference, radius_km)
            logger.info("Fetched %d earthquakes from USGS", len(earthquakes))
        except FetchError as e:
            error_msg = f"Failed to fetch earthquakes: {e}"
            logger.error(error_msg)
            return CycleResult(message=ERROR_MESSAGE, errors=[error_msg])

        # Step 2: Enrich, classify and deduplicate
        try:
            retained = self._select_new_events(earthquakes, reference)
        except PersistenceError as e:
            error_msg = f"Failed to read deduplication state: {e}"
            logger.error(error_msg)
            return CycleResult(
                message=ERROR_MESSAGE,
                events_fetched=len(earthquakes),
                errors=[error_msg],
            )

        logger.info(
            "%d new significant earthquakes (of %d total)",
            len(retained),
            len(earthquakes),
        )

        # Step 3: Nothing to do
        if not retained:
            return CycleResult(
                message=NO_NEW_MESSAGE,
                events_fetched=len(earthquakes),
            )

        batches = group_by_tier(retained)
        ledger_commits = 0
        errors: list[str] = []

        claiming = self.config.ledger_mode == LedgerMode.CLAIM_BEFORE_DISPATCH
        if claiming:
            batches, ledger_commits, claim_errors = self._claim_batches(batches)
            for error_msg in claim_errors:
                logger.error(error_msg)
            errors.extend(claim_errors)

            if not batches:
                if claim_errors:
                    message = ERROR_MESSAGE
                else:
                    logger.info("All new earthquakes were claimed by another cycle")
                    message = NO_NEW_MESSAGE
                return CycleResult(
                    message=message,
                    events_fetched=len(earthquakes),
                    events_new=len(retained),
                    errors=errors,
                )

        # Step 4: Summarize and dispatch, most urgent tier first
        completed: list[TierBatch] = []
        pending: list[TierBatch] = []
        dispatches: list[DispatchResult] = []
        last_summary: str | None = None

        for index, batch in enumerate(batches):
            try:
                summary = self.summarizer_client.summarize(list(batch.events))
            except SummarizationError as e:
                error_msg = f"Failed to summarize {batch.tier.name} batch: {e}"
                logger.error(error_msg)
                errors.append(error_msg)
                pending = batches[index:]
                break

            dispatch = self._dispatch_batch(batch, summary)
            dispatches.append(dispatch)
            completed.append(batch)
            last_summary = summary

            if not dispatch.success:
                errors.append(
                    f"Failed to send {batch.tier.name} alert: {dispatch.response.error}"
                )
            if dispatch.log_id is None:
                errors.append(f"Failed to log {batch.tier.name} alert")

        # Step 5: Update deduplication state
        if claiming:
            errors.extend(self._release_batches(pending))
        else:
            written, commit_errors = self._commit_ledger(
                compute_events_to_commit(completed)
            )
            ledger_commits += written
            errors.extend(commit_errors)

        if pending or last_summary is None:
            message = ERROR_MESSAGE
        else:
            message = last_summary

        return CycleResult(
            message=message,
            events_fetched=len(earthquakes),
            events_new=len(retained),
            dispatches=dispatches,
            ledger_commits=ledger_commits,
            errors=errors,
        )

    def run(
        self,
        reference: ReferencePoint | None = None,
        radius_km: float | None = None,
    ) -> str:
        """Run a cycle and return only its result string.

        Never raises; unexpected failures become ERROR_MESSAGE.
        """
        try:
            result = self.process(reference, radius_km)
        except Exception:
            logger.exception("Unexpected error in earthquake alert cycle")
            return ERROR_MESSAGE

        logger.info("Completed: %s", result.summary)
        return result.message
