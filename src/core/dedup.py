"""Deduplication and batching logic - Pure functions.

This module decides which enriched earthquakes form each outgoing batch
and which of them should be marked as alerted afterwards.

Note: The actual persistence of alerted IDs is handled by the imperative
shell (Firestore client). This module only contains the pure logic.
"""

from dataclasses import dataclass, field

from src.core.enrichment import EnrichedEvent
from src.core.priority import PriorityTier, tiers_by_urgency


@dataclass(frozen=True)
class TierBatch:
    """Events of a single tier that are alerted together.

    Attributes:
        tier: Tier shared by every event in the batch
        events: Events in feed order
    """
    tier: PriorityTier
    events: tuple[EnrichedEvent, ...] = field(default_factory=tuple)

    @property
    def ids(self) -> list[str]:
        """Event IDs in batch order."""
        return [e.id for e in self.events]


def group_by_tier(events: list[EnrichedEvent]) -> list[TierBatch]:
    """Group events into batches, most urgent tier first.

    Pure function. Empty tiers and NONE are omitted; each event lands
    in exactly one batch.

    Args:
        events: Retained events in feed order

    Returns:
        Non-empty batches ordered CRITICAL, WARNING, ADVISORY
    """
    batches = []

    for tier in tiers_by_urgency():
        members = tuple(e for e in events if e.priority == tier)
        if members:
            batches.append(TierBatch(tier=tier, events=members))

    return batches


def without_ids(batch: TierBatch, excluded_ids: set[str]) -> TierBatch:
    """Return a copy of a batch without the given event IDs.

    Pure function.
    """
    return TierBatch(
        tier=batch.tier,
        events=tuple(e for e in batch.events if e.id not in excluded_ids),
    )


def compute_events_to_commit(completed: list[TierBatch]) -> list[EnrichedEvent]:
    """Compute which events should be marked as alerted.

    Pure function. Only batches whose summary was produced count as
    completed, whether or not delivery succeeded.

    Args:
        completed: Batches that reached dispatch

    Returns:
        Events to write to the ledger, without duplicates
    """
    seen: set[str] = set()
    result = []

    for batch in completed:
        for event in batch.events:
            if event.id not in seen:
                seen.add(event.id)
                result.append(event)

    return result
