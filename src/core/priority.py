"""Priority classification - Pure functions.

This module maps an earthquake's magnitude and depth to an alert tier.
Rules are evaluated in order and the first match wins.
"""

from dataclasses import dataclass
from enum import IntEnum


class PriorityTier(IntEnum):
    """Alert urgency. Higher values are more urgent.

    The integer values double as Pushover message priorities.
    """
    NONE = -1
    ADVISORY = 0
    WARNING = 1
    CRITICAL = 2

    @property
    def should_alert(self) -> bool:
        """Returns True for every tier except NONE."""
        return self is not PriorityTier.NONE


@dataclass(frozen=True)
class PriorityRule:
    """One row of the classification table.

    Attributes:
        tier: Tier assigned when the rule matches
        min_magnitude: Minimum magnitude (inclusive)
        max_depth_km: Depth must be strictly below this, None for any depth
    """
    tier: PriorityTier
    min_magnitude: float
    max_depth_km: float | None = None

    def matches(self, magnitude: float, depth_km: float) -> bool:
        """Check if an earthquake satisfies this rule."""
        if magnitude < self.min_magnitude:
            return False

        if self.max_depth_km is not None and depth_km >= self.max_depth_km:
            return False

        return True


# Ordered: first match wins
PRIORITY_RULES: tuple[PriorityRule, ...] = (
    PriorityRule(tier=PriorityTier.CRITICAL, min_magnitude=8.0),
    PriorityRule(tier=PriorityTier.CRITICAL, min_magnitude=7.0),
    PriorityRule(tier=PriorityTier.WARNING, min_magnitude=6.0),
    PriorityRule(tier=PriorityTier.WARNING, min_magnitude=5.0, max_depth_km=70.0),
    PriorityRule(tier=PriorityTier.ADVISORY, min_magnitude=4.5, max_depth_km=30.0),
)


def classify(
    magnitude: float,
    depth_km: float,
    rules: tuple[PriorityRule, ...] = PRIORITY_RULES,
) -> PriorityTier:
    """Assign an alert tier to an earthquake.

    Pure function.

    Args:
        magnitude: Earthquake magnitude
        depth_km: Depth in kilometers
        rules: Ordered classification rules

    Returns:
        Tier of the first matching rule, or PriorityTier.NONE
    """
    for rule in rules:
        if rule.matches(magnitude, depth_km):
            return rule.tier

    return PriorityTier.NONE


def tiers_by_urgency() -> list[PriorityTier]:
    """Alerting tiers, most urgent first. NONE is excluded."""
    return sorted(
        (tier for tier in PriorityTier if tier.should_alert),
        reverse=True,
    )
