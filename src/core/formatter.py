"""Message formatting - Pure functions.

This module formats cycle results, notification titles and alert log
listings. All functions are pure with no side effects.
"""

from datetime import date, tzinfo
from typing import Any

from src.core.priority import PriorityTier
from src.core.records import AlertRecord


# Fixed cycle result strings returned to the trigger
NO_NEW_MESSAGE = "No new significant earthquakes detected."
ERROR_MESSAGE = "Error occurred while checking for earthquakes."


def get_tier_emoji(tier: PriorityTier) -> str:
    """Get an emoji representing tier urgency.

    Pure function.
    """
    if tier == PriorityTier.CRITICAL:
        return "🚨"
    elif tier == PriorityTier.WARNING:
        return "⚠️"
    elif tier == PriorityTier.ADVISORY:
        return "🔸"
    else:
        return "🔹"


def get_tier_label(tier: PriorityTier) -> str:
    """Get a human-readable tier label, e.g. "Warning".

    Pure function.
    """
    return tier.name.capitalize()


def format_notification_title(tier: PriorityTier, count: int) -> str:
    """Format the push notification title for a batch.

    Pure function.

    Args:
        tier: Tier of the batch
        count: Number of earthquakes in the batch

    Returns:
        Title such as "⚠️ Earthquake Warning (2)"
    """
    return f"{get_tier_emoji(tier)} Earthquake {get_tier_label(tier)} ({count})"


def format_event_line(event: dict[str, Any]) -> str:
    """Format one stored earthquake as a single line.

    Pure function.

    Args:
        event: Serialized enriched event (see event_to_dict)

    Returns:
        One-line summary string
    """
    title = event.get("title") or event.get("place") or event.get("id", "unknown")
    line = f"M{float(event.get('magnitude', 0.0)):.1f} {title}"

    if event.get("distance_km") is not None:
        line += f", {float(event['distance_km']):.1f} km away"
    if event.get("estimated_pga") is not None:
        line += f", est. PGA {float(event['estimated_pga']):.3f} g"

    return line


def format_alert_log(
    records: list[AlertRecord],
    day: date,
    tz: tzinfo,
) -> str:
    """Format a day's alert log entries as plain text.

    Pure function.

    Args:
        records: Alert records, newest first
        day: The day being listed
        tz: Timezone for displayed times

    Returns:
        Multi-line text listing
    """
    if not records:
        return f"No alerts sent on {day.isoformat()}."

    lines = [f"{len(records)} alert(s) sent on {day.isoformat()}:"]

    for record in records:
        local_time = record.timestamp.astimezone(tz)
        lines.append("")
        header = (
            f"[{local_time.strftime('%H:%M:%S')}] "
            f"{get_tier_emoji(record.priority)} {get_tier_label(record.priority)}"
        )
        if not record.delivered:
            header += " (not delivered)"
        lines.append(header)
        for event in record.earthquakes:
            lines.append(f"  - {format_event_line(event)}")
        lines.append(record.message.strip())

    return "\n".join(lines)
