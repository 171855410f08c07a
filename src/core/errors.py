"""Error taxonomy for the alert cycle.

Shell clients translate library exceptions into these types so the
orchestrator can decide, per step, whether a failure aborts the cycle.
Notification delivery failures are not exceptions; see PushoverResponse.
"""


class EarthquakeAlertError(Exception):
    """Base class for alert cycle failures."""


class FetchError(EarthquakeAlertError):
    """The event feed was unreachable or returned a malformed response."""


class SummarizationError(EarthquakeAlertError):
    """The text-generation service failed or returned no text."""


class PersistenceError(EarthquakeAlertError):
    """A ledger or alert log read failed."""
