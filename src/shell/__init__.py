"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS API client (HTTP)
- Summarizer client (OpenAI-compatible HTTP API)
- Pushover client (HTTP)
- Firestore ledger and alert log (database)
- Configuration loading (environment/files/Secret Manager)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.usgs_client import USGSClient
from src.shell.summarizer_client import SummarizerClient
from src.shell.pushover_client import PushoverClient
from src.shell.firestore_client import FirestoreAlertLog, FirestoreLedger
from src.shell.config_loader import load_config

__all__ = [
    "USGSClient",
    "SummarizerClient",
    "PushoverClient",
    "FirestoreAlertLog",
    "FirestoreLedger",
    "load_config",
]
