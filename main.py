"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the src package.
"""

from src.main import (
    alerts_today,
    earthquake_check,
    earthquake_check_scheduled,
)

__all__ = [
    "alerts_today",
    "earthquake_check",
    "earthquake_check_scheduled",
]
