"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the src package.
"""

from src.main import (
    nudge_push,
    push_sweep,
    push_sweep_pubsub,
)

__all__ = [
    "nudge_push",
    "push_sweep",
    "push_sweep_pubsub",
]
