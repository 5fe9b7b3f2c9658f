"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Firestore client (trips, memberships, push events, device tokens)
- FCM client (push delivery over HTTP)
- Secret Manager client (secrets)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.fcm_client import FCMClient
from src.shell.firestore_client import FirestoreClient
from src.shell.config_loader import load_config, Config

__all__ = [
    "FCMClient",
    "FirestoreClient",
    "load_config",
    "Config",
]
