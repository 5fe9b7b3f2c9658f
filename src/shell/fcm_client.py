"""Firebase Cloud Messaging Client - Imperative Shell.

This module sends push notifications through the FCM HTTP v1 API.
All I/O is contained here; copy and deep-link data come from the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

import google.auth
import requests
from google.auth.transport.requests import Request as AuthRequest

from src.core.formatter import PushMessage


logger = logging.getLogger(__name__)


# Default timeout for FCM requests (seconds)
DEFAULT_TIMEOUT = 10

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"

# Error code meaning the token will never work again
UNREGISTERED_ERROR = "UNREGISTERED"

# INVALID_ARGUMENT covers any malformed request; only a bad token is prunable
INVALID_ARGUMENT_ERROR = "INVALID_ARGUMENT"


@dataclass
class PushResponse:
    """Response from FCM.

    Attributes:
        success: Whether the message was accepted
        status_code: HTTP status code (0 if no response)
        error: Error message if failed
        unregistered: True if the token should be pruned
        message_id: FCM message name if accepted
    """
    success: bool
    status_code: int
    error: str | None = None
    unregistered: bool = False
    message_id: str | None = None


def build_fcm_message(token: str, message: PushMessage, data: dict[str, Any] | None) -> dict[str, Any]:
    """Build an FCM v1 request body.

    FCM requires every data value to be a string.
    """
    return {
        "message": {
            "token": token,
            "notification": {"title": message.title, "body": message.body},
            "data": {k: str(v) for k, v in (data or {}).items()},
            "android": {"priority": "high", "notification": {"sound": "default"}},
            "apns": {
                "payload": {
                    "aps": {
                        "sound": "default",
                        # Group by trip in notification center
                        "thread-id": str((data or {}).get("tripId", "")),
                    },
                },
            },
        },
    }


def _error_status(response: requests.Response) -> tuple[str | None, str]:
    """Extract (status, message) from an FCM error body."""
    try:
        error = response.json().get("error", {})
    except ValueError:
        return None, response.text

    status = error.get("status")
    for detail in error.get("details", []):
        if detail.get("errorCode"):
            status = detail["errorCode"]
    return status, error.get("message", response.text)


def _is_dead_token(status: str | None, error_text: str) -> bool:
    """Whether an FCM error means the registration token itself is bad."""
    if status == UNREGISTERED_ERROR:
        return True
    return status == INVALID_ARGUMENT_ERROR and "registration token" in (error_text or "").lower()


class FCMClient:
    """Client for sending push notifications via Firebase Cloud Messaging.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        project_id: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        credentials: Any = None,
    ) -> None:
        """Initialize FCM client.

        Args:
            project_id: Firebase project ID (None = project of default credentials)
            timeout: Request timeout in seconds
            credentials: google-auth credentials (None = application default)
        """
        self.project_id = project_id
        self.timeout = timeout
        self._credentials = credentials

    def _get_access_token(self) -> str:
        """Return a valid OAuth access token, refreshing when needed."""
        if self._credentials is None:
            credentials, default_project = google.auth.default(scopes=[FCM_SCOPE])
            self._credentials = credentials
            if not self.project_id:
                self.project_id = default_project

        if not self._credentials.valid:
            self._credentials.refresh(AuthRequest())

        return self._credentials.token

    def send(
        self,
        token: str,
        message: PushMessage,
        data: dict[str, Any] | None = None,
    ) -> PushResponse:
        """Send a notification to one device.

        This method performs HTTP I/O.

        Args:
            token: FCM registration token
            message: Notification copy
            data: Deep-link data

        Returns:
            PushResponse indicating success or failure
        """
        try:
            access_token = self._get_access_token()
        except Exception as e:
            logger.error("Failed to obtain FCM credentials: %s", str(e))
            return PushResponse(success=False, status_code=0, error=f"Credentials error: {e}")

        if not self.project_id:
            return PushResponse(success=False, status_code=0, error="No FCM project configured")

        try:
            response = requests.post(
                FCM_SEND_URL.format(project_id=self.project_id),
                json=build_fcm_message(token, message, data),
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
            )

            if response.status_code == 200:
                return PushResponse(
                    success=True,
                    status_code=200,
                    message_id=response.json().get("name"),
                )

            status, error_text = _error_status(response)
            logger.warning(
                "FCM returned non-200: %d - %s (%s)",
                response.status_code,
                error_text,
                status,
            )
            return PushResponse(
                success=False,
                status_code=response.status_code,
                error=error_text,
                unregistered=_is_dead_token(status, error_text),
            )

        except requests.Timeout:
            logger.error("FCM request timed out")
            return PushResponse(
                success=False,
                status_code=0,
                error="Request timed out",
            )
        except requests.RequestException as e:
            logger.error("FCM request failed: %s", str(e))
            return PushResponse(
                success=False,
                status_code=0,
                error=str(e),
            )
