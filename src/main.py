"""Cloud Function Entry Points.

This module provides the entry points for Google Cloud Functions.
They are thin wrappers that load configuration and invoke the orchestrator.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any

import functions_framework
from flask import Request

from src.core.nudges import parse_nudge
from src.core.sweep import is_authorized
from src.orchestrator import PushOrchestrator
from src.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    return load_config_from_env()


def _unauthorized() -> tuple[dict[str, Any], int]:
    return {"error": "Unauthorized"}, 401


@functions_framework.http
def push_sweep(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function: daily sweep of time-based pushes.

    Triggered by Cloud Scheduler with `Authorization: Bearer <cron secret>`.
    GET describes the endpoint; POST runs the sweep.

    Args:
        request: Flask request object

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    try:
        config = _get_config()

        if request.method == "GET":
            return {
                "endpoint": "push_sweep",
                "method": "POST",
                "description": "Daily push sweep for time-based notifications "
                               "(prep_reminder_7d, trip_started)",
                "authentication": "Bearer token required" if config.cron_secret
                                  else "No authentication configured",
            }, 200

        if not is_authorized(request.headers.get("Authorization"), config.cron_secret):
            logger.warning("Rejected unauthorized push sweep request")
            return _unauthorized()

        logger.info("Starting push sweep")
        result = PushOrchestrator(config).run_sweep()

        response = {
            "success": result.success,
            "summary": result.summary,
            "prep_reminder_7d": result.prep_reminder.to_dict(),
            "trip_started": result.trip_started.to_dict(),
            "trips_scanned": result.trips_scanned,
            "completed_at": datetime.now(timezone.utc).isoformat(),
        }
        if result.errors:
            response["errors"] = result.errors

        logger.info("Completed: %s", result.summary)
        return response, 200 if result.success else 500

    except Exception as e:
        logger.exception("Push sweep failed")
        return {"success": False, "error": str(e)}, 500


@functions_framework.cloud_event
def push_sweep_pubsub(cloud_event: Any) -> None:
    """Pub/Sub Cloud Function entry point.

    Alternative trigger for Cloud Scheduler via Pub/Sub. Pub/Sub delivery is
    authenticated by IAM, so no bearer check here.

    Args:
        cloud_event: CloudEvent from Pub/Sub
    """
    logger.info("Starting push sweep (Pub/Sub trigger)")

    try:
        config = _get_config()
        result = PushOrchestrator(config).run_sweep()

        logger.info("Completed: %s", result.summary)

        for error in result.errors:
            logger.error("Error: %s", error)

    except Exception:
        logger.exception("Push sweep failed")
        raise


@functions_framework.http
def nudge_push(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function: push a freshly computed nudge.

    Body: {"tripId": "...", "nudge": {"type": "...", "audience": "..."}}.
    Non-eligible nudge types are accepted and skipped.

    Args:
        request: Flask request object

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    try:
        config = _get_config()

        if not is_authorized(request.headers.get("Authorization"), config.cron_secret):
            return _unauthorized()

        body = request.get_json(silent=True) or {}
        trip_id = body.get("tripId")
        nudge_data = body.get("nudge")

        if not trip_id or not isinstance(nudge_data, dict) or not nudge_data.get("type"):
            return {"error": "tripId and nudge.type are required"}, 400

        nudge = parse_nudge(nudge_data)

        if not nudge.push_eligible:
            logger.info("Nudge %s is not push-eligible, skipping", nudge.type)
            return {"pushed": False, "reason": "not_push_eligible"}, 200

        orchestrator = PushOrchestrator(config)
        trip = orchestrator.firestore_client.get_trip(trip_id)
        if trip is None:
            return {"error": f"Trip not found: {trip_id}"}, 404

        stats = orchestrator.send_for_nudge(nudge, trip)
        return {"pushed": stats.sent > 0, **stats.to_dict()}, 200

    except Exception as e:
        logger.exception("Nudge push failed")
        return {"error": str(e)}, 500
