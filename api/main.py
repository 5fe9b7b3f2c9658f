"""Trip API - FastAPI service for Tripti.

Read-side endpoints used by the web and native apps: active membership
checks, the trip's primary call-to-action, back-navigation targets and
nudge push eligibility. Trip state is read from Firestore.
"""

import logging
import os
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from src.core.errors import InvalidInputError
from src.core.navigation import get_trip_back_destination, get_trip_primary_href
from src.core.nudges import is_push_eligible
from src.core.pending_actions import derive_pending_actions
from src.core.rules import get_active_traveler_ids
from src.core.trip import PendingAction, Trip
from src.shell.firestore_client import FirestoreClient, FirestoreConfig

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tripti API",
    description="Trip navigation and notification helpers for Tripti",
    version="1.0.0",
)


# ===== Models =====

class PendingActionIn(BaseModel):
    type: str = "other_input"
    priority: int = 5
    label: str
    href: str
    timestamp: str | None = None


class TripIn(BaseModel):
    id: str | None = None
    circleId: str | None = None


class PrimaryActionRequest(BaseModel):
    trip: TripIn
    pendingActions: list[PendingActionIn] = []


class NavigationOut(BaseModel):
    href: str
    label: str


# ===== Firestore =====

FIRESTORE_DATABASE = os.environ.get("FIRESTORE_DATABASE")

_firestore_client: FirestoreClient | None = None


def _get_firestore_client() -> FirestoreClient:
    """Get or create Firestore client."""
    global _firestore_client
    if _firestore_client is None:
        _firestore_client = FirestoreClient(FirestoreConfig(database=FIRESTORE_DATABASE))
        logger.info("Firestore client initialized for database: %s", FIRESTORE_DATABASE or "(default)")
    return _firestore_client


def _get_trip_or_404(client: FirestoreClient, trip_id: str) -> Trip:
    trip = client.get_trip(trip_id)
    if trip is None:
        raise HTTPException(status_code=404, detail=f"Trip not found: {trip_id}")
    return trip


def _to_pending_action(item: PendingActionIn) -> PendingAction:
    return PendingAction(
        action_type=item.type,
        priority=item.priority,
        label=item.label,
        href=item.href,
        timestamp=item.timestamp,
    )


# ===== Endpoints =====

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/circles/{circle_id}/members/{user_id}")
def get_membership(circle_id: str, user_id: str):
    """Check whether a user is an active member of a circle."""
    membership = _get_firestore_client().get_active_membership(user_id, circle_id)

    return {
        "circleId": circle_id,
        "userId": user_id,
        "active": membership is not None,
        "status": (membership or {}).get("status"),
    }


@app.get("/trips/{trip_id}/primary-action")
def get_primary_action(trip_id: str, user_id: str = Query(...)):
    """Get the primary call-to-action for a user on a trip."""
    client = _get_firestore_client()
    trip = _get_trip_or_404(client, trip_id)

    participants = client.list_trip_participants(trip_id)
    memberships: list[dict[str, Any]] = []

    if trip.is_collaborative:
        if not trip.circle_id or client.get_active_membership(user_id, trip.circle_id) is None:
            raise HTTPException(status_code=403, detail="Not a member of this trip's circle")
        memberships = client.list_circle_memberships(trip.circle_id)

    traveler_ids = get_active_traveler_ids(trip, memberships, participants)
    is_participant = any(
        p.get("userId") == user_id and p.get("status") == "active"
        for p in participants
    )

    actions = derive_pending_actions(
        trip,
        user_id,
        client.get_planning_state(trip_id, user_id),
        is_participant=is_participant,
        is_current_user_traveler=user_id in traveler_ids,
    )
    target = get_trip_primary_href(trip, actions)

    return {
        "tripId": trip_id,
        "primaryAction": target.to_dict(),
        "pendingActions": [a.to_dict() for a in actions],
    }


@app.post("/primary-action", response_model=NavigationOut)
async def resolve_primary_action(body: PrimaryActionRequest):
    """Resolve the primary action from caller-supplied, pre-sorted actions."""
    trip = Trip(id=body.trip.id, circle_id=body.trip.circleId)
    actions = [_to_pending_action(a) for a in body.pendingActions]

    try:
        target = get_trip_primary_href(trip, actions)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return NavigationOut(href=target.href, label=target.label)


@app.get("/trips/{trip_id}/back-destination")
def get_back_destination(
    trip_id: str,
    source: str | None = Query(default=None),
    circle_id: str | None = Query(default=None),
):
    """Get where the back button on a trip page should lead."""
    trip = None
    if not circle_id:
        trip = _get_firestore_client().get_trip(trip_id)

    return {"href": get_trip_back_destination(source, circle_id, trip)}


@app.get("/nudges/{nudge_type}/push-eligibility")
async def get_push_eligibility(nudge_type: str):
    """Check whether a nudge type is sent as a push notification."""
    return {"type": nudge_type, "eligible": is_push_eligible(nudge_type)}
