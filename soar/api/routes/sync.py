"""
Sync Routes - mirror trips, flight bookings and preferences into the memory store.

Called by the app after login (POST /sync/user), after a trip is
created or edited (POST /sync/trip) and when onboarding preferences
are saved (POST /sync/preferences). Item-level failures are counted in
the response body; they are retried by the next sync.
"""
from fastapi import APIRouter, Depends

from soar.core.exceptions import ValidationError
from soar.core.logging_config import get_logger
from soar.core.validators import validate_user_id
from soar.database.ledger import SyncLedger, get_ledger
from soar.models.chat import ErrorResponse
from soar.models.sync import (
    LedgerResponse,
    SyncFlightBookingsRequest,
    SyncPreferencesRequest,
    SyncPreferencesResponse,
    SyncResponse,
    SyncResult,
    SyncTripRequest,
    SyncTripResponse,
    SyncTripsRequest,
    SyncUserDataRequest,
    SyncUserDataResponse,
)
from soar.services.sync_service import MemorySyncService, get_sync_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/sync",
    tags=["Sync"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        503: {"model": ErrorResponse, "description": "Sync ledger unavailable"},
    }
)


def _require_user_id(user_id: str) -> None:
    is_valid, error = validate_user_id(user_id)
    if not is_valid:
        raise ValidationError(error, field="user_id")


def _to_response(user_id: str, result: SyncResult) -> SyncResponse:
    return SyncResponse(
        user_id=user_id,
        success_count=result.success_count,
        failure_count=result.failure_count,
    )


@router.post("/trips", response_model=SyncResponse, summary="Sync trips not yet in memory")
def sync_trips(
    request: SyncTripsRequest,
    service: MemorySyncService = Depends(get_sync_service),
) -> SyncResponse:
    _require_user_id(request.user_id)
    result = service.sync_trips(request.user_id, request.trips)
    return _to_response(request.user_id, result)


@router.post(
    "/flight-bookings",
    response_model=SyncResponse,
    summary="Sync flight bookings not yet in memory",
)
def sync_flight_bookings(
    request: SyncFlightBookingsRequest,
    service: MemorySyncService = Depends(get_sync_service),
) -> SyncResponse:
    _require_user_id(request.user_id)
    result = service.sync_flight_bookings(request.user_id, request.flight_bookings)
    return _to_response(request.user_id, result)


@router.post(
    "/trip",
    response_model=SyncTripResponse,
    summary="Write one created or edited trip",
    description="Always rewrites the trip, even if it was synced before.",
)
def sync_trip(
    request: SyncTripRequest,
    service: MemorySyncService = Depends(get_sync_service),
) -> SyncTripResponse:
    _require_user_id(request.user_id)
    synced = service.sync_trip(request.user_id, request.trip)
    return SyncTripResponse(user_id=request.user_id, trip_id=request.trip.id, synced=synced)


@router.post(
    "/user",
    response_model=SyncUserDataResponse,
    summary="Login-time sync of trips and flight bookings",
)
def sync_user_data(
    request: SyncUserDataRequest,
    service: MemorySyncService = Depends(get_sync_service),
) -> SyncUserDataResponse:
    _require_user_id(request.user_id)
    results = service.sync_user_data(request.user_id, request.trips, request.flight_bookings)
    return SyncUserDataResponse(
        user_id=request.user_id,
        trips=_to_response(request.user_id, results["trips"]),
        flight_bookings=_to_response(request.user_id, results["flight_bookings"]),
    )


@router.post(
    "/preferences",
    response_model=SyncPreferencesResponse,
    summary="Write saved travel preferences as memories",
    description="Writes one memory per non-empty preference category, a budget and style memory, and a summary.",
)
def sync_preferences(
    request: SyncPreferencesRequest,
    service: MemorySyncService = Depends(get_sync_service),
) -> SyncPreferencesResponse:
    _require_user_id(request.user_id)
    result = service.sync_preferences(request.user_id, request.preferences)
    return SyncPreferencesResponse(
        user_id=request.user_id,
        success_count=result.success_count,
        failure_count=result.failure_count,
        synced=result.failure_count == 0,
    )


@router.get(
    "/{user_id}/ledger",
    response_model=LedgerResponse,
    summary="IDs already mirrored into memory for a user",
)
def get_user_ledger(
    user_id: str,
    ledger: SyncLedger = Depends(get_ledger),
) -> LedgerResponse:
    _require_user_id(user_id)
    entry = ledger.get_entry(user_id)
    return LedgerResponse(**entry.to_dict())
