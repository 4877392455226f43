"""
Sync models - ledger state and sync outcomes.

Internal data transfer objects are dataclasses; the request/response
bodies of the /sync endpoints are Pydantic models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, NamedTuple, Set

from pydantic import BaseModel, Field

from soar.models.travel import FlightBooking, TravelPreference, Trip


class SyncKind(str, Enum):
    """Entity types tracked by the sync ledger."""
    TRIP = "trip"
    FLIGHT_BOOKING = "flight_booking"


class SyncResult(NamedTuple):
    """Outcome of a batch sync; compares equal to (success, failure)."""
    success_count: int
    failure_count: int


@dataclass
class SyncLedgerEntry:
    """
    IDs already mirrored into the memory store for one user.

    An absent ledger entry is represented by empty sets.
    """
    owner_user_id: str
    synced_trip_ids: Set[str] = field(default_factory=set)
    synced_flight_booking_ids: Set[str] = field(default_factory=set)

    def ids_for(self, kind: SyncKind) -> Set[str]:
        """Return the synced-ID set for an entity kind."""
        if kind is SyncKind.TRIP:
            return self.synced_trip_ids
        return self.synced_flight_booking_ids

    def to_dict(self) -> Dict[str, object]:
        return {
            "user_id": self.owner_user_id,
            "synced_trip_ids": sorted(self.synced_trip_ids),
            "synced_flight_booking_ids": sorted(self.synced_flight_booking_ids),
        }


# ============================================================
# API schemas
# ============================================================

class SyncTripsRequest(BaseModel):
    """Request body for POST /sync/trips."""
    user_id: str = Field(..., min_length=1, max_length=128)
    trips: List[Trip] = Field(default_factory=list)


class SyncFlightBookingsRequest(BaseModel):
    """Request body for POST /sync/flight-bookings."""
    user_id: str = Field(..., min_length=1, max_length=128)
    flight_bookings: List[FlightBooking] = Field(default_factory=list)


class SyncTripRequest(BaseModel):
    """Request body for POST /sync/trip (single trip create/update)."""
    user_id: str = Field(..., min_length=1, max_length=128)
    trip: Trip


class SyncUserDataRequest(BaseModel):
    """Request body for POST /sync/user (login-time sync)."""
    user_id: str = Field(..., min_length=1, max_length=128)
    trips: List[Trip] = Field(default_factory=list)
    flight_bookings: List[FlightBooking] = Field(default_factory=list)


class SyncPreferencesRequest(BaseModel):
    """Request body for POST /sync/preferences (onboarding save)."""
    user_id: str = Field(..., min_length=1, max_length=128)
    preferences: TravelPreference


class SyncResponse(BaseModel):
    """Counts returned by the batch sync endpoints."""
    user_id: str
    success_count: int
    failure_count: int
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class SyncTripResponse(BaseModel):
    """Result of a single-trip sync."""
    user_id: str
    trip_id: str
    synced: bool
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class SyncPreferencesResponse(BaseModel):
    """Per-memory counts of a preference sync; synced only with zero failures."""
    user_id: str
    success_count: int
    failure_count: int
    synced: bool
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class SyncUserDataResponse(BaseModel):
    """Per-collection counts of a login-time sync."""
    user_id: str
    trips: SyncResponse
    flight_bookings: SyncResponse


class LedgerResponse(BaseModel):
    """Contents of one user's sync ledger."""
    user_id: str
    synced_trip_ids: List[str]
    synced_flight_booking_ids: List[str]
