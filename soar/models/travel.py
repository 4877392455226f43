"""
Travel entities handed to the synchronizer.

These are immutable snapshots of what the app stores for a user. The
synchronizer only reads them; the field names follow the app's JSON
(camelCase) through aliases so payloads can be posted as-is.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


class TravelModel(BaseModel):
    """Shared config: frozen, accepts both snake_case and camelCase keys."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Flight(TravelModel):
    """A single flight leg."""
    id: str = Field(default_factory=_new_id)
    number: str
    airline: Optional[str] = None
    departure_name: str = Field(..., alias="departureName")
    departure_code: str = Field(..., alias="departureCode")
    arrival_name: str = Field(..., alias="arrivalName")
    arrival_code: str = Field(..., alias="arrivalCode")
    departure_date: datetime = Field(..., alias="departureDate")
    arrival_date: datetime = Field(..., alias="arrivalDate")


class Accommodation(TravelModel):
    """A hotel (or similar) stay booked through an agent."""
    id: str = Field(default_factory=_new_id)
    agent: str
    name: str
    address: str
    check_in_date: datetime = Field(..., alias="checkInDate")
    check_out_date: datetime = Field(..., alias="checkOutDate")


class Trip(TravelModel):
    """A named trip grouping ordered flights and accommodations."""
    id: str = Field(default_factory=_new_id)
    name: str
    flights: List[Flight] = Field(default_factory=list)
    accommodations: List[Accommodation] = Field(default_factory=list)
    start_date: datetime = Field(..., alias="startDate")
    end_date: datetime = Field(..., alias="endDate")
    owner_user_id: str = Field(..., alias="userId")


class FlightBooking(TravelModel):
    """A booked flight, standalone or attached to a trip."""
    id: str = Field(default_factory=_new_id)
    flight: Flight
    owner_user_id: str = Field(..., alias="userId")
    is_part_of_trip: bool = Field(default=False, alias="isPartOfTrip")
    trip_id: Optional[str] = Field(default=None, alias="tripId")


class TravelPreference(TravelModel):
    """Onboarding answers describing how a user likes to travel."""
    id: str = Field(default_factory=_new_id)
    owner_user_id: str = Field(..., alias="userId")
    preferred_destination_types: List[str] = Field(default_factory=list, alias="preferredDestinationTypes")
    preferred_destinations: List[str] = Field(default_factory=list, alias="preferredDestinations")
    accommodation_preferences: List[str] = Field(default_factory=list, alias="accommodationPreferences")
    budget_range: str = Field(..., alias="budgetRange")
    travel_style: str = Field(..., alias="travelStyle")
    activity_preferences: List[str] = Field(default_factory=list, alias="activityPreferences")
    dietary_restrictions: List[str] = Field(default_factory=list, alias="dietaryRestrictions")
    seasonal_preferences: List[str] = Field(default_factory=list, alias="seasonalPreferences")
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
